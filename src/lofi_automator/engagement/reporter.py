"""Best-effort follow-ups after a successful publish."""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Any

from lofi_automator.errors import EngagementError
from lofi_automator.logging_config import get_logger
from lofi_automator.utils.feature_flags import FeatureFlags
from lofi_automator.video.uploader import YouTubeSession

logger = get_logger(__name__)

COMMENTS = [
    "🌙 Hope you're enjoying this relaxing lofi session! What are you studying or working on today?",
    "✨ Take a deep breath and enjoy the peaceful vibes. Good luck with your work!",
    "☕ Perfect for focus and relaxation. Let us know if you need more content like this!",
    "🌿 Thanks for watching! Like and subscribe for more calming study music!",
]


@dataclass(frozen=True)
class ChannelSummary:
    """Headline numbers for the authorized channel."""

    title: str
    subscriber_count: int | None
    view_count: int | None
    video_count: int | None


def _count(statistics: dict, key: str) -> int | None:
    value = statistics.get(key)
    try:
        return int(value) if value is not None else None
    except (TypeError, ValueError):
        return None


class EngagementReporter:
    """Posts a canned comment and reads channel stats.

    Nothing here may fail a publish: every error is logged and dropped.
    """

    def __init__(
        self,
        session: YouTubeSession,
        flags: FeatureFlags | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.session = session
        self.flags = flags or FeatureFlags()
        self.rng = rng or random.Random()

    def _log_failure(self, action: str, cause: Exception) -> None:
        error = EngagementError(action, cause)
        logger.warning("engagement_failed", stage=error.stage, error=str(error))

    def choose_comment(self) -> str:
        return self.rng.choice(COMMENTS)

    def post_engagement_comment(self, remote_id: str) -> None:
        """Pick a canned comment and post it when auto-comments are enabled."""
        try:
            message = self.choose_comment()
            if not self.flags.enable_auto_comment:
                logger.info("auto_comment_disabled", video_id=remote_id, message=message)
                return

            self.session.youtube().commentThreads().insert(
                part="snippet",
                body={
                    "snippet": {
                        "videoId": remote_id,
                        "topLevelComment": {"snippet": {"textOriginal": message}},
                    }
                },
            ).execute()
            logger.info("comment_posted", video_id=remote_id)
        except Exception as e:
            self._log_failure("comment", e)

    def report_channel_stats(self) -> ChannelSummary | None:
        """Fetch channel statistics, or None when unavailable."""
        if not self.flags.enable_channel_stats:
            return None

        try:
            response: dict[str, Any] = self.session.youtube().channels().list(
                part="snippet,statistics",
                mine=True,
            ).execute()
            items = response.get("items") or []
            if not items:
                logger.info("channel_not_found")
                return None

            channel = items[0]
            statistics = channel.get("statistics", {})
            summary = ChannelSummary(
                title=channel.get("snippet", {}).get("title", ""),
                subscriber_count=_count(statistics, "subscriberCount"),
                view_count=_count(statistics, "viewCount"),
                video_count=_count(statistics, "videoCount"),
            )
        except Exception as e:
            self._log_failure("channel_stats", e)
            return None

        logger.info(
            "channel_stats",
            channel=summary.title,
            subscribers=summary.subscriber_count,
            views=summary.view_count,
            videos=summary.video_count,
        )
        return summary
