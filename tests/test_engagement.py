"""Tests for post-publish engagement."""

import random

import pytest

from lofi_automator.engagement.reporter import COMMENTS, EngagementReporter
from lofi_automator.utils.feature_flags import FeatureFlags


class TestComment:
    """Test the auto-comment follow-up."""

    def test_disabled_by_default(self, youtube_session, youtube_api):
        reporter = EngagementReporter(youtube_session)
        reporter.post_engagement_comment("abc123XYZ")
        youtube_api.commentThreads.assert_not_called()

    def test_posts_when_enabled(self, youtube_session, youtube_api):
        flags = FeatureFlags(enable_auto_comment=True)
        reporter = EngagementReporter(youtube_session, flags, rng=random.Random(7))

        reporter.post_engagement_comment("abc123XYZ")

        kwargs = youtube_api.commentThreads.return_value.insert.call_args.kwargs
        snippet = kwargs["body"]["snippet"]
        assert kwargs["part"] == "snippet"
        assert snippet["videoId"] == "abc123XYZ"
        assert snippet["topLevelComment"]["snippet"]["textOriginal"] in COMMENTS

    def test_failure_swallowed(self, youtube_session, youtube_api):
        youtube_api.commentThreads.return_value.insert.return_value.execute.side_effect = (
            RuntimeError("insufficient scope")
        )
        reporter = EngagementReporter(youtube_session, FeatureFlags(enable_auto_comment=True))

        assert reporter.post_engagement_comment("abc123XYZ") is None

    def test_choose_comment(self, youtube_session):
        reporter = EngagementReporter(youtube_session, rng=random.Random(1))
        assert reporter.choose_comment() in COMMENTS


class TestChannelStats:
    """Test channel statistics."""

    def test_summary(self, youtube_session, youtube_api):
        summary = EngagementReporter(youtube_session).report_channel_stats()

        assert summary.title == "Peaceful Lofi"
        assert summary.subscriber_count == 120
        assert summary.view_count == 4500
        assert summary.video_count == 9
        youtube_api.channels.return_value.list.assert_called_once_with(
            part="snippet,statistics", mine=True
        )

    def test_hidden_subscriber_count(self, youtube_session, youtube_api):
        youtube_api.channels.return_value.list.return_value.execute.return_value = {
            "items": [{"snippet": {"title": "Quiet"}, "statistics": {"viewCount": "3"}}]
        }
        summary = EngagementReporter(youtube_session).report_channel_stats()
        assert summary.subscriber_count is None
        assert summary.view_count == 3

    @pytest.mark.parametrize("response", [{}, {"items": []}])
    def test_no_channel(self, youtube_session, youtube_api, response):
        youtube_api.channels.return_value.list.return_value.execute.return_value = response
        assert EngagementReporter(youtube_session).report_channel_stats() is None

    def test_failure_swallowed(self, youtube_session, youtube_api):
        youtube_api.channels.return_value.list.return_value.execute.side_effect = RuntimeError("403")
        assert EngagementReporter(youtube_session).report_channel_stats() is None

    def test_disabled(self, youtube_session, youtube_api):
        flags = FeatureFlags(enable_channel_stats=False)
        assert EngagementReporter(youtube_session, flags).report_channel_stats() is None
        youtube_api.channels.assert_not_called()
