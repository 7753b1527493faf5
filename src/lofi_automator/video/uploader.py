"""YouTube video upload functionality."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Protocol

import httplib2
from google.auth.exceptions import GoogleAuthError, RefreshError
from googleapiclient.errors import HttpError
from googleapiclient.http import MediaFileUpload

from lofi_automator.config.settings import YouTubeConfig
from lofi_automator.config.templates import Template
from lofi_automator.constants import YouTube
from lofi_automator.errors import UploadError
from lofi_automator.logging_config import get_logger
from lofi_automator.video.artifacts import Artifact

logger = get_logger(__name__)


class YouTubeSession(Protocol):
    def youtube(self) -> Any:
        ...


@dataclass(frozen=True)
class UploadRequest:
    template: Template
    artifact: Artifact


@dataclass(frozen=True)
class UploadResult:
    remote_id: str
    url: str


def http_error_reason(error: HttpError) -> str:
    """Pull the API's own message out of an HttpError when it has one."""
    try:
        payload = json.loads(error.content.decode("utf-8"))
        message = payload["error"]["message"]
        if message:
            return str(message)
    except (ValueError, KeyError, TypeError, AttributeError):
        pass
    return getattr(error, "reason", None) or str(error)


class YouTubeUploader:
    """Uploads videos to YouTube."""

    def __init__(self, config: YouTubeConfig) -> None:
        self.config = config

    def build_body(self, template: Template) -> dict:
        """Build the videos.insert request body from a template."""
        return {
            "snippet": {
                "title": template.title[:YouTube.MAX_TITLE_LENGTH],
                "description": template.description,
                "tags": list(template.tags),
                "categoryId": template.category_id,
            },
            "status": {
                "privacyStatus": template.privacy_status,
                "selfDeclaredMadeForKids": False,
            },
        }

    def watch_url(self, video_id: str) -> str:
        return f"https://{self.config.watch_host}/watch?v={video_id}"

    def publish(self, request: UploadRequest, session: YouTubeSession) -> UploadResult:
        """Upload an artifact with a template's metadata.

        The whole file goes up as one resumable upload; interrupted
        transfers are not resumed across runs.

        Args:
            request: Template and artifact to publish
            session: Authorized session providing the YouTube resource

        Returns:
            Remote video ID and watch URL

        Raises:
            UploadError: The API rejected the call or the file could not be read
        """
        template = request.template
        path = request.artifact.path
        body = self.build_body(template)

        logger.info(
            "uploading_to_youtube",
            template=template.key,
            title=template.title[:50],
            path=str(path),
            size_mb=round(request.artifact.size_bytes / 1024 / 1024, 2),
        )

        try:
            media = MediaFileUpload(
                str(path),
                mimetype=YouTube.VIDEO_MIMETYPE,
                chunksize=YouTube.UPLOAD_CHUNK_SIZE,
                resumable=True,
            )
            insert = session.youtube().videos().insert(
                part="snippet,status",
                body=body,
                media_body=media,
            )
            response = None
            while response is None:
                status, response = insert.next_chunk()
                if status:
                    logger.info("upload_progress", percent=int(status.progress() * 100))
        except HttpError as e:
            reason = http_error_reason(e)
            logger.error("upload_failed", path=str(path), reason=reason)
            raise UploadError(reason) from e
        except GoogleAuthError as e:
            logger.error("upload_failed", path=str(path), auth_error=str(e))
            hint = (
                f"; delete {self.config.token_path} and run again to re-authorize"
                if isinstance(e, RefreshError)
                else ""
            )
            raise UploadError(f"credentials rejected: {e}{hint}") from e
        except httplib2.HttpLib2Error as e:
            logger.error("upload_failed", path=str(path), error=str(e))
            raise UploadError(f"connection failed: {e}") from e
        except OSError as e:
            logger.error("upload_failed", path=str(path), error=str(e))
            raise UploadError(f"cannot read {path}: {e}") from e

        video_id = response.get("id")
        if not video_id:
            raise UploadError(f"upload response carried no video id: {response!r}")

        url = self.watch_url(video_id)
        logger.info("upload_complete", video_id=video_id, url=url)
        return UploadResult(remote_id=video_id, url=url)
