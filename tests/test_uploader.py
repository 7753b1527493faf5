"""Tests for the YouTube uploader."""

import json
from unittest.mock import MagicMock

import httplib2
import pytest
from google.auth.exceptions import RefreshError, TransportError
from googleapiclient.errors import HttpError

from lofi_automator.config.settings import YouTubeConfig
from lofi_automator.config.templates import Template, TemplateRegistry
from lofi_automator.errors import UploadError
from lofi_automator.video.artifacts import Artifact
from lofi_automator.video.uploader import UploadRequest, YouTubeUploader, http_error_reason


@pytest.fixture
def uploader():
    return YouTubeUploader(YouTubeConfig())


@pytest.fixture
def template():
    return TemplateRegistry.builtin().resolve("lofi_nature")


@pytest.fixture
def large_video(tmp_path):
    """A sparse 50 MB file."""
    path = tmp_path / "lofi-nature-1700000000000.mp4"
    with open(path, "wb") as f:
        f.truncate(50 * 1024 * 1024)
    return Artifact.from_path(path)


def http_error(status, message=None):
    resp = MagicMock(status=status, reason="Forbidden")
    content = json.dumps({"error": {"message": message}}).encode() if message else b"oops"
    return HttpError(resp, content)


class TestBuildBody:
    """Test request body construction."""

    def test_fields(self, uploader, template):
        body = uploader.build_body(template)

        assert body["snippet"]["title"] == template.title
        assert body["snippet"]["description"] == template.description
        assert body["snippet"]["tags"] == list(template.tags)
        assert body["snippet"]["categoryId"] == "10"
        assert body["status"] == {"privacyStatus": "public", "selfDeclaredMadeForKids": False}

    def test_long_title_truncated(self, uploader):
        template = Template(key="long", title="x" * 150, description="d", tags=("t",))
        assert len(uploader.build_body(template)["snippet"]["title"]) == 100


class TestPublish:
    """Test the upload call."""

    def test_success(self, uploader, template, large_video, youtube_session, youtube_api):
        result = uploader.publish(UploadRequest(template, large_video), youtube_session)

        assert result.remote_id == "abc123XYZ"
        assert result.url == "https://www.youtube.com/watch?v=abc123XYZ"

        kwargs = youtube_api.videos.return_value.insert.call_args.kwargs
        assert kwargs["part"] == "snippet,status"
        assert kwargs["body"]["snippet"]["title"].startswith("🌿 Lofi Nature Vibes")
        assert kwargs["media_body"].resumable()

    def test_progress_chunks(self, uploader, template, large_video, youtube_session, youtube_api):
        progress = MagicMock()
        progress.progress.return_value = 0.5
        youtube_api.videos.return_value.insert.return_value.next_chunk.side_effect = [
            (progress, None),
            (None, {"id": "later"}),
        ]

        result = uploader.publish(UploadRequest(template, large_video), youtube_session)
        assert result.remote_id == "later"

    def test_custom_watch_host(self, template, large_video, youtube_session):
        uploader = YouTubeUploader(YouTubeConfig(watch_host="youtube.example"))
        result = uploader.publish(UploadRequest(template, large_video), youtube_session)
        assert result.url == "https://youtube.example/watch?v=abc123XYZ"

    def test_api_rejection(self, uploader, template, large_video, youtube_session, youtube_api):
        youtube_api.videos.return_value.insert.return_value.next_chunk.side_effect = http_error(
            403, "The user has exceeded the number of videos they may upload."
        )

        with pytest.raises(UploadError) as exc_info:
            uploader.publish(UploadRequest(template, large_video), youtube_session)

        assert exc_info.value.stage == "upload"
        assert "exceeded the number of videos" in exc_info.value.reason

    def test_revoked_token(self, uploader, template, large_video, youtube_session, youtube_api):
        youtube_api.videos.return_value.insert.return_value.next_chunk.side_effect = RefreshError(
            "invalid_grant: Token has been expired or revoked."
        )

        with pytest.raises(UploadError) as exc_info:
            uploader.publish(UploadRequest(template, large_video), youtube_session)

        assert exc_info.value.stage == "upload"
        assert "invalid_grant" in exc_info.value.reason
        assert "delete token.json" in exc_info.value.reason

    @pytest.mark.parametrize(
        "error",
        [TransportError("dns lookup failed"), httplib2.ServerNotFoundError("Unable to find the server")],
    )
    def test_transport_failure(self, uploader, template, large_video, youtube_session, youtube_api, error):
        youtube_api.videos.return_value.insert.return_value.next_chunk.side_effect = error

        with pytest.raises(UploadError):
            uploader.publish(UploadRequest(template, large_video), youtube_session)

    def test_missing_file(self, uploader, template, tmp_path, youtube_session):
        path = tmp_path / "gone.mp4"
        path.write_bytes(b"")
        artifact = Artifact.from_path(path)
        path.unlink()

        with pytest.raises(UploadError):
            uploader.publish(UploadRequest(template, artifact), youtube_session)

    def test_response_without_id(self, uploader, template, large_video, youtube_session, youtube_api):
        youtube_api.videos.return_value.insert.return_value.next_chunk.return_value = (None, {})
        with pytest.raises(UploadError):
            uploader.publish(UploadRequest(template, large_video), youtube_session)


class TestHttpErrorReason:
    def test_api_message(self):
        assert http_error_reason(http_error(400, "Invalid category")) == "Invalid category"

    def test_non_json_body(self):
        assert http_error_reason(http_error(500))
