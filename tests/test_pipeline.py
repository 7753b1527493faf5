"""End-to-end tests for the content pipeline."""

from unittest.mock import MagicMock

import pytest
from googleapiclient.errors import HttpError

from conftest import FakeRenderer
from lofi_automator.auth.session import AuthState
from lofi_automator.errors import ConfigurationError, RenderError, UploadError
from lofi_automator.pipeline import ContentPipeline
from lofi_automator.utils.feature_flags import FeatureFlags


@pytest.fixture
def api_build(monkeypatch, youtube_api):
    """Route discovery.build to the mock API resource."""
    calls = []

    def fake_build(*args, **kwargs):
        calls.append((args, kwargs))
        return youtube_api

    monkeypatch.setattr("lofi_automator.auth.session.build", fake_build)
    return calls


def no_prompt(url):
    raise AssertionError("code prompt should not be shown")


@pytest.fixture
def pipeline(settings, fake_renderer):
    return ContentPipeline(settings, no_prompt, renderer=fake_renderer)


class TestProduce:
    def test_standard_template(self, pipeline, fake_renderer):
        output = pipeline.produce("worship")

        assert output.video.exists()
        assert fake_renderer.specs[0].duration_seconds == 3600

    def test_short_template(self, pipeline, fake_renderer):
        pipeline.produce("shorts")
        assert fake_renderer.specs[0].duration_seconds == 60
        assert fake_renderer.specs[0].fade_out_start_seconds == 55


@pytest.mark.integration
class TestPublish:
    """Authorize, locate and upload against a mocked API."""

    def test_happy_path(self, pipeline, client_secrets, saved_token, api_build, youtube_api):
        pipeline.produce()
        outcome = pipeline.publish("lofi_nature")

        assert outcome.result.remote_id == "abc123XYZ"
        assert outcome.result.url == "https://www.youtube.com/watch?v=abc123XYZ"
        assert outcome.channel.title == "Peaceful Lofi"
        assert pipeline.auth_session.state is AuthState.AUTHORIZED

        body = youtube_api.videos.return_value.insert.call_args.kwargs["body"]
        assert body["snippet"]["title"].startswith("🌿 Lofi Nature Vibes")
        youtube_api.commentThreads.assert_not_called()

    def test_uploads_newest_video(self, pipeline, settings, client_secrets, saved_token, api_build, youtube_api):
        videos = settings.paths.videos_dir
        videos.mkdir(parents=True)
        (videos / "lofi-nature-1700000000000.mp4").write_bytes(b"old")
        (videos / "lofi-nature-1700000900000.mp4").write_bytes(b"new")

        pipeline.publish()

        media = youtube_api.videos.return_value.insert.call_args.kwargs["media_body"]
        assert media._filename.endswith("lofi-nature-1700000900000.mp4")

    def test_nothing_to_upload(self, pipeline, client_secrets, saved_token, api_build, youtube_api):
        assert pipeline.publish() is None
        youtube_api.videos.assert_not_called()

    def test_unknown_template_falls_back(self, pipeline, client_secrets, saved_token, api_build, youtube_api):
        pipeline.produce()
        pipeline.publish("no_such_template")

        body = youtube_api.videos.return_value.insert.call_args.kwargs["body"]
        assert body["snippet"]["title"] == pipeline.registry.default.title

    def test_missing_credentials(self, pipeline, api_build):
        pipeline.produce()
        with pytest.raises(ConfigurationError):
            pipeline.publish()
        assert api_build == []

    def test_upload_error_skips_engagement(self, settings, fake_renderer, client_secrets, saved_token, api_build, youtube_api):
        youtube_api.videos.return_value.insert.return_value.next_chunk.side_effect = HttpError(
            MagicMock(status=400, reason="Bad Request"), b'{"error": {"message": "invalid"}}'
        )
        pipeline = ContentPipeline(
            settings, no_prompt, flags=FeatureFlags(enable_auto_comment=True), renderer=fake_renderer
        )
        pipeline.produce()

        with pytest.raises(UploadError):
            pipeline.publish()
        youtube_api.commentThreads.assert_not_called()
        youtube_api.channels.assert_not_called()

    def test_engagement_failure_does_not_fail_publish(self, settings, fake_renderer, client_secrets, saved_token, api_build, youtube_api):
        youtube_api.commentThreads.return_value.insert.return_value.execute.side_effect = RuntimeError(
            "forbidden"
        )
        pipeline = ContentPipeline(
            settings, no_prompt, flags=FeatureFlags(enable_auto_comment=True), renderer=fake_renderer
        )
        pipeline.produce()

        assert pipeline.publish().result.remote_id == "abc123XYZ"


class TestRun:
    def test_render_failure_stops_run(self, settings, client_secrets, saved_token, api_build, youtube_api):
        pipeline = ContentPipeline(settings, no_prompt, renderer=FakeRenderer(exit_status=1))

        with pytest.raises(RenderError):
            pipeline.run()
        youtube_api.videos.assert_not_called()

    def test_full_run(self, pipeline, client_secrets, saved_token, api_build):
        output, outcome = pipeline.run("christian_lofi")
        assert output.video.exists()
        assert outcome.result.remote_id == "abc123XYZ"
