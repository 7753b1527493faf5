"""Pytest configuration and fixtures."""

import json
import os
import sys
from pathlib import Path
from unittest.mock import MagicMock

# Add src to path
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

import pytest

from lofi_automator.config.settings import PathsConfig, RenderConfig, Settings, YouTubeConfig


def pytest_configure(config):
    """Configure pytest."""
    config.addinivalue_line("markers", "slow: marks tests as slow")
    config.addinivalue_line("markers", "integration: marks tests as integration tests")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep settings and feature flags from leaking in from the host."""
    for key in list(os.environ):
        if key.startswith(("PATH_", "RENDER_", "YT_", "FEATURE_")):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def settings(tmp_path):
    """Settings rooted in a temporary directory."""
    return Settings(
        paths=PathsConfig(output_dir=tmp_path / "output"),
        render=RenderConfig(),
        youtube=YouTubeConfig(
            client_secrets_path=tmp_path / "client_secrets.json",
            token_path=tmp_path / "token.json",
        ),
    )


@pytest.fixture
def client_secrets(settings):
    """Write a Cloud Console style client secrets file."""
    path = settings.youtube.client_secrets_path
    path.write_text(
        json.dumps(
            {
                "installed": {
                    "client_id": "client-123.apps.googleusercontent.com",
                    "client_secret": "shh",
                    "redirect_uris": ["http://localhost"],
                    "auth_uri": "https://accounts.google.com/o/oauth2/auth",
                    "token_uri": "https://oauth2.googleapis.com/token",
                }
            }
        )
    )
    return path


@pytest.fixture
def saved_token(settings):
    """Write a persisted token file."""
    path = settings.youtube.token_path
    path.write_text(
        json.dumps(
            {
                "access_token": "ya29.access",
                "refresh_token": "1//refresh",
                "expiry": "2030-01-01T00:00:00",
                "token_uri": "https://oauth2.googleapis.com/token",
                "scopes": ["https://www.googleapis.com/auth/youtube.upload"],
            }
        )
    )
    return path


class FakeRenderer:
    """Renderer double that records specs and optionally writes output."""

    def __init__(self, exit_status=0, payload=b"\x00" * 2048, write_on_failure=False):
        self.exit_status = exit_status
        self.payload = payload
        self.write_on_failure = write_on_failure
        self.specs = []

    def invoke(self, spec):
        self.specs.append(spec)
        if self.exit_status == 0 or self.write_on_failure:
            spec.output_path.parent.mkdir(parents=True, exist_ok=True)
            spec.output_path.write_bytes(self.payload)
        return self.exit_status


@pytest.fixture
def fake_renderer():
    return FakeRenderer()


@pytest.fixture
def youtube_api():
    """Mock YouTube resource whose upload returns video id 'abc123XYZ'."""
    api = MagicMock()
    api.videos.return_value.insert.return_value.next_chunk.return_value = (
        None,
        {"id": "abc123XYZ"},
    )
    api.channels.return_value.list.return_value.execute.return_value = {
        "items": [
            {
                "snippet": {"title": "Peaceful Lofi"},
                "statistics": {"subscriberCount": "120", "viewCount": "4500", "videoCount": "9"},
            }
        ]
    }
    return api


class FakeSession:
    def __init__(self, api):
        self.api = api

    def youtube(self):
        return self.api


@pytest.fixture
def youtube_session(youtube_api):
    return FakeSession(youtube_api)
