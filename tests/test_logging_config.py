"""Tests for logging configuration."""

import json
import logging

import pytest
import structlog

from lofi_automator.logging_config import configure_logging, get_logger


@pytest.fixture(autouse=True)
def restore_logging():
    """Put the root logger and structlog back after each test."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers = handlers
    root.setLevel(level)
    structlog.reset_defaults()


def json_lines(text):
    return [json.loads(line) for line in text.splitlines() if line.strip()]


class TestJsonOutput:
    """Test the unattended (JSON) mode."""

    def test_pipeline_event(self, capsys):
        configure_logging()
        get_logger("lofi_automator.video.uploader").info("upload_complete", video_id="abc123XYZ")

        captured = capsys.readouterr()
        assert captured.out == ""
        [record] = json_lines(captured.err)
        assert record["event"] == "upload_complete"
        assert record["video_id"] == "abc123XYZ"
        assert record["level"] == "info"
        assert record["logger"] == "lofi_automator.video.uploader"
        assert "timestamp" in record

    def test_third_party_records_share_format(self, capsys):
        configure_logging()
        logging.getLogger("googleapiclient.errors").warning("quota exceeded")

        [record] = json_lines(capsys.readouterr().err)
        assert record["event"] == "quota exceeded"
        assert record["level"] == "warning"
        assert record["logger"] == "googleapiclient.errors"

    def test_chatty_loggers_quieted(self, capsys):
        configure_logging(log_level="DEBUG")
        logging.getLogger("googleapiclient.discovery_cache").info("file_cache is only supported")

        assert capsys.readouterr().err == ""

    def test_level_filter(self, capsys):
        configure_logging(log_level="WARNING")
        log = get_logger("lofi_automator.pipeline")
        log.info("publish_starting")
        log.warning("nothing_to_upload")

        assert [r["event"] for r in json_lines(capsys.readouterr().err)] == ["nothing_to_upload"]

    def test_reconfigure_keeps_one_handler(self):
        configure_logging()
        configure_logging()
        assert len(logging.getLogger().handlers) == 1


def test_debug_console_output(capsys):
    configure_logging(debug=True)
    get_logger("lofi_automator.cli").info("cli_started", debug=True)

    err = capsys.readouterr().err
    assert "cli_started" in err
    with pytest.raises(json.JSONDecodeError):
        json.loads(err)
