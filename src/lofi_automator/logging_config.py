"""Structured logging configuration."""

import logging
import sys
from typing import Any

import structlog

# Chatty at INFO during every upload
QUIET_LOGGERS = ("googleapiclient.discovery_cache", "googleapiclient.http", "google_auth_httplib2")


def _renderer(debug: bool) -> list[Any]:
    if debug:
        return [structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())]
    return [
        structlog.processors.dict_tracebacks,
        structlog.processors.JSONRenderer(ensure_ascii=False),
    ]


def configure_logging(log_level: str = "INFO", debug: bool = False) -> None:
    """Send pipeline events and third-party log records to one stderr handler.

    structlog events and plain ``logging`` records from google-api-python-client
    and google-auth share a timestamp, level and renderer. stdout is left to
    the CLI's own output.

    Args:
        log_level: Minimum log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        debug: Human-readable console lines instead of one JSON object per line
    """
    level = getattr(logging, log_level.upper())
    stamped: list[Any] = [
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=stamped,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                *_renderer(debug),
            ],
        )
    )
    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *stamped,
            structlog.processors.StackInfoRenderer(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None):
    """Get a structured logger bound to a module name."""
    return structlog.get_logger(name)
