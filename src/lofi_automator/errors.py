"""Pipeline error taxonomy."""

from __future__ import annotations


class PipelineError(Exception):
    """Base class for errors that halt the content pipeline.

    Every error carries the name of the stage that failed so the operator
    can tell where the run stopped.
    """

    stage = "pipeline"

    def __init__(self, message: str, stage: str | None = None) -> None:
        super().__init__(message)
        if stage is not None:
            self.stage = stage


class ConfigurationError(PipelineError):
    """Required configuration (client secrets, template catalog) is missing or invalid."""

    stage = "config"


class RenderError(PipelineError):
    """The external renderer exited with a non-zero status."""

    def __init__(self, stage: str, exit_info: int | str) -> None:
        self.exit_info = exit_info
        super().__init__(f"renderer exited with {exit_info}", stage=stage)


class AuthError(PipelineError):
    """Authorization code was empty or the token exchange was rejected."""

    stage = "auth"


class UploadError(PipelineError):
    """The remote API rejected the publish call."""

    stage = "upload"

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(reason)


class EngagementError(PipelineError):
    """A post-publish follow-up failed. Logged, never propagated."""

    def __init__(self, action: str, cause: Exception) -> None:
        self.cause = cause
        super().__init__(str(cause), stage=f"engagement.{action}")
