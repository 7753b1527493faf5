"""End-to-end content pipeline: synthesize, authorize, locate, upload, follow up."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from lofi_automator.auth import AuthorizedSession, AuthSession, CredentialStore
from lofi_automator.auth.session import CodeProvider
from lofi_automator.config.settings import Settings
from lofi_automator.config.templates import TemplateRegistry, load_registry
from lofi_automator.constants import Render
from lofi_automator.engagement import ChannelSummary, EngagementReporter
from lofi_automator.logging_config import get_logger
from lofi_automator.utils.feature_flags import FeatureFlags
from lofi_automator.video import ArtifactLocator, Synthesizer, UploadRequest, YouTubeUploader
from lofi_automator.video.synthesizer import Renderer, RenderOutput
from lofi_automator.video.uploader import UploadResult

logger = get_logger(__name__)


@dataclass(frozen=True)
class PublishOutcome:
    """What a publish run achieved."""

    result: UploadResult
    channel: ChannelSummary | None


class ContentPipeline:
    """Wires the pipeline stages together.

    Stages run strictly in sequence. Any stage error propagates as a
    PipelineError subclass; only engagement follow-ups are best-effort.
    """

    def __init__(
        self,
        settings: Settings,
        code_provider: CodeProvider,
        flags: FeatureFlags | None = None,
        registry: TemplateRegistry | None = None,
        renderer: Renderer | None = None,
        auth_session: AuthSession | None = None,
        reporter_factory: Callable[[AuthorizedSession], EngagementReporter] | None = None,
    ) -> None:
        self.settings = settings
        self.flags = flags or FeatureFlags()
        self.registry = registry or load_registry(
            settings.youtube.templates_file, settings.youtube.default_template
        )
        self.synthesizer = Synthesizer(settings.paths, settings.render, renderer, self.flags)
        self.locator = ArtifactLocator()
        self.uploader = YouTubeUploader(settings.youtube)
        self.auth_session = auth_session or AuthSession(
            CredentialStore(settings.youtube.client_secrets_path, settings.youtube.token_path),
            code_provider,
            scopes=settings.youtube.scopes,
        )
        self.reporter_factory = reporter_factory or (
            lambda session: EngagementReporter(session, self.flags)
        )

    def produce(self, template_key: str | None = None) -> RenderOutput:
        """Render a video sized for the template's duration class."""
        template = self.registry.resolve(template_key)
        duration = self.synthesizer.duration_for(template)
        logger.info("production_starting", template=template.key, duration=duration)
        return self.synthesizer.produce(duration)

    def publish(self, template_key: str | None = None) -> PublishOutcome | None:
        """Upload the newest video with a template's metadata.

        Returns:
            The outcome, or None when there is no video to upload
        """
        template = self.registry.resolve(template_key)
        logger.info("publish_starting", template=template.key, title=template.title[:50])

        session = self.auth_session.authorize()

        artifact = self.locator.latest(self.settings.paths.videos_dir, Render.VIDEO_EXTENSION)
        if artifact is None:
            logger.warning("nothing_to_upload", path=str(self.settings.paths.videos_dir))
            return None

        result = self.uploader.publish(UploadRequest(template=template, artifact=artifact), session)

        reporter = self.reporter_factory(session)
        reporter.post_engagement_comment(result.remote_id)
        channel = reporter.report_channel_stats()
        return PublishOutcome(result=result, channel=channel)

    def run(self, template_key: str | None = None) -> tuple[RenderOutput, PublishOutcome | None]:
        """Produce a video, then publish it."""
        output = self.produce(template_key)
        return output, self.publish(template_key)
