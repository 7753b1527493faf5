"""Render specifications and the external renderer that executes them."""

from __future__ import annotations

import shlex
import shutil
import subprocess
import time
from collections.abc import Callable
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Protocol

from lofi_automator.config.settings import PathsConfig, RenderConfig
from lofi_automator.config.templates import Template
from lofi_automator.constants import Colors, Render
from lofi_automator.errors import RenderError
from lofi_automator.logging_config import get_logger
from lofi_automator.utils.feature_flags import FeatureFlags

logger = get_logger(__name__)


@dataclass(frozen=True)
class Palette:
    """Visual parameters handed to the renderer."""

    background: str = Colors.BACKGROUND
    text_color: str = Colors.TEXT
    accent_color: str = Colors.ACCENT

    @classmethod
    def from_config(cls, config: RenderConfig) -> "Palette":
        return cls(
            background=config.background_color,
            text_color=config.text_color,
            accent_color=config.accent_color,
        )


@dataclass(frozen=True)
class RenderSpec:
    """One renderer invocation: a solid-color clip with fades.

    ``fade_out_start_seconds`` always equals ``duration_seconds - fade_out_seconds``.
    """

    duration_seconds: int
    canvas_size: tuple[int, int]
    background_color: str
    fade_in_seconds: int
    fade_out_start_seconds: int
    fade_out_seconds: int
    output_path: Path
    overlay_lines: tuple[str, ...] = ()
    text_color: str = Colors.TEXT
    accent_color: str = Colors.ACCENT
    still: bool = False

    def __post_init__(self) -> None:
        if isinstance(self.duration_seconds, bool) or not isinstance(self.duration_seconds, int):
            raise ValueError(f"duration_seconds must be an integer, got {self.duration_seconds!r}")
        if self.duration_seconds <= 0:
            raise ValueError(f"duration_seconds must be positive, got {self.duration_seconds}")
        if self.fade_out_start_seconds != self.duration_seconds - self.fade_out_seconds:
            raise ValueError("fade_out_start_seconds must equal duration_seconds - fade_out_seconds")
        if self.fade_in_seconds > self.duration_seconds:
            raise ValueError("fade_in_seconds exceeds the clip duration")


@dataclass(frozen=True)
class RenderOutput:
    """Files produced by one synthesis run."""

    video: Path
    thumbnail: Path | None


class Renderer(Protocol):
    """Anything that can execute a RenderSpec and report an exit status."""

    def invoke(self, spec: RenderSpec) -> int:
        ...


def _escape_drawtext(text: str) -> str:
    # drawtext option values are single-quoted; ':' and '%' are still special inside
    return (
        text.replace("\\", "\\\\")
        .replace("'", "’")
        .replace(":", "\\:")
        .replace("%", "\\%")
    )


class FFmpegRenderer:
    """Runs ffmpeg through a bash invocation descriptor.

    The descriptor is written to the scratch directory before execution so
    a failed render can be re-run or inspected by hand.
    """

    def __init__(self, config: RenderConfig, scratch_dir: Path) -> None:
        self.config = config
        self.scratch_dir = Path(scratch_dir)

    def build_filters(self, spec: RenderSpec) -> str:
        filters = []
        font = self.config.font_file
        for index, line in enumerate(spec.overlay_lines[:2]):
            if index == 0:
                size, color, y = Render.TITLE_FONT_SIZE, spec.text_color, "(h-text_h)/2-30"
            else:
                size, color, y = Render.SUBTITLE_FONT_SIZE, spec.accent_color, "(h-text_h)/2+40"
            filters.append(
                f"drawtext=fontfile={font}:text='{_escape_drawtext(line)}'"
                f":fontcolor={color}:fontsize={size}:x=(w-text_w)/2:y={y}"
                ":shadowcolor=black:shadowx=2:shadowy=2"
            )
        if spec.fade_in_seconds:
            filters.append(f"fade=t=in:st=0:d={spec.fade_in_seconds}")
        if spec.fade_out_seconds:
            filters.append(
                f"fade=t=out:st={spec.fade_out_start_seconds}:d={spec.fade_out_seconds}"
            )
        return ",".join(filters)

    def build_command(self, spec: RenderSpec) -> list[str]:
        """Build the ffmpeg argument list for a spec."""
        width, height = spec.canvas_size
        command = [
            self.config.ffmpeg_binary,
            "-y",
            "-f", "lavfi",
            "-i", f"color=c={spec.background_color}:s={width}x{height}:d={spec.duration_seconds}",
        ]
        filters = self.build_filters(spec)
        if filters:
            command += ["-vf", filters]

        if spec.still:
            # Grab the midpoint frame, clear of both fades
            command += ["-ss", f"{spec.duration_seconds / 2:g}", "-frames:v", "1"]
        else:
            command += [
                "-c:v", "libx264",
                "-preset", self.config.preset,
                "-crf", str(self.config.crf),
                "-t", str(spec.duration_seconds),
                "-pix_fmt", "yuv420p",
            ]
        command.append(str(spec.output_path))
        return command

    def write_descriptor(self, spec: RenderSpec) -> Path:
        """Write the invocation as a bash script and return its path."""
        self.scratch_dir.mkdir(parents=True, exist_ok=True)
        script = self.scratch_dir / f"render-{spec.output_path.stem}.sh"
        script.write_text(
            "#!/bin/bash\n" + shlex.join(self.build_command(spec)) + "\n",
            encoding="utf-8",
        )
        return script

    def invoke(self, spec: RenderSpec) -> int:
        script = self.write_descriptor(spec)
        logger.info("renderer_invoked", script=str(script), output=str(spec.output_path))
        result = subprocess.run(
            ["bash", str(script)],
            check=False,
            timeout=self.config.timeout_seconds,
        )
        return result.returncode


class Synthesizer:
    """Turns durations and palettes into rendered video and thumbnail files."""

    def __init__(
        self,
        paths: PathsConfig,
        config: RenderConfig,
        renderer: Renderer | None = None,
        flags: FeatureFlags | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.paths = paths
        self.config = config
        self.renderer = renderer or FFmpegRenderer(config, paths.temp_dir)
        self.flags = flags or FeatureFlags()
        self.clock = clock

    def _epoch_millis(self) -> int:
        return int(self.clock() * 1000)

    def duration_for(self, template: Template) -> int:
        """Video length for a template's duration class."""
        if template.duration_class == "short":
            return self.config.short_duration
        return self.config.default_duration

    def build_video_spec(
        self,
        duration_seconds: int | None = None,
        palette: Palette | None = None,
    ) -> RenderSpec:
        """Build the spec for a full-length video.

        Args:
            duration_seconds: Positive length in seconds, defaults to one hour
            palette: Colors to render with

        Returns:
            RenderSpec targeting ``videos/<prefix>-<epochMillis>.mp4``
        """
        if duration_seconds is None:
            duration_seconds = self.config.default_duration
        palette = palette or Palette.from_config(self.config)
        fade_out = self.config.fade_out_seconds
        filename = f"{self.config.video_prefix}-{self._epoch_millis()}{Render.VIDEO_EXTENSION}"

        return RenderSpec(
            duration_seconds=duration_seconds,
            canvas_size=(self.config.width, self.config.height),
            background_color=palette.background,
            fade_in_seconds=min(self.config.fade_in_seconds, duration_seconds),
            fade_out_start_seconds=duration_seconds - fade_out,
            fade_out_seconds=fade_out,
            output_path=self.paths.videos_dir / filename,
            text_color=palette.text_color,
            accent_color=palette.accent_color,
        )

    def build_thumbnail_spec(
        self,
        palette: Palette | None = None,
        overlay_text: str | None = None,
        subtitle: str | None = None,
    ) -> RenderSpec:
        """Build the spec for a thumbnail still.

        Thumbnails use a fixed 5s clip with 2s fades regardless of video length.
        """
        palette = palette or Palette.from_config(self.config)
        duration = Render.THUMBNAIL_DURATION
        fade = Render.THUMBNAIL_FADE_SECONDS
        filename = f"{Render.THUMBNAIL_PREFIX}{self._epoch_millis()}{Render.THUMBNAIL_EXTENSION}"

        return RenderSpec(
            duration_seconds=duration,
            canvas_size=(Render.THUMBNAIL_WIDTH, Render.THUMBNAIL_HEIGHT),
            background_color=palette.background,
            fade_in_seconds=fade,
            fade_out_start_seconds=duration - fade,
            fade_out_seconds=fade,
            output_path=self.paths.videos_dir / filename,
            overlay_lines=tuple(line for line in (overlay_text, subtitle) if line),
            text_color=palette.text_color,
            accent_color=palette.accent_color,
            still=True,
        )

    def render(self, spec: RenderSpec, stage: str) -> Path:
        """Render a spec and move the result into place.

        The renderer writes into the scratch directory; the file only
        reaches ``spec.output_path`` after a zero exit status.

        Raises:
            RenderError: The renderer failed, timed out, or produced nothing
        """
        self.paths.ensure_directories()
        staging = self.paths.temp_dir / spec.output_path.name
        staging.unlink(missing_ok=True)

        logger.info(
            "render_starting",
            stage=stage,
            duration=spec.duration_seconds,
            output=str(spec.output_path),
        )
        try:
            status = self.renderer.invoke(replace(spec, output_path=staging))
        except subprocess.TimeoutExpired as e:
            logger.error("render_timed_out", stage=stage, timeout=e.timeout)
            raise RenderError(stage, f"timeout after {e.timeout}s") from e
        except OSError as e:
            logger.error("render_not_started", stage=stage, error=str(e))
            raise RenderError(stage, str(e)) from e

        if status != 0:
            logger.error("render_failed", stage=stage, exit_status=status)
            raise RenderError(stage, status)
        if not staging.exists():
            logger.error("render_output_missing", stage=stage, path=str(staging))
            raise RenderError(stage, "exit 0 but no output file")

        shutil.move(str(staging), str(spec.output_path))
        logger.info("render_complete", stage=stage, path=str(spec.output_path))
        return spec.output_path

    def render_thumbnail(self, overlay_text: str | None = None, subtitle: str | None = None) -> Path:
        """Render a thumbnail, using the configured overlay text by default."""
        spec = self.build_thumbnail_spec(
            overlay_text=overlay_text if overlay_text is not None else self.config.thumbnail_title,
            subtitle=subtitle if subtitle is not None else self.config.thumbnail_subtitle,
        )
        return self.render(spec, stage="thumbnail")

    def produce(self, duration_seconds: int | None = None) -> RenderOutput:
        """Render a video and, when enabled, a matching thumbnail.

        A thumbnail failure is logged and does not fail the run.
        """
        logger.info("synthesis_starting", duration=duration_seconds or self.config.default_duration)
        video = self.render(self.build_video_spec(duration_seconds), stage="video")
        size_mb = video.stat().st_size / 1024 / 1024
        logger.info("video_created", path=str(video), size_mb=round(size_mb, 2))

        thumbnail = None
        if self.flags.enable_thumbnail:
            try:
                thumbnail = self.render_thumbnail()
            except RenderError as e:
                logger.warning("thumbnail_failed", error=str(e), exit_info=e.exit_info)

        return RenderOutput(video=video, thumbnail=thumbnail)
