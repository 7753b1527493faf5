"""Application settings with validation."""

from pathlib import Path
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from lofi_automator.constants import Colors, Render, YouTube


class PathsConfig(BaseSettings):
    """Output directory layout."""

    model_config = SettingsConfigDict(
        env_prefix="PATH_",
        extra="ignore",
    )

    output_dir: Path = Field(default=Path("output"), description="Base output directory")

    @property
    def videos_dir(self) -> Path:
        return self.output_dir / "videos"

    @property
    def music_dir(self) -> Path:
        return self.output_dir / "music"

    @property
    def temp_dir(self) -> Path:
        return self.output_dir / "temp"

    def ensure_directories(self) -> None:
        """Create the videos/music/temp tree if missing."""
        for directory in (self.videos_dir, self.music_dir, self.temp_dir):
            directory.mkdir(parents=True, exist_ok=True)


class RenderConfig(BaseSettings):
    """Renderer invocation and timing configuration."""

    model_config = SettingsConfigDict(
        env_prefix="RENDER_",
        extra="ignore",
    )

    ffmpeg_binary: str = Field(default="ffmpeg", description="Renderer executable")
    default_duration: int = Field(default=Render.DEFAULT_DURATION, ge=1)
    short_duration: int = Field(default=Render.SHORT_DURATION, ge=1)
    fade_in_seconds: int = Field(default=Render.FADE_IN_SECONDS, ge=0)
    fade_out_seconds: int = Field(default=Render.FADE_OUT_SECONDS, ge=0)
    width: int = Field(default=Render.VIDEO_WIDTH, ge=16)
    height: int = Field(default=Render.VIDEO_HEIGHT, ge=16)
    video_prefix: str = Field(default=Render.VIDEO_PREFIX, min_length=1)
    preset: str = Field(default="fast", description="libx264 preset")
    crf: int = Field(default=23, ge=0, le=51)
    background_color: str = Field(default=Colors.BACKGROUND)
    text_color: str = Field(default=Colors.TEXT)
    accent_color: str = Field(default=Colors.ACCENT)
    font_file: Path = Field(default=Path(Render.FONT_FILE))
    thumbnail_title: str = Field(default="CHRISTIAN LOFI")
    thumbnail_subtitle: str = Field(default="Relax • Worship • Peace")
    timeout_seconds: int | None = Field(
        default=None, ge=1, description="Abort a render that runs longer than this"
    )

    @model_validator(mode="after")
    def check_fades(self) -> "RenderConfig":
        """Fades must fit inside the shortest clip we render."""
        shortest = min(self.default_duration, self.short_duration)
        if self.fade_out_seconds > shortest:
            raise ValueError(
                f"fade_out_seconds ({self.fade_out_seconds}) exceeds duration ({shortest})"
            )
        return self


class YouTubeConfig(BaseSettings):
    """YouTube API and credential file configuration."""

    model_config = SettingsConfigDict(
        env_prefix="YT_",
        extra="ignore",
    )

    client_secrets_path: Path = Field(
        default=Path("client_secrets.json"), description="OAuth client configuration file"
    )
    token_path: Path = Field(default=Path("token.json"), description="Persisted OAuth token")
    scopes: list[str] = Field(default_factory=lambda: [YouTube.UPLOAD_SCOPE])
    default_template: str = Field(default="christian_lofi")
    templates_file: Path | None = Field(
        default=None, description="Optional JSON catalog replacing the built-in templates"
    )
    watch_host: str = Field(default=YouTube.WATCH_HOST)


class Settings(BaseSettings):
    """Global application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Logging level"
    )

    paths: PathsConfig = Field(default_factory=PathsConfig)
    render: RenderConfig = Field(default_factory=RenderConfig)
    youtube: YouTubeConfig = Field(default_factory=YouTubeConfig)


_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset settings (useful for testing)."""
    global _settings
    _settings = None
