"""Feature flags for optional pipeline steps."""

from __future__ import annotations

import json
import os
from collections.abc import Mapping
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any

import structlog

logger = structlog.get_logger()

DEFAULT_FLAGS_PATH = Path("feature_flags.json")

_TRUTHY = ("true", "1", "yes", "on")


def parse_flag(value: Any) -> bool:
    """Interpret a JSON or environment value as a flag state."""
    if isinstance(value, str):
        return value.strip().lower() in _TRUTHY
    return bool(value)


@dataclass
class FeatureFlags:
    """Feature flag configuration."""

    # Synthesis
    enable_thumbnail: bool = True

    # Post-publish follow-ups
    enable_auto_comment: bool = False  # commenting needs the youtube.force-ssl scope
    enable_channel_stats: bool = True

    @classmethod
    def names(cls) -> tuple[str, ...]:
        return tuple(f.name for f in fields(cls))

    def to_dict(self) -> dict[str, bool]:
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FeatureFlags":
        """Create from dictionary, ignoring unknown keys."""
        known = cls.names()
        unknown = sorted(k for k in data if k not in known)
        if unknown:
            logger.warning("unknown_feature_flags", flags=unknown)
        return cls(**{k: parse_flag(v) for k, v in data.items() if k in known})

    def set(self, flag_name: str, value: bool) -> None:
        """Set flag value by name."""
        if flag_name in self.names():
            setattr(self, flag_name, value)
            logger.info("feature_flag_changed", flag=flag_name, value=value)
        else:
            logger.warning("unknown_feature_flag", flag=flag_name)


class FeatureFlagManager:
    """Loads feature flags from file, then applies environment overrides."""

    ENV_PREFIX = "FEATURE_"

    def __init__(
        self,
        config_path: Path = DEFAULT_FLAGS_PATH,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self.config_path = Path(config_path)
        self.environ = os.environ if environ is None else environ
        self.flags = FeatureFlags()
        self._load_flags()
        self._apply_env_overrides()

    def _load_flags(self) -> None:
        if not self.config_path.exists():
            return
        try:
            with open(self.config_path, encoding="utf-8") as f:
                data = json.load(f)
            self.flags = FeatureFlags.from_dict(data)
            logger.info("feature_flags_loaded", path=str(self.config_path))
        except (OSError, ValueError, TypeError, AttributeError) as e:
            logger.warning("feature_flags_load_failed", path=str(self.config_path), error=str(e))

    def _apply_env_overrides(self) -> None:
        # FEATURE_AUTO_COMMENT=1 -> enable_auto_comment
        for key, value in self.environ.items():
            if not key.startswith(self.ENV_PREFIX):
                continue
            flag_name = f"enable_{key[len(self.ENV_PREFIX):].lower()}"
            if flag_name in FeatureFlags.names():
                self.flags.set(flag_name, parse_flag(value))

    def get_flags(self) -> FeatureFlags:
        return self.flags


_flag_manager: FeatureFlagManager | None = None


def get_feature_flags() -> FeatureFlags:
    """Get global feature flags."""
    global _flag_manager
    if _flag_manager is None:
        _flag_manager = FeatureFlagManager()
    return _flag_manager.get_flags()


def reset_feature_flags() -> None:
    """Drop the cached manager (useful for testing)."""
    global _flag_manager
    _flag_manager = None
