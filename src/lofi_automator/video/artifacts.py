"""Discovery of rendered artifacts in the output tree."""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

from lofi_automator.logging_config import get_logger

logger = get_logger(__name__)

# lofi-nature-1700000000000.mp4, thumbnail_1700000000000.jpg
_TIMESTAMP_RE = re.compile(r"[-_](\d{10,})$")
_DIGITS_RE = re.compile(r"(\d+)")


def name_key(name: str) -> tuple:
    """Sort key comparing digit runs numerically.

    For fixed-width timestamps this matches plain string order; it also keeps
    a-200 after a-50 when the widths differ.
    """
    parts = _DIGITS_RE.split(name)
    return tuple(int(p) if i % 2 else p for i, p in enumerate(parts)), name


@dataclass(frozen=True)
class Artifact:
    """A rendered file on disk."""

    path: Path
    size_bytes: int
    created_at: datetime

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def timestamp_ms(self) -> int | None:
        """Epoch millis embedded in the filename, if any."""
        match = _TIMESTAMP_RE.search(self.path.stem)
        return int(match.group(1)) if match else None

    @classmethod
    def from_path(cls, path: Path) -> "Artifact":
        stat = path.stat()
        return cls(
            path=path,
            size_bytes=stat.st_size,
            created_at=datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc),
        )


@dataclass(frozen=True)
class ArtifactSummary:
    """Counts for the status view."""

    count: int
    total_bytes: int
    latest: str | None


def _normalize(extensions: str | Iterable[str]) -> tuple[str, ...]:
    if isinstance(extensions, str):
        extensions = (extensions,)
    return tuple(ext.lower() if ext.startswith(".") else f".{ext.lower()}" for ext in extensions)


class ArtifactLocator:
    """Finds artifacts by filename order.

    Filenames embed a millisecond epoch timestamp, so descending name
    order is creation order. This does not sort by mtime.
    """

    def list_artifacts(self, directory: Path, extensions: str | Iterable[str]) -> list[Artifact]:
        """List matching artifacts, newest name first.

        A missing directory yields an empty list.
        """
        directory = Path(directory)
        if not directory.is_dir():
            logger.debug("artifact_directory_missing", path=str(directory))
            return []

        wanted = _normalize(extensions)
        names = sorted(
            (
                entry.name
                for entry in directory.iterdir()
                if entry.is_file() and entry.suffix.lower() in wanted
            ),
            key=name_key,
            reverse=True,
        )
        return [Artifact.from_path(directory / name) for name in names]

    def latest(
        self,
        directory: Path,
        extensions: str | Iterable[str],
        since_ms: int | None = None,
    ) -> Artifact | None:
        """Return the newest matching artifact, or None when there is nothing to upload.

        Args:
            directory: Directory to scan (not recursive)
            extensions: Extension filter, e.g. ".mp4"
            since_ms: Only consider names stamped at or after this epoch millis
        """
        for artifact in self.list_artifacts(directory, extensions):
            if since_ms is not None:
                stamp = artifact.timestamp_ms
                if stamp is None or stamp < since_ms:
                    continue
            logger.info("latest_artifact", path=str(artifact.path), size=artifact.size_bytes)
            return artifact

        logger.info("no_artifacts_found", path=str(directory), extensions=_normalize(extensions))
        return None

    def summarize(self, directory: Path, extensions: str | Iterable[str]) -> ArtifactSummary:
        artifacts = self.list_artifacts(directory, extensions)
        return ArtifactSummary(
            count=len(artifacts),
            total_bytes=sum(a.size_bytes for a in artifacts),
            latest=artifacts[0].name if artifacts else None,
        )
