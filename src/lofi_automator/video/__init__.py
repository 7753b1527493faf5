"""Video synthesis, artifact discovery and YouTube upload components."""

from lofi_automator.video.artifacts import Artifact, ArtifactLocator
from lofi_automator.video.synthesizer import FFmpegRenderer, Palette, RenderSpec, Synthesizer
from lofi_automator.video.uploader import UploadRequest, UploadResult, YouTubeUploader

__all__ = [
    "Artifact",
    "ArtifactLocator",
    "FFmpegRenderer",
    "Palette",
    "RenderSpec",
    "Synthesizer",
    "UploadRequest",
    "UploadResult",
    "YouTubeUploader",
]
