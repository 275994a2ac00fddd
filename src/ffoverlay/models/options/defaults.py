"""Default constants for option models."""

from __future__ import annotations

from ffoverlay.models.types import AudioPolicy

DEFAULT_AUDIO_POLICY = AudioPolicy.MAP
OUTPUT_SUFFIX = ".mp4"
OVERLAY_SUFFIX = "_overlay"  #: Appended to the background stem for default output names.

__all__ = [
    "DEFAULT_AUDIO_POLICY",
    "OUTPUT_SUFFIX",
    "OVERLAY_SUFFIX",
]
