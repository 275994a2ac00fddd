"""Options package exports."""

from __future__ import annotations

from ffoverlay.models.verbosity import Verbosity

from .composition import CompositionOptions
from .defaults import DEFAULT_AUDIO_POLICY, OUTPUT_SUFFIX, OVERLAY_SUFFIX
from .options import Options
from .runtime import RuntimeOptions

__all__ = [
    "DEFAULT_AUDIO_POLICY",
    "OUTPUT_SUFFIX",
    "OVERLAY_SUFFIX",
    "CompositionOptions",
    "Options",
    "RuntimeOptions",
    "Verbosity",
]
