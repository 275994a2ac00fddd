"""Overlay a foreground video onto a background video with FFmpeg."""

from .backend import build_command, ffoverlay, run_composition, submit
from .errors import EngineExecutionError, EngineNotReadyError, MissingInputError
from .models import AssetPresence, CompositionOptions, Options

__all__ = [
    "AssetPresence",
    "CompositionOptions",
    "EngineExecutionError",
    "EngineNotReadyError",
    "MissingInputError",
    "Options",
    "build_command",
    "ffoverlay",
    "run_composition",
    "submit",
]
