"""Backend utilities for building and executing FFmpeg commands."""

from .builder import build_command
from .engine import Engine, FFmpegEngine
from .executor import CompositionResult, ffoverlay, run_composition, submit

__all__ = [
    "CompositionResult",
    "Engine",
    "FFmpegEngine",
    "build_command",
    "ffoverlay",
    "run_composition",
    "submit",
]
