"""Expose models and type definitions."""

from .assets import AssetBundle, AssetPresence, MediaAsset
from .context import RuntimeContext
from .options import CompositionOptions, Options, RuntimeOptions
from .progress import ProgressState
from .types import AssetRole, AudioPolicy
from .verbosity import Verbosity

__all__ = [
    "AssetBundle",
    "AssetPresence",
    "AssetRole",
    "AudioPolicy",
    "CompositionOptions",
    "MediaAsset",
    "Options",
    "ProgressState",
    "RuntimeContext",
    "RuntimeOptions",
    "Verbosity",
]
