"""Per-run state handed to the engine: reporting settings and the tool cache."""

from __future__ import annotations

import os
import tempfile
from contextlib import suppress
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Self

from diskcache import Cache

from ffoverlay.models.verbosity import Verbosity

if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType

_CACHE_DIR = Path(os.getenv("FFOVERLAY_CACHE", tempfile.gettempdir())) / "ffoverlay-cache"
_FFMPEG_ENV = "FFOVERLAY_FFMPEG"


def _open_cache() -> Cache:
    return Cache(str(_CACHE_DIR))


def _ffmpeg_executable() -> str:
    """Return the FFmpeg executable, overridable through ``FFOVERLAY_FFMPEG``."""
    return os.getenv(_FFMPEG_ENV) or "ffmpeg"


@dataclass(slots=True)
class RuntimeContext:
    """Where status goes, which FFmpeg to run, and what is already known about it.

    The cache outlives the process so the FFmpeg version check runs once per
    executable rather than once per composition.
    """

    verbosity: Verbosity = Verbosity.QUIET
    status_callback: Callable[[str], None] | None = None
    ffmpeg: str = field(default_factory=_ffmpeg_executable)
    cache: Cache = field(default_factory=_open_cache)

    def close(self) -> None:
        """Release the cache handle."""
        self.cache.close()

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def __del__(self) -> None:  # pragma: no cover - cleanup
        with suppress(Exception):
            self.cache.close()


__all__ = ["RuntimeContext"]
