"""Transcoding engine boundary and its FFmpeg subprocess implementation."""

from __future__ import annotations

import logging
import re
import shutil
import subprocess
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING, Protocol, Self, runtime_checkable

from ffoverlay.errors import EngineExecutionError, EngineNotReadyError
from ffoverlay.models import RuntimeContext
from ffoverlay.tools import check_ffmpeg_version, parse_timespan_to_seconds, run_streaming

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from types import TracebackType

PROGRESS_EVENT = "progress"  #: Payload is the completed fraction in 0..1.
LOG_EVENT = "log"  #: Payload is one line of engine output.
EVENTS = (PROGRESS_EVENT, LOG_EVENT)

# -progress writes machine readable key=value lines to stdout; -nostats drops
# the human readable status line that would duplicate them.
GLOBAL_FLAGS: tuple[str, ...] = ("-hide_banner", "-nostdin", "-y", "-progress", "pipe:1", "-nostats")

ERROR_TAIL_LINES = 5

_DURATION_RE = re.compile(r"^\s*Duration:\s*([^,]+),")
_PROGRESS_KEY_RE = re.compile(r"^[a-z_0-9]+=\S*$")
_OUT_TIME_KEY = "out_time_us"
_PROGRESS_KEY = "progress"
_PROGRESS_END = "end"

logger = logging.getLogger(__name__)


@runtime_checkable
class Engine(Protocol):
    """A transcoding engine: loaded once by its owner, then driven by ``submit``."""

    def load(self) -> None: ...

    @property
    def loaded(self) -> bool: ...

    def write_file(self, name: str, data: bytes) -> None: ...

    def exec(self, args: Sequence[str]) -> None: ...

    def read_file(self, name: str) -> bytes: ...

    def delete_file(self, name: str) -> None: ...

    def on(self, event: str, handler: Callable[..., None]) -> None: ...

    def off(self, event: str, handler: Callable[..., None]) -> None: ...


class ProgressParser:
    """Turn FFmpeg output lines into completion fractions.

    The expected length is the shortest input ``Duration`` since the output
    stops with the shortest stream. Returns ``None`` for lines that carry no
    progress information.
    """

    def __init__(self) -> None:
        self.total_sec: float | None = None

    def feed(self, line: str) -> float | None:
        """Consume one line and return a fraction when it reports progress."""
        if match := _DURATION_RE.match(line):
            seconds = parse_timespan_to_seconds(match.group(1))
            if seconds and (self.total_sec is None or seconds < self.total_sec):
                self.total_sec = seconds
            return None
        key, sep, value = line.partition("=")
        if not sep:
            return None
        if key == _PROGRESS_KEY and value == _PROGRESS_END:
            return 1.0
        if key != _OUT_TIME_KEY or not self.total_sec:
            return None
        try:
            elapsed = int(value) / 1_000_000
        except ValueError:
            return None
        return max(0.0, min(1.0, elapsed / self.total_sec))

    @staticmethod
    def is_progress_line(line: str) -> bool:
        """Whether ``line`` is a ``-progress`` key/value record."""
        return bool(_PROGRESS_KEY_RE.match(line))


def _error_tail(output: str | None) -> str:
    """Return the last log lines of a failed run."""
    if not output:
        return ""
    lines = [ln for ln in output.splitlines() if ln.strip() and not ProgressParser.is_progress_line(ln)]
    return "\n".join(lines[-ERROR_TAIL_LINES:])


class FFmpegEngine:
    """Run ``ffmpeg`` against a private temporary directory used as storage.

    Call :meth:`load` before use; it verifies that FFmpeg is installed and
    creates the storage directory. Storage names are flat file names.
    """

    def __init__(self, ctx: RuntimeContext | None = None) -> None:
        self.ctx = ctx or RuntimeContext()
        self._storage: Path | None = None
        self._handlers: dict[str, list[Callable[..., None]]] = {event: [] for event in EVENTS}

    @property
    def loaded(self) -> bool:
        """Whether :meth:`load` completed."""
        return self._storage is not None

    def load(self) -> None:
        """Check for FFmpeg and create the storage directory."""
        if self.loaded:
            return
        try:
            version = check_ffmpeg_version(self.ctx)
        except (OSError, RuntimeError) as e:
            raise EngineNotReadyError(str(e)) from e
        self._storage = Path(tempfile.mkdtemp(prefix="ffoverlay-"))
        logger.debug("Loaded %s with storage %s", version, self._storage)

    def close(self) -> None:
        """Remove the storage directory and everything left in it."""
        if self._storage is not None:
            shutil.rmtree(self._storage, ignore_errors=True)
            self._storage = None

    def __enter__(self) -> Self:
        """Return ``self`` when entering a context."""
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        """Remove storage when exiting a context."""
        self.close()

    def on(self, event: str, handler: Callable[..., None]) -> None:
        """Subscribe ``handler`` to ``progress`` or ``log`` events."""
        if event not in self._handlers:
            raise ValueError(f"Unknown engine event: {event}")
        self._handlers[event].append(handler)

    def off(self, event: str, handler: Callable[..., None]) -> None:
        """Remove a handler added with :meth:`on`."""
        handlers = self._handlers.get(event, [])
        if handler in handlers:
            handlers.remove(handler)

    def _emit(self, event: str, payload: object) -> None:
        for handler in list(self._handlers[event]):
            handler(payload)

    def _path(self, name: str) -> Path:
        """Resolve ``name`` inside storage."""
        if self._storage is None:
            raise EngineNotReadyError("Engine is not loaded")
        if not name or name in {".", ".."} or Path(name).name != name:
            raise ValueError(f"Invalid storage name: {name!r}")
        return self._storage / name

    def write_file(self, name: str, data: bytes) -> None:
        """Store ``data`` under ``name``."""
        self._path(name).write_bytes(data)

    def read_file(self, name: str) -> bytes:
        """Return the bytes stored under ``name``."""
        return self._path(name).read_bytes()

    def delete_file(self, name: str) -> None:
        """Remove ``name`` from storage."""
        self._path(name).unlink()

    def exec(self, args: Sequence[str]) -> None:
        """Run ``ffmpeg`` with ``args`` inside storage.

        Raises:
            EngineNotReadyError: If the engine is not loaded.
            EngineExecutionError: If FFmpeg cannot be started or exits non-zero.

        """
        if self._storage is None:
            raise EngineNotReadyError("Engine is not loaded")
        parser = ProgressParser()

        def on_line(line: str) -> None:
            fraction = parser.feed(line)
            if fraction is not None:
                self._emit(PROGRESS_EVENT, fraction)
            elif not ProgressParser.is_progress_line(line):
                self._emit(LOG_EVENT, line)

        try:
            run_streaming([self.ctx.ffmpeg, *GLOBAL_FLAGS, *args], line_callback=on_line, cwd=self._storage)
        except subprocess.CalledProcessError as e:
            msg = f"ffmpeg exited with status {e.returncode}"
            if tail := _error_tail(e.output):
                msg = f"{msg}: {tail}"
            raise EngineExecutionError(msg) from e
        except OSError as e:
            raise EngineExecutionError(f"Could not start ffmpeg: {e}") from e


__all__ = [
    "EVENTS",
    "GLOBAL_FLAGS",
    "LOG_EVENT",
    "PROGRESS_EVENT",
    "Engine",
    "FFmpegEngine",
    "ProgressParser",
]
