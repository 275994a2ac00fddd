"""Subprocess plumbing for the FFmpeg executable."""

import logging
import os
import shlex
import subprocess
from collections.abc import Callable, Sequence
from pathlib import Path

from ffoverlay.models.context import RuntimeContext

_VERSION_KEY = "ffmpeg-version"
_QUOTED_FLAGS = frozenset({"-filter_complex"})
# Keep console windows from flashing up when launched from the GUI on Windows.
_CREATIONFLAGS = getattr(subprocess, "CREATE_NO_WINDOW", 0)

logger = logging.getLogger(__name__)


def run_streaming(
    cmd: Sequence[str | Path],
    *,
    line_callback: Callable[[str], None],
    cwd: Path | None = None,
) -> str:
    """Run ``cmd`` feeding each combined stdout/stderr line to ``line_callback``.

    Carriage-return updates are split into separate lines and undecodable
    bytes (such as legacy-encoded metadata) become U+FFFD. Returns the full
    output and raises :class:`subprocess.CalledProcessError` on a non-zero exit.
    """
    argv = [str(c) for c in cmd]
    captured: list[str] = []
    with subprocess.Popen(  # noqa: S603
        argv,
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
        stdin=subprocess.DEVNULL,
        text=True,
        encoding="utf-8",
        errors="replace",
        bufsize=1,
        cwd=cwd,
        creationflags=_CREATIONFLAGS,
    ) as proc:
        if proc.stdout is None:  # pragma: no cover - PIPE always yields a stream
            raise RuntimeError("Failed to capture subprocess stdout")
        for chunk in iter(proc.stdout.readline, ""):
            captured.append(chunk)
            for line in filter(None, chunk.rstrip("\n").split("\r")):
                line_callback(line)
        returncode = proc.wait()
    output = "".join(captured)
    if returncode:
        raise subprocess.CalledProcessError(returncode, argv, output)
    return output


def ffmpeg_version(exe: str) -> str:
    """Return the first line of ``exe -version``.

    Raises:
        RuntimeError: If the executable is missing or exits with an error.

    """
    try:
        proc = subprocess.run(  # noqa: S603
            [exe, "-version"],
            capture_output=True,
            stdin=subprocess.DEVNULL,
            text=True,
            encoding="utf-8",
            errors="replace",
            creationflags=_CREATIONFLAGS,
            check=True,
        )
    except FileNotFoundError as e:
        raise RuntimeError(f"{exe} not found") from e
    except subprocess.CalledProcessError as e:
        raise RuntimeError(f"{exe} -version failed with status {e.returncode}") from e
    lines = proc.stdout.splitlines()
    return lines[0].strip() if lines else exe


def check_ffmpeg_version(ctx: RuntimeContext) -> str:
    """Return the version of ``ctx.ffmpeg``, remembered in the runtime cache."""
    key = (_VERSION_KEY, ctx.ffmpeg)
    cached = ctx.cache.get(key)
    if isinstance(cached, str):
        return cached
    version = ffmpeg_version(ctx.ffmpeg)
    logger.debug("Detected %s", version)
    ctx.cache[key] = version
    return version


def _quote(token: str, *, force: bool) -> str:
    if os.name == "nt":
        quoted = subprocess.list2cmdline([token])
        return f'"{token}"' if force and quoted == token else quoted
    quoted = shlex.quote(token)
    return f"'{token}'" if force and quoted == token else quoted


def format_ffmpeg_cmd(args: Sequence[str | Path], exe: str = "ffmpeg") -> str:
    """Render an FFmpeg invocation as a copy-pasteable shell line.

    Filter graphs are always quoted so their brackets and semicolons survive
    the shell.
    """
    parts = [exe, *(str(a) for a in args)]
    return " ".join(
        _quote(part, force=i > 0 and parts[i - 1] in _QUOTED_FLAGS) for i, part in enumerate(parts)
    )


__all__ = [
    "check_ffmpeg_version",
    "ffmpeg_version",
    "format_ffmpeg_cmd",
    "run_streaming",
]
