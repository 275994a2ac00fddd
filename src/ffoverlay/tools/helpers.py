"""Duration parsing and user-facing status lines."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pytimeparse2 import parse as parse_duration

from ffoverlay.models.verbosity import Verbosity

from .cli import format_ffmpeg_cmd

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

logger = logging.getLogger(__name__)


def parse_timespan_to_seconds(s: str | None) -> float | None:
    """Convert an FFmpeg clock string such as ``"00:01:30.25"`` to seconds.

    Returns ``None`` for empty input and for placeholders like ``"N/A"`` that
    FFmpeg prints when a duration is unknown.
    """
    if not s:
        return None
    parsed = parse_duration(s.strip())
    return None if parsed is None else float(parsed)


def emit_status(message: str, *, status_callback: Callable[[str], None] | None) -> None:
    """Deliver ``message`` to the user.

    ``print`` writes straight to the terminal, ``None`` routes through
    ``logger.info`` and any other callable (the GUI status pane, a test list)
    receives the line as is.
    """
    if status_callback is None:
        logger.info(message)
    elif status_callback is print:
        print(message, flush=True)  # noqa: T201
    else:
        status_callback(message)


def announce_command(
    args: Sequence[str],
    *,
    verbosity: Verbosity,
    dry_run: bool,
    status_callback: Callable[[str], None] | None,
    exe: str = "ffmpeg",
) -> None:
    """Show the engine command line for dry runs or from ``COMMANDS`` verbosity up."""
    if not dry_run and verbosity < Verbosity.COMMANDS:
        return
    label = "Command" if dry_run else "Running"
    emit_status(f"{label}: {format_ffmpeg_cmd(args, exe)}", status_callback=status_callback)


__all__ = [
    "announce_command",
    "emit_status",
    "parse_timespan_to_seconds",
]
