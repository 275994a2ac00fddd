"""FFmpeg process helpers and status output."""

from .cli import check_ffmpeg_version, ffmpeg_version, format_ffmpeg_cmd, run_streaming
from .helpers import announce_command, emit_status, parse_timespan_to_seconds

__all__ = [
    "announce_command",
    "check_ffmpeg_version",
    "emit_status",
    "ffmpeg_version",
    "format_ffmpeg_cmd",
    "parse_timespan_to_seconds",
    "run_streaming",
]
