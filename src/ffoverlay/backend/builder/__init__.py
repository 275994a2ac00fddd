"""FFmpeg argument builders."""

from .command_args import OUTPUT_NAME
from .command_builder import build_command

__all__ = ["OUTPUT_NAME", "build_command"]
