"""Verbosity levels for status output."""

from enum import IntEnum


class Verbosity(IntEnum):
    """How much of the engine run is echoed to the user.

    ``COMMANDS`` shows the engine command line; ``OUTPUT`` also streams the
    engine's own log lines.
    """

    QUIET = 0
    COMMANDS = 1
    OUTPUT = 2


__all__ = ["Verbosity"]
