"""Progress tracking for a single submission."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

PERCENT_MAX = 100


class ProgressState:
    """Integer percentage advanced by engine progress notifications.

    Values only move forward during a run; :meth:`reset` returns to zero and
    is called at the start and the end of every submission.
    """

    def __init__(self, listener: Callable[[int], None] | None = None) -> None:
        self._value = 0
        self._listener = listener

    @property
    def value(self) -> int:
        """Current percentage."""
        return self._value

    def update(self, fraction: float) -> None:
        """Advance to ``fraction`` (0..1) of completion."""
        percent = max(0, min(PERCENT_MAX, round(fraction * PERCENT_MAX)))
        if percent <= self._value:
            return
        self._set(percent)

    def reset(self) -> None:
        """Return to zero."""
        self._set(0)

    def _set(self, value: int) -> None:
        self._value = value
        if self._listener is not None:
            self._listener(value)


__all__ = ["PERCENT_MAX", "ProgressState"]
