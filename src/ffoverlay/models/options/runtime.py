"""Options controlling how a run is reported rather than what it produces."""

from __future__ import annotations

from cyclopts import Parameter
from pydantic import BaseModel, ConfigDict, Field, field_validator

from ffoverlay.models.verbosity import Verbosity

from .groups import RUNTIME_GROUP


@Parameter(group=RUNTIME_GROUP)
class RuntimeOptions(BaseModel):
    """Reporting and dry-run switches."""

    verbosity: Verbosity = Field(
        default=Verbosity.QUIET,
        description="quiet: result only; commands: also the FFmpeg command line; output: also FFmpeg's log.",
    )
    dry_run: bool = Field(default=False, description="Print the FFmpeg command and stop.")
    open_dir: bool = Field(default=False, description="Reveal the finished video in the file manager.")

    model_config = ConfigDict(extra="forbid")

    @field_validator("verbosity", mode="before")
    @classmethod
    def _coerce_verbosity(cls, v: object) -> object:
        """Accept level names in any case as well as ``0``/``1``/``2``."""
        if isinstance(v, str):
            token = v.strip()
            if token.isdigit():
                return int(token)
            if token.upper() in Verbosity.__members__:
                return Verbosity[token.upper()]
            raise ValueError(f"unknown verbosity {v!r}; use quiet, commands or output")
        return v


__all__ = ["RuntimeOptions"]
