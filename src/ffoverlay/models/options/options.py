"""Top-level option model for a composition run."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

from cyclopts import Parameter
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .composition import CompositionOptions
from .defaults import OUTPUT_SUFFIX, OVERLAY_SUFFIX
from .groups import INPUTS_GROUP, OUTPUT_GROUP
from .runtime import RuntimeOptions


def _existing_file(v: Path | None) -> Path | None:
    """Resolve ``v`` and ensure it names a file."""
    if v is None:
        return None
    path = Path(v).expanduser().absolute()
    if not path.is_file():
        raise ValueError(f"Input path is not a file: {path}")
    return path


@Parameter(name="*")
class Options(BaseModel):
    """Options for compositing a foreground video over a background video."""

    background: Annotated[
        Path | None,
        Parameter(group=INPUTS_GROUP),
    ] = Field(default=None, description="Background video; its frame size and video stream drive the output.")
    foreground: Annotated[
        Path | None,
        Parameter(group=INPUTS_GROUP),
    ] = Field(default=None, description="Foreground video scaled and centered over the background.")
    music: Annotated[
        Path | None,
        Parameter(group=INPUTS_GROUP),
    ] = Field(default=None, description="Optional music track used as the output audio.")
    output: Annotated[
        Path | None,
        Parameter(group=OUTPUT_GROUP),
    ] = Field(
        default=None,
        description=f"Path for the output file. Defaults to appending '{OVERLAY_SUFFIX}' to the background name.",
    )
    composition: CompositionOptions = Field(default_factory=CompositionOptions)
    runtime: RuntimeOptions = Field(default_factory=RuntimeOptions)

    model_config = ConfigDict(extra="forbid")

    @field_validator("background", "foreground", "music")
    @classmethod
    def validate_inputs(cls, v: Path | None) -> Path | None:
        """Ensure supplied inputs exist; absence is reported at submission."""
        return _existing_file(v)

    @field_validator("output")
    @classmethod
    def validate_output(cls, v: Path | None) -> Path | None:
        """Normalize output path and enforce the MP4 suffix."""
        if v is None:
            return None
        path = Path(v).expanduser().absolute()
        if not path.suffix:
            return path.with_suffix(OUTPUT_SUFFIX)
        if path.suffix.lower() != OUTPUT_SUFFIX:
            raise ValueError(f"Output extension '{path.suffix}' is not supported; use '{OUTPUT_SUFFIX}'.")
        return path

    def output_path(self) -> Path:
        """Return the explicit output or one derived from the background name."""
        if self.output is not None:
            return self.output
        if self.background is None:
            raise ValueError("Cannot derive output filename without a background; please provide --output")
        return self.background.parent / f"{self.background.stem}{OVERLAY_SUFFIX}{OUTPUT_SUFFIX}"


__all__ = ["Options"]
