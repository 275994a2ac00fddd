"""Composition toggles that fully determine the engine command."""

from __future__ import annotations

from cyclopts import Parameter
from pydantic import BaseModel, ConfigDict, Field, model_validator

from ffoverlay.models.types import AudioPolicy

from .defaults import DEFAULT_AUDIO_POLICY
from .groups import COMPOSITION_GROUP


@Parameter(name="*", group=COMPOSITION_GROUP)
class CompositionOptions(BaseModel):
    """Toggles for muting, waveform rendering and audio selection."""

    mute_foreground: bool = Field(default=False, description="Silence the foreground video's audio.")
    mute_background: bool = Field(default=False, description="Silence the background video's audio.")
    add_waveform: bool = Field(
        default=False,
        description="Overlay a waveform of the music track. Ignored when no music is given.",
    )
    audio_policy: AudioPolicy = Field(
        default=DEFAULT_AUDIO_POLICY,
        description=(
            "How to select output audio: 'map' re-encodes music or the mixed source audio; "
            f"'copy' passes the music or background audio through unchanged. [default: {DEFAULT_AUDIO_POLICY.value}]"
        ),
    )

    model_config = ConfigDict(frozen=True, extra="forbid")

    @model_validator(mode="after")
    def validate_copy_constraints(self) -> CompositionOptions:
        """Reject mute toggles when audio is stream copied."""
        if self.audio_policy is AudioPolicy.COPY and (self.mute_foreground or self.mute_background):
            raise ValueError("muting requires audio encoding; use audio_policy 'map'")
        return self


__all__ = ["CompositionOptions"]
