"""In-memory media assets handed to the engine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from .types import AssetRole

if TYPE_CHECKING:
    from pathlib import Path


@dataclass(frozen=True)
class MediaAsset:
    """Raw file bytes tagged with the role they play in the composition."""

    role: AssetRole
    data: bytes = b""

    @classmethod
    def from_path(cls, role: AssetRole, path: Path) -> MediaAsset:
        """Read ``path`` fully into memory."""
        return cls(role=role, data=path.read_bytes())

    @property
    def storage_name(self) -> str:
        """Name under which the asset is staged in engine storage."""
        return self.role.storage_name


@dataclass(frozen=True)
class AssetPresence:
    """Which optional assets accompany the required background and foreground."""

    music: bool = False


@dataclass(frozen=True)
class AssetBundle:
    """Assets selected for one submission.

    ``background`` and ``foreground`` are typed optional so an incomplete
    selection can be represented and rejected by the orchestrator.
    """

    background: MediaAsset | None = None
    foreground: MediaAsset | None = None
    music: MediaAsset | None = None

    @property
    def complete(self) -> bool:
        """Whether both required assets are present."""
        return self.background is not None and self.foreground is not None

    @property
    def presence(self) -> AssetPresence:
        """Describe the optional assets for the command builder."""
        return AssetPresence(music=self.music is not None)

    def staged(self) -> tuple[MediaAsset, ...]:
        """Return the supplied assets in input order."""
        return tuple(a for a in (self.background, self.foreground, self.music) if a is not None)


__all__ = ["AssetBundle", "AssetPresence", "MediaAsset"]
