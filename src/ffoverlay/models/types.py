"""Asset role and audio policy definitions."""

from enum import Enum


class AssetRole(str, Enum):
    """Logical role of an uploaded media file."""

    BACKGROUND = "background"
    FOREGROUND = "foreground"
    MUSIC = "music"

    @property
    def storage_name(self) -> str:
        """Fixed file name used for this role in engine storage."""
        return _STORAGE_NAMES[self]

    @property
    def input_index(self) -> int:
        """Input position of this role in the engine command."""
        return _INPUT_ORDER.index(self)


_STORAGE_NAMES: dict[AssetRole, str] = {
    AssetRole.BACKGROUND: "background.mp4",
    AssetRole.FOREGROUND: "foreground.mp4",
    AssetRole.MUSIC: "music.mp3",
}

# Inputs are always declared background, foreground, then music.
_INPUT_ORDER: tuple[AssetRole, ...] = (AssetRole.BACKGROUND, AssetRole.FOREGROUND, AssetRole.MUSIC)


class AudioPolicy(str, Enum):
    """How the output audio track is selected."""

    MAP = "map"
    COPY = "copy"
