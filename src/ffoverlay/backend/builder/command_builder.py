"""Build the FFmpeg argument list for an overlay composition."""

from ffoverlay.models import AssetPresence, AssetRole, CompositionOptions

from . import audio, video
from .command_args import CLAUSE_SEPARATOR, FILTER_COMPLEX, INPUT_FLAG, OUTPUT_NAME, SHORTEST
from .stream_args import map_pad


def _input_args(present: AssetPresence) -> tuple[str, ...]:
    """Return ``-i`` declarations in background, foreground, music order."""
    roles = [AssetRole.BACKGROUND, AssetRole.FOREGROUND]
    if present.music:
        roles.append(AssetRole.MUSIC)
    args: tuple[str, ...] = ()
    for role in roles:
        args = args + INPUT_FLAG + (role.storage_name,)
    return args


def build_command(opts: CompositionOptions, present: AssetPresence) -> tuple[str, ...]:
    """Return the engine arguments for ``opts`` and the supplied assets.

    The result is a pure function of its inputs. Inputs are named by their
    fixed storage names and the output is always :data:`OUTPUT_NAME`.
    """
    video_clauses, video_out = video.build(opts, present)
    audio_clauses, audio_map = audio.build(opts, present)
    graph = CLAUSE_SEPARATOR.join((*video_clauses, *audio_clauses))
    return (
        _input_args(present)
        + FILTER_COMPLEX
        + (graph,)
        + map_pad(video_out)
        + audio_map
        + SHORTEST
        + (OUTPUT_NAME,)
    )


__all__ = ["OUTPUT_NAME", "build_command"]
