"""Audio clauses and stream mapping."""

from ffoverlay.models import AssetPresence, AssetRole, AudioPolicy, CompositionOptions

from .stream_args import copy_stream, input_pad, map_pad, map_spec, pad

MUTE = "volume=0"  #: Silence a track while keeping its timing.
MIX = "amix=inputs=2:duration=shortest"  #: Mix background and foreground audio.
SINK = "anullsink"  #: Consume a muted track that feeds no output.
AUDIO_OUT_LABEL = "aout"  #: Mixed source audio fed to the output.
COPY: tuple[str, ...] = copy_stream("a")  #: Pass audio through without re-encoding.

MUTED_LABELS: dict[AssetRole, str] = {
    AssetRole.BACKGROUND: "bga",
    AssetRole.FOREGROUND: "fga",
}  #: Labels for muted source tracks.


def mute_clause(role: AssetRole) -> str:
    """Return the clause silencing the audio of ``role``'s input."""
    return f"{input_pad('a', role.input_index)}{MUTE}{pad(MUTED_LABELS[role])}"


def sink_clause(role: AssetRole) -> str:
    """Return the clause silencing ``role``'s audio and discarding it."""
    return f"{input_pad('a', role.input_index)}{MUTE},{SINK}"


def _muted_roles(opts: CompositionOptions) -> tuple[AssetRole, ...]:
    roles: list[AssetRole] = []
    if opts.mute_background:
        roles.append(AssetRole.BACKGROUND)
    if opts.mute_foreground:
        roles.append(AssetRole.FOREGROUND)
    return tuple(roles)


def _mix_sources(opts: CompositionOptions) -> tuple[tuple[str, ...], tuple[str, ...]]:
    """Return mute clauses and the pads that feed the mix."""
    muted = _muted_roles(opts)
    clauses = tuple(mute_clause(role) for role in muted)
    pads = tuple(
        pad(MUTED_LABELS[role]) if role in muted else input_pad("a", role.input_index)
        for role in (AssetRole.BACKGROUND, AssetRole.FOREGROUND)
    )
    return clauses, pads


def map_music() -> tuple[str, ...]:
    """Return args selecting the music track."""
    return map_spec("a", input_index=AssetRole.MUSIC.input_index)


def build(opts: CompositionOptions, present: AssetPresence) -> tuple[tuple[str, ...], tuple[str, ...]]:
    """Return audio clauses and the mapping args for the output audio.

    Music replaces the source audio when present; a muted source is still
    silenced, then drained into a sink since nothing maps it. Without music
    the background track is mapped when available, or, once a mute toggle is
    set, background and foreground are mixed with the muted ones silenced.
    Source tracks only enter the graph once a mute toggle is set, so clips
    without audio compose as long as nothing asks to mute them. The
    copy policy forwards one track untouched and never filters.
    """
    background_audio = map_spec("a", input_index=AssetRole.BACKGROUND.input_index, optional=True)
    if opts.audio_policy is AudioPolicy.COPY:
        return (), (map_music() if present.music else background_audio) + COPY
    muted = _muted_roles(opts)
    if present.music:
        return tuple(sink_clause(role) for role in muted), map_music()
    if not muted:
        return (), background_audio
    clauses, pads = _mix_sources(opts)
    mix = f"{''.join(pads)}{MIX}{pad(AUDIO_OUT_LABEL)}"
    return (*clauses, mix), map_pad(AUDIO_OUT_LABEL)
