"""Video filter graph clauses."""

from ffoverlay.models import AssetPresence, AssetRole, CompositionOptions

from .stream_args import input_pad, pad

FOREGROUND_LABEL = "fg"  #: Foreground after scaling to the background size.
BACKGROUND_LABEL = "bg"  #: Background passed through the scaler untouched.
COMPOSITE_LABEL = "comp"  #: Background with the centered foreground.
WAVEFORM_LABEL = "wave"  #: Rendered music waveform.
VIDEO_OUT_LABEL = "vout"  #: Final video stream fed to the output.

SCALE_TO_REFERENCE = "scale2ref"  #: Scale the first input to the frame size of the second.
CENTER_OVERLAY = "overlay=(W-w)/2:(H-h)/2:shortest=1"  #: Center overlay, stop with the shorter stream.
WAVEFORM = "showwaves=s=1280x200:mode=cline:colors=cyan"  #: Waveform renderer for the music track.
CORNER_OVERLAY = "overlay=W-w:H-h:shortest=1"  #: Pin the waveform to the bottom-right corner.


def composite_clause(output: str) -> str:
    """Return the clause overlaying the scaled foreground onto the background."""
    fg_in = input_pad("v", AssetRole.FOREGROUND.input_index)
    bg_in = input_pad("v", AssetRole.BACKGROUND.input_index)
    fg, bg = pad(FOREGROUND_LABEL), pad(BACKGROUND_LABEL)
    return f"{fg_in}{bg_in}{SCALE_TO_REFERENCE}{fg}{bg};{bg}{fg}{CENTER_OVERLAY}{pad(output)}"


def waveform_clause(source: str, output: str) -> str:
    """Return the clause drawing the music waveform over ``source``."""
    music_in = input_pad("a", AssetRole.MUSIC.input_index)
    wave = pad(WAVEFORM_LABEL)
    return f"{music_in}{WAVEFORM}{wave};{pad(source)}{wave}{CORNER_OVERLAY}{pad(output)}"


def wants_waveform(opts: CompositionOptions, present: AssetPresence) -> bool:
    """Whether a waveform can be drawn; it needs music as its signal."""
    return opts.add_waveform and present.music


def build(opts: CompositionOptions, present: AssetPresence) -> tuple[tuple[str, ...], str]:
    """Return video clauses and the label of the final video stream."""
    if not wants_waveform(opts, present):
        return (composite_clause(VIDEO_OUT_LABEL),), VIDEO_OUT_LABEL
    return (
        composite_clause(COMPOSITE_LABEL),
        waveform_clause(COMPOSITE_LABEL, VIDEO_OUT_LABEL),
    ), VIDEO_OUT_LABEL
