"""Stream selectors and filter graph link labels."""

MAP_FLAG = "-map"  #: Route a stream or labelled graph output to the output file.


def spec(kind: str, *, input_index: int = 0, optional: bool = False) -> str:
    """Return an input stream selector such as ``2:a`` or ``0:a?``.

    ``optional`` appends ``?`` so FFmpeg skips inputs that lack the stream
    instead of failing.
    """
    return f"{input_index}:{kind}{'?' if optional else ''}"


def pad(name: str) -> str:
    """Return a filter graph link label such as ``[vout]``."""
    return f"[{name}]"


def input_pad(kind: str, input_index: int) -> str:
    """Return a link label reading a stream straight from an input."""
    return pad(spec(kind, input_index=input_index))


def map_spec(kind: str, *, input_index: int = 0, optional: bool = False) -> tuple[str, ...]:
    return (MAP_FLAG, spec(kind, input_index=input_index, optional=optional))


def map_pad(name: str) -> tuple[str, ...]:
    return (MAP_FLAG, pad(name))


def copy_stream(kind: str) -> tuple[str, ...]:
    """Return ``-c:<kind> copy``."""
    return (f"-c:{kind}", "copy")
