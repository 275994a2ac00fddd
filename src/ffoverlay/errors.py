"""Error types raised while composing an overlay video."""


class FFOverlayError(Exception):
    """Base class for ffoverlay submission failures."""


class MissingInputError(FFOverlayError):
    """A required background or foreground asset was not supplied."""


class EngineNotReadyError(FFOverlayError):
    """The transcoding engine has not finished loading."""


class EngineExecutionError(FFOverlayError):
    """The engine run failed or left no readable output."""


__all__ = [
    "EngineExecutionError",
    "EngineNotReadyError",
    "FFOverlayError",
    "MissingInputError",
]
