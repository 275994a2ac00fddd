"""Stage assets, run the engine and collect the composited video."""

from __future__ import annotations

import logging
import shutil
import subprocess
import sys
from contextlib import suppress
from dataclasses import dataclass
from functools import partial
from pathlib import Path
from typing import TYPE_CHECKING, Annotated

from cyclopts import Parameter

from ffoverlay.errors import EngineExecutionError, EngineNotReadyError, FFOverlayError, MissingInputError
from ffoverlay.models import (
    AssetBundle,
    AssetPresence,
    AssetRole,
    CompositionOptions,
    MediaAsset,
    Options,
    ProgressState,
    RuntimeContext,
)
from ffoverlay.models.progress import PERCENT_MAX
from ffoverlay.models.verbosity import Verbosity
from ffoverlay.tools import announce_command, emit_status

from .builder import OUTPUT_NAME, build_command
from .engine import LOG_EVENT, PROGRESS_EVENT, Engine, FFmpegEngine

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable
else:
    from collections import abc

    Callable = abc.Callable

CONVERSION_FAILED = "Composition failed"
MISSING_INPUT_MESSAGE = "Please provide both a background and a foreground video."
ENGINE_NOT_READY_MESSAGE = "FFmpeg is not ready"

logger = logging.getLogger(__name__)


@dataclass
class CompositionResult:
    """Outcome of one submission as shown to the user."""

    success: bool
    error: str = ""
    output: str | None = None


def _require_assets(assets: AssetBundle) -> None:
    if not assets.complete:
        raise MissingInputError(MISSING_INPUT_MESSAGE)


def _cleanup(engine: Engine, names: Iterable[str]) -> None:
    """Remove ``names`` from engine storage, logging anything that sticks."""
    for name in names:
        try:
            engine.delete_file(name)
        except FileNotFoundError:
            continue
        except (OSError, FFOverlayError) as e:
            logger.warning("Could not remove %s from engine storage: %s", name, e)


def submit(
    engine: Engine,
    assets: AssetBundle,
    options: CompositionOptions,
    *,
    progress: ProgressState | None = None,
    status_callback: Callable[[str], None] | None = None,
    verbosity: Verbosity = Verbosity.QUIET,
) -> bytes:
    """Run one composition on ``engine`` and return the output video bytes.

    Staged inputs and the output are removed from engine storage on success
    and on failure, and ``progress`` is reset at both ends of the run.

    Raises:
        MissingInputError: If the background or foreground is missing. The
            engine is not touched.
        EngineNotReadyError: If the engine has not been loaded.
        EngineExecutionError: If the run fails or leaves no output.

    """
    _require_assets(assets)
    if not engine.loaded:
        raise EngineNotReadyError("Engine is not loaded")
    progress = progress or ProgressState()
    args = build_command(options, assets.presence)
    on_log = partial(emit_status, status_callback=status_callback) if verbosity >= Verbosity.OUTPUT else logger.debug
    written: list[str] = []
    progress.reset()
    engine.on(PROGRESS_EVENT, progress.update)
    engine.on(LOG_EVENT, on_log)
    try:
        for asset in assets.staged():
            written.append(asset.storage_name)
            engine.write_file(asset.storage_name, asset.data)
        announce_command(args, verbosity=verbosity, dry_run=False, status_callback=status_callback)
        engine.exec(args)
        try:
            data = engine.read_file(OUTPUT_NAME)
        except OSError as e:
            raise EngineExecutionError(f"No readable output: {e}") from e
        if not data:
            raise EngineExecutionError("Engine produced an empty output")
        return data
    except OSError as e:
        raise EngineExecutionError(f"Engine storage error: {e}") from e
    finally:
        _cleanup(engine, [*written, OUTPUT_NAME])
        engine.off(PROGRESS_EVENT, progress.update)
        engine.off(LOG_EVENT, on_log)
        progress.reset()


def _user_message(error: FFOverlayError) -> str:
    """Return the single line shown to the user for ``error``."""
    if isinstance(error, MissingInputError):
        return str(error)
    if isinstance(error, EngineNotReadyError):
        return f"{ENGINE_NOT_READY_MESSAGE}: {error}. Install FFmpeg or restart and try again."
    return f"{CONVERSION_FAILED}: {error}"


def _required_inputs(opts: Options) -> tuple[Path, Path]:
    """Return the background and foreground paths or raise ``MissingInputError``."""
    if opts.background is None or opts.foreground is None:
        raise MissingInputError(MISSING_INPUT_MESSAGE)
    return opts.background, opts.foreground


def _read_assets(background: Path, foreground: Path, music: Path | None) -> AssetBundle:
    """Read the selected input files into memory."""
    return AssetBundle(
        background=MediaAsset.from_path(AssetRole.BACKGROUND, background),
        foreground=MediaAsset.from_path(AssetRole.FOREGROUND, foreground),
        music=MediaAsset.from_path(AssetRole.MUSIC, music) if music is not None else None,
    )


def _ensure_output_parent(path: Path, verbosity: Verbosity, status_callback: Callable[[str], None] | None) -> None:
    """Create the output parent directory if missing.

    Raises:
        OSError: If the parent exists as a file or cannot be created.

    """
    parent = path.parent
    if parent.exists():
        if not parent.is_dir():
            raise OSError(f"Output directory parent is not a directory: {parent}")
        return
    parent.mkdir(parents=True, exist_ok=True)
    if verbosity > Verbosity.QUIET:
        emit_status(f"Created output directory: {parent}", status_callback=status_callback)


def _execute(
    opts: Options,
    inputs: tuple[Path, Path],
    output_path: Path,
    engine: Engine | None,
    status_callback: Callable[[str], None] | None,
    progress_callback: Callable[[int], None] | None,
) -> None:
    """Run the submission and write the output, loading an engine if needed."""
    assets = _read_assets(*inputs, opts.music)
    progress = ProgressState(progress_callback)
    kwargs = {"progress": progress, "status_callback": status_callback, "verbosity": opts.runtime.verbosity}
    if engine is not None:
        data = submit(engine, assets, opts.composition, **kwargs)
    else:
        with (
            RuntimeContext(verbosity=opts.runtime.verbosity, status_callback=status_callback) as runtime,
            FFmpegEngine(runtime) as owned,
        ):
            owned.load()
            data = submit(owned, assets, opts.composition, **kwargs)
    output_path.write_bytes(data)


def run_composition(
    opts: Options,
    status_callback: Callable[[str], None] | None = None,
    progress_callback: Callable[[int], None] | None = None,
    engine: Engine | None = None,
) -> tuple[tuple[str, ...], CompositionResult]:
    """Compose the video described by ``opts`` and save it.

    ``engine`` lets long-lived callers such as the GUI reuse one loaded
    engine; otherwise a fresh :class:`FFmpegEngine` is loaded for this run.
    Every failure is returned as a :class:`CompositionResult` with a user
    facing message.
    """
    args: tuple[str, ...] = ()
    try:
        inputs = _required_inputs(opts)
        args = build_command(opts.composition, AssetPresence(music=opts.music is not None))
        output_path = opts.output_path()
        if opts.runtime.dry_run:
            announce_command(args, verbosity=opts.runtime.verbosity, dry_run=True, status_callback=status_callback)
            return args, CompositionResult(success=True, output=str(output_path))
        _ensure_output_parent(output_path, opts.runtime.verbosity, status_callback)
        _execute(opts, inputs, output_path, engine, status_callback, progress_callback)
    except FFOverlayError as e:
        logger.debug("Composition failed", exc_info=True)
        return args, CompositionResult(success=False, error=_user_message(e))
    except OSError as e:
        logger.debug("Composition failed", exc_info=True)
        return args, CompositionResult(success=False, error=f"{CONVERSION_FAILED}: {e}")
    emit_status(str(output_path), status_callback=status_callback)
    if opts.runtime.open_dir:
        open_directory(str(output_path))
    return args, CompositionResult(success=True, output=str(output_path))


def _reveal_command(path: Path) -> list[str] | None:
    """Return the platform command that shows ``path`` in a file manager."""
    if sys.platform == "win32":
        exe = shutil.which("explorer")
        return [exe, "/select,", str(path)] if exe else None
    if sys.platform == "darwin":
        exe = shutil.which("open")
        return [exe, "-R", str(path)] if exe else None
    exe = shutil.which("xdg-open")
    return [exe, str(path.parent)] if exe else None


def open_directory(output: str) -> None:
    """Reveal ``output`` in the system file manager, ignoring failures."""
    cmd = _reveal_command(Path(output).absolute())
    if cmd is None:
        return
    with suppress(OSError):
        subprocess.run(cmd, check=False)  # noqa: S603


def _terminal_progress(value: int) -> None:
    """Draw an in-place percentage on the terminal."""
    if value == 0:
        return
    end = "\n" if value >= PERCENT_MAX else ""
    print(f"\rProgress: {value}%", end=end, flush=True)  # noqa: T201


def ffoverlay(
    opts: Options,
    status_callback: Annotated[Callable[[str], None] | None, Parameter(show=False)] = None,  # type: ignore[call-arg]
) -> int:
    """Overlay a foreground video onto a background video."""
    status_func = print if status_callback is None else status_callback
    show_progress = status_callback is None and opts.runtime.verbosity < Verbosity.OUTPUT
    _, result = run_composition(
        opts,
        status_callback=status_func,
        progress_callback=_terminal_progress if show_progress else None,
    )
    if not result.success:
        err_func = partial(print, file=sys.stderr, flush=True) if status_callback is None else status_callback
        err_func(result.error)
        return 1
    return 0
