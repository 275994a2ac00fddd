"""Tests for the submission flow and the run wrapper around it."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from ffoverlay.backend import executor, run_composition, submit
from ffoverlay.backend.builder import OUTPUT_NAME
from ffoverlay.backend.executor import ffoverlay
from ffoverlay.errors import EngineExecutionError, EngineNotReadyError, MissingInputError
from ffoverlay.models import (
    AssetBundle,
    AssetRole,
    CompositionOptions,
    MediaAsset,
    Options,
    ProgressState,
    RuntimeOptions,
    Verbosity,
)
from ffoverlay.tools import format_ffmpeg_cmd

BG = MediaAsset(AssetRole.BACKGROUND, b"bg")
FG = MediaAsset(AssetRole.FOREGROUND, b"fg")
MUSIC = MediaAsset(AssetRole.MUSIC, b"music")


@pytest.mark.parametrize(
    "assets",
    [AssetBundle(), AssetBundle(background=BG), AssetBundle(foreground=FG, music=MUSIC)],
)
def test_submit_missing_input_leaves_engine_untouched(fake_engine, assets: AssetBundle) -> None:
    with pytest.raises(MissingInputError):
        submit(fake_engine, assets, CompositionOptions())
    assert fake_engine.calls == []


def test_submit_requires_loaded_engine(fake_engine_cls) -> None:
    engine = fake_engine_cls(loaded=False)
    with pytest.raises(EngineNotReadyError):
        submit(engine, AssetBundle(background=BG, foreground=FG), CompositionOptions())
    assert engine.calls == ["loaded"]


def test_submit_returns_output_and_cleans_storage(fake_engine) -> None:
    seen: list[int] = []
    progress = ProgressState(seen.append)
    data = submit(fake_engine, AssetBundle(background=BG, foreground=FG), CompositionOptions(), progress=progress)

    assert data == b"composited video"
    assert fake_engine.calls == [
        "loaded",
        "write_file:background.mp4",
        "write_file:foreground.mp4",
        "exec",
        f"read_file:{OUTPUT_NAME}",
        "delete_file:background.mp4",
        "delete_file:foreground.mp4",
        f"delete_file:{OUTPUT_NAME}",
    ]
    assert fake_engine.storage == {}
    assert fake_engine.staged_at_exec == {"background.mp4", "foreground.mp4"}
    assert seen == [0, 25, 50, 100, 0]
    assert progress.value == 0
    assert fake_engine.handlers == {"progress": [], "log": []}


def test_submit_stages_music(fake_engine) -> None:
    submit(fake_engine, AssetBundle(background=BG, foreground=FG, music=MUSIC), CompositionOptions(add_waveform=True))
    assert fake_engine.staged_at_exec == {"background.mp4", "foreground.mp4", "music.mp3"}
    assert fake_engine.args is not None
    assert "music.mp3" in fake_engine.args
    assert fake_engine.storage == {}


def test_submit_failure_still_cleans_storage(failing_engine) -> None:
    progress = ProgressState()
    with pytest.raises(EngineExecutionError, match="Invalid data"):
        submit(failing_engine, AssetBundle(background=BG, foreground=FG), CompositionOptions(), progress=progress)
    assert "delete_file:background.mp4" in failing_engine.calls
    assert "delete_file:foreground.mp4" in failing_engine.calls
    assert failing_engine.storage == {}
    assert progress.value == 0
    assert failing_engine.handlers == {"progress": [], "log": []}


def test_submit_missing_output(fake_engine_cls) -> None:
    engine = fake_engine_cls(output=None)
    with pytest.raises(EngineExecutionError, match="No readable output"):
        submit(engine, AssetBundle(background=BG, foreground=FG), CompositionOptions())
    assert engine.storage == {}


def test_submit_empty_output(fake_engine_cls) -> None:
    engine = fake_engine_cls(output=b"")
    with pytest.raises(EngineExecutionError, match="empty output"):
        submit(engine, AssetBundle(background=BG, foreground=FG), CompositionOptions())
    assert engine.storage == {}


def test_cleanup_failure_is_logged(fake_engine_cls, caplog: pytest.LogCaptureFixture) -> None:
    class StickyEngine(fake_engine_cls):
        def delete_file(self, name: str) -> None:
            self.calls.append(f"delete_file:{name}")
            raise PermissionError(name)

    engine = StickyEngine()
    with caplog.at_level(logging.WARNING, logger="ffoverlay.backend.executor"):
        data = submit(engine, AssetBundle(background=BG, foreground=FG), CompositionOptions())
    assert data == b"composited video"
    assert "Could not remove background.mp4" in caplog.text


def test_submit_forwards_engine_output_when_verbose(fake_engine) -> None:
    lines: list[str] = []
    submit(
        fake_engine,
        AssetBundle(background=BG, foreground=FG),
        CompositionOptions(),
        status_callback=lines.append,
        verbosity=Verbosity.OUTPUT,
    )
    assert lines[0].startswith("Running: ffmpeg -i background.mp4")
    assert "frame written" in lines


def test_submit_quiet_hides_engine_output(fake_engine) -> None:
    lines: list[str] = []
    submit(fake_engine, AssetBundle(background=BG, foreground=FG), CompositionOptions(), status_callback=lines.append)
    assert lines == []


def test_run_composition_dry_run(input_files: dict[str, Path], fake_engine) -> None:
    lines: list[str] = []
    opts = Options(
        background=input_files["background"],
        foreground=input_files["foreground"],
        runtime=RuntimeOptions(dry_run=True),
    )
    args, result = run_composition(opts, status_callback=lines.append, engine=fake_engine)
    assert result.success
    assert result.output == str(input_files["background"].parent / "bg_overlay.mp4")
    assert args[-1] == OUTPUT_NAME
    assert lines == [f"Command: {format_ffmpeg_cmd(args)}"]
    assert fake_engine.calls == []
    assert not Path(result.output).exists()


def test_run_composition_missing_input(input_files: dict[str, Path], fake_engine) -> None:
    opts = Options(background=input_files["background"])
    args, result = run_composition(opts, status_callback=lambda _m: None, engine=fake_engine)
    assert args == ()
    assert not result.success
    assert result.error == executor.MISSING_INPUT_MESSAGE
    assert fake_engine.calls == []


def test_missing_input_reported_before_any_read(
    input_files: dict[str, Path], fake_engine, monkeypatch: pytest.MonkeyPatch
) -> None:
    reads: list[Path] = []
    monkeypatch.setattr(Path, "read_bytes", lambda self: reads.append(self) or b"")
    opts = Options(foreground=input_files["foreground"], music=input_files["music"])
    _, result = run_composition(opts, status_callback=lambda _m: None, engine=fake_engine)
    assert result.error == executor.MISSING_INPUT_MESSAGE
    assert reads == []
    assert fake_engine.calls == []


def test_run_composition_writes_output(input_files: dict[str, Path], tmp_path: Path, fake_engine) -> None:
    lines: list[str] = []
    progress: list[int] = []
    output = tmp_path / "nested" / "out.mp4"
    opts = Options(
        background=input_files["background"],
        foreground=input_files["foreground"],
        music=input_files["music"],
        output=output,
    )
    args, result = run_composition(
        opts, status_callback=lines.append, progress_callback=progress.append, engine=fake_engine
    )
    assert result.success
    assert result.output == str(output)
    assert output.read_bytes() == b"composited video"
    assert args == fake_engine.args
    assert lines == [str(output)]
    assert progress == [0, 25, 50, 100, 0]


def test_run_composition_engine_not_ready(input_files: dict[str, Path], fake_engine_cls) -> None:
    opts = Options(background=input_files["background"], foreground=input_files["foreground"])
    _, result = run_composition(opts, status_callback=lambda _m: None, engine=fake_engine_cls(loaded=False))
    assert not result.success
    assert result.error.startswith(executor.ENGINE_NOT_READY_MESSAGE)


def test_run_composition_engine_failure(input_files: dict[str, Path], tmp_path: Path, failing_engine) -> None:
    output = tmp_path / "out.mp4"
    opts = Options(background=input_files["background"], foreground=input_files["foreground"], output=output)
    _, result = run_composition(opts, status_callback=lambda _m: None, engine=failing_engine)
    assert not result.success
    assert result.error == "Composition failed: ffmpeg exited with status 1: Invalid data"
    assert not output.exists()


def test_run_composition_loads_own_engine_failure(
    input_files: dict[str, Path], monkeypatch: pytest.MonkeyPatch
) -> None:
    def _missing(_ctx: object) -> str:
        raise RuntimeError("ffmpeg not found")

    monkeypatch.setattr("ffoverlay.backend.engine.check_ffmpeg_version", _missing)
    opts = Options(background=input_files["background"], foreground=input_files["foreground"])
    _, result = run_composition(opts, status_callback=lambda _m: None)
    assert not result.success
    assert "ffmpeg not found" in result.error


def test_run_composition_output_parent_is_file(input_files: dict[str, Path], tmp_path: Path, fake_engine) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("x")
    opts = Options(
        background=input_files["background"],
        foreground=input_files["foreground"],
        output=blocker / "out.mp4",
    )
    _, result = run_composition(opts, status_callback=lambda _m: None, engine=fake_engine)
    assert not result.success
    assert "not a directory" in result.error
    assert fake_engine.calls == []


def test_run_composition_open_dir(
    input_files: dict[str, Path], fake_engine, monkeypatch: pytest.MonkeyPatch
) -> None:
    opened: list[str] = []
    monkeypatch.setattr("ffoverlay.backend.executor.open_directory", opened.append)
    opts = Options(
        background=input_files["background"],
        foreground=input_files["foreground"],
        runtime=RuntimeOptions(open_dir=True),
    )
    _, result = run_composition(opts, status_callback=lambda _m: None, engine=fake_engine)
    assert result.success
    assert opened == [result.output]


def test_ffoverlay_reports_failure(input_files: dict[str, Path], capsys: pytest.CaptureFixture[str]) -> None:
    opts = Options(background=input_files["background"])
    assert ffoverlay(opts) == 1
    assert executor.MISSING_INPUT_MESSAGE in capsys.readouterr().err


def test_ffoverlay_routes_errors_to_callback(input_files: dict[str, Path]) -> None:
    lines: list[str] = []
    opts = Options(foreground=input_files["foreground"])
    assert ffoverlay(opts, status_callback=lines.append) == 1
    assert lines == [executor.MISSING_INPUT_MESSAGE]


def test_ffoverlay_dry_run(input_files: dict[str, Path], capsys: pytest.CaptureFixture[str]) -> None:
    opts = Options(
        background=input_files["background"],
        foreground=input_files["foreground"],
        runtime=RuntimeOptions(dry_run=True),
    )
    assert ffoverlay(opts) == 0
    assert capsys.readouterr().out.startswith("Command: ffmpeg -i background.mp4 -i foreground.mp4")
