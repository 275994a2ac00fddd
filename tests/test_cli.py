"""Tests for the CLI entry point."""

from pathlib import Path

import pytest

from ffoverlay.cli import main


def test_cli_help(capsys: pytest.CaptureFixture[str]) -> None:
    """Display help message without error."""
    code = main(["--help"])
    out = capsys.readouterr().out
    assert code in (0, None)
    assert "ffoverlay" in out
    assert "--background" in out
    assert "--mute-foreground" in out


def test_help_hides_internal_options(capsys: pytest.CaptureFixture[str]) -> None:
    """The status callback is not exposed as a flag."""
    main(["--help"])
    assert "status-callback" not in capsys.readouterr().out


def test_cli_dry_run(input_files: dict[str, Path], capsys: pytest.CaptureFixture[str]) -> None:
    code = main(
        [
            "--background",
            str(input_files["background"]),
            "--foreground",
            str(input_files["foreground"]),
            "--runtime.dry-run",
        ]
    )
    out = capsys.readouterr().out
    assert code == 0
    assert out.startswith("Command: ffmpeg -i background.mp4 -i foreground.mp4 -filter_complex")
    assert "volume=0" not in out


def test_cli_mute_flag_reaches_graph(input_files: dict[str, Path], capsys: pytest.CaptureFixture[str]) -> None:
    code = main(
        [
            "--background",
            str(input_files["background"]),
            "--foreground",
            str(input_files["foreground"]),
            "--mute-background",
            "--runtime.dry-run",
        ]
    )
    assert code == 0
    assert "[0:a]volume=0[bga]" in capsys.readouterr().out


def test_cli_missing_foreground(input_files: dict[str, Path], capsys: pytest.CaptureFixture[str]) -> None:
    code = main(["--background", str(input_files["background"]), "--runtime.dry-run"])
    assert code == 1
    assert "Please provide both a background and a foreground video." in capsys.readouterr().err
