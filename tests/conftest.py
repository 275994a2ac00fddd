"""Shared pytest fixtures.

Keeps tests away from the user's file manager and on-disk cache, forces Qt
to use an offscreen backend, and provides a spy engine that records every
call made to it.
"""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from ffoverlay.backend.builder import OUTPUT_NAME
from ffoverlay.errors import EngineExecutionError


@pytest.fixture(autouse=True)
def _no_open_dir(monkeypatch: pytest.MonkeyPatch) -> None:
    """Disable revealing outputs in the system file manager during tests."""
    monkeypatch.setattr("ffoverlay.backend.executor.open_directory", lambda _p: None)


@pytest.fixture(autouse=True)
def _qt_offscreen() -> None:
    """Force Qt to use the offscreen platform for GUI tests."""
    os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


@pytest.fixture(autouse=True)
def _isolated_cache(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Point the runtime cache at a per-test directory."""
    monkeypatch.setattr("ffoverlay.models.context._CACHE_DIR", tmp_path / "cache")


@pytest.fixture(autouse=True)
def _tools_version_sanity(monkeypatch: pytest.MonkeyPatch) -> None:
    """Stub the FFmpeg version check to avoid native calls in tests."""
    monkeypatch.setattr("ffoverlay.backend.engine.check_ffmpeg_version", lambda _ctx: "ffmpeg version test")


class FakeEngine:
    """In-memory engine that records calls and replays scripted progress."""

    def __init__(
        self,
        *,
        loaded: bool = True,
        output: bytes | None = b"composited video",
        exec_error: Exception | None = None,
        progress_steps: tuple[float, ...] = (0.25, 0.5, 1.0),
    ) -> None:
        self.calls: list[str] = []
        self.storage: dict[str, bytes] = {}
        self.handlers: dict[str, list] = {"progress": [], "log": []}
        self.args: tuple[str, ...] | None = None
        self.staged_at_exec: set[str] = set()
        self._loaded = loaded
        self.output = output
        self.exec_error = exec_error
        self.progress_steps = progress_steps

    def load(self) -> None:
        self.calls.append("load")
        self._loaded = True

    @property
    def loaded(self) -> bool:
        self.calls.append("loaded")
        return self._loaded

    def write_file(self, name: str, data: bytes) -> None:
        self.calls.append(f"write_file:{name}")
        self.storage[name] = data

    def exec(self, args) -> None:
        self.calls.append("exec")
        self.args = tuple(args)
        self.staged_at_exec = set(self.storage)
        for step in self.progress_steps:
            for handler in list(self.handlers["progress"]):
                handler(step)
        for handler in list(self.handlers["log"]):
            handler("frame written")
        if self.exec_error is not None:
            raise self.exec_error
        if self.output is not None:
            self.storage[OUTPUT_NAME] = self.output

    def read_file(self, name: str) -> bytes:
        self.calls.append(f"read_file:{name}")
        if name not in self.storage:
            raise FileNotFoundError(name)
        return self.storage[name]

    def delete_file(self, name: str) -> None:
        self.calls.append(f"delete_file:{name}")
        if name not in self.storage:
            raise FileNotFoundError(name)
        del self.storage[name]

    def on(self, event: str, handler) -> None:
        self.handlers[event].append(handler)

    def off(self, event: str, handler) -> None:
        if handler in self.handlers[event]:
            self.handlers[event].remove(handler)


@pytest.fixture
def fake_engine_cls() -> type[FakeEngine]:
    """Expose the spy engine class so tests can configure instances."""
    return FakeEngine


@pytest.fixture
def fake_engine() -> FakeEngine:
    """Loaded spy engine that produces a small output blob."""
    return FakeEngine()


@pytest.fixture
def failing_engine() -> FakeEngine:
    """Loaded spy engine whose run fails."""
    return FakeEngine(exec_error=EngineExecutionError("ffmpeg exited with status 1: Invalid data"))


@pytest.fixture
def input_files(tmp_path: Path) -> dict[str, Path]:
    """Create placeholder background, foreground and music files."""
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    files = {
        "background": data_dir / "bg.mp4",
        "foreground": data_dir / "fg.mp4",
        "music": data_dir / "song.mp3",
    }
    for role, path in files.items():
        path.write_bytes(f"{role} bytes".encode())
    return files
