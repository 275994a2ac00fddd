"""Worker thread, log bridge and form-building widgets."""

from __future__ import annotations

import logging
from dataclasses import asdict
from typing import TYPE_CHECKING

from PyQt6.QtCore import QObject, QThread, pyqtSignal
from PyQt6.QtWidgets import (
    QCheckBox,
    QFileDialog,
    QGroupBox,
    QHBoxLayout,
    QLineEdit,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from ffoverlay.backend import run_composition

if TYPE_CHECKING:  # pragma: no cover - typing only
    from collections.abc import Callable

    from ffoverlay.backend import Engine
    from ffoverlay.models import Options

logger = logging.getLogger(__name__)


class LogEmitter(QObject):
    """Carries formatted log lines across threads to the status pane."""

    message = pyqtSignal(str)


class QtLogHandler(logging.Handler):
    """Forward records through a :class:`LogEmitter`.

    Records may come from the composition thread; the queued signal lets Qt
    deliver them on the GUI thread.
    """

    def __init__(self, emitter: LogEmitter) -> None:
        super().__init__()
        self._emitter = emitter

    def emit(self, record: logging.LogRecord) -> None:
        self._emitter.message.emit(self.format(record))


class CompositionThread(QThread):
    """Run one composition in a background thread.

    Status lines and progress percentages are forwarded through Qt signals so
    the engine never waits on the UI.
    """

    finished = pyqtSignal(dict)
    status = pyqtSignal(str)
    progress = pyqtSignal(int)

    def __init__(
        self,
        options: Options,
        engine: Engine | None = None,
        status_callback: Callable[[str], None] | None = None,
        progress_callback: Callable[[int], None] | None = None,
    ) -> None:
        super().__init__()
        self.options = options
        self.engine = engine
        if status_callback is not None:
            self.status.connect(status_callback)
        if progress_callback is not None:
            self.progress.connect(progress_callback)

    def run(self) -> None:
        """Compose and emit ``finished`` with a ``CompositionResult`` mapping."""
        try:
            _, result = run_composition(
                self.options,
                status_callback=self.status.emit,
                progress_callback=self.progress.emit,
                engine=self.engine,
            )
        except Exception as e:
            logger.exception("Unhandled error during composition")
            self.finished.emit({"success": False, "error": f"Composition failed: {e}", "output": None})
            return
        self.finished.emit(asdict(result))


class FileField(QWidget):
    """Line edit with a browse button for picking one file."""

    def __init__(self, caption: str, file_filter: str, on_change: Callable[[], None]) -> None:
        super().__init__()
        self._caption = caption
        self._filter = file_filter
        self.edit = QLineEdit()
        self.edit.setPlaceholderText(caption)
        self.edit.textChanged.connect(lambda _text: on_change())
        browse = QPushButton("Browse...")
        browse.clicked.connect(self.browse)
        layout = QHBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addWidget(self.edit)
        layout.addWidget(browse)

    def browse(self) -> None:
        """Ask the user for a file and show its path."""
        file_path, _ = QFileDialog.getOpenFileName(self, self._caption, "", self._filter)
        if file_path:
            self.edit.setText(file_path)

    def text(self) -> str:
        """Return the stripped path text."""
        return self.edit.text().strip()


class UIHelpers:
    """Mixin providing convenience methods for building the form."""

    layout: QVBoxLayout

    def on_settings_changed(self) -> None:  # pragma: no cover - overridden
        """React to updates of any UI controls."""

    def add_group(self, title: str) -> QVBoxLayout:
        """Add a titled group and return its layout."""
        layout = QVBoxLayout()
        group = QGroupBox(title)
        group.setLayout(layout)
        self.layout.addWidget(group)
        return layout

    def add_file_field(self, layout: QVBoxLayout, caption: str, file_filter: str) -> FileField:
        """Add a file picker row to ``layout``."""
        field = FileField(caption, file_filter, self.on_settings_changed)
        layout.addWidget(field)
        return field

    def add_checkbox(self, layout: QVBoxLayout, text: str, *, checked: bool = False) -> QCheckBox:
        """Add a checkbox with optional default state."""
        c = QCheckBox(text)
        c.setChecked(checked)
        c.toggled.connect(lambda _checked: self.on_settings_changed())
        layout.addWidget(c)
        return c
