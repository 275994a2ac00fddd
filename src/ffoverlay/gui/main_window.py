"""The composition form and the GUI launcher."""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING

from PyQt6.QtWidgets import (
    QApplication,
    QLabel,
    QLineEdit,
    QMainWindow,
    QMessageBox,
    QProgressBar,
    QPushButton,
    QTextEdit,
    QVBoxLayout,
    QWidget,
)

from ffoverlay.models.options import OUTPUT_SUFFIX, OVERLAY_SUFFIX
from ffoverlay.models.progress import PERCENT_MAX

from . import LOG_FILE
from .controller import FFOverlayController
from .ui_helpers import FileField, LogEmitter, QtLogHandler, UIHelpers

if TYPE_CHECKING:  # pragma: no cover - typing only
    from types import TracebackType

    from PyQt6.QtGui import QCloseEvent

VIDEO_FILE_FILTER = "Video files (*.mp4 *.mkv *.mov *.webm *.m4v *.avi);;All files (*)"
AUDIO_FILE_FILTER = "Audio files (*.mp3 *.m4a *.aac *.wav *.ogg *.flac);;All files (*)"
RUN_LABEL = "Process Video"
BUSY_LABEL = "Processing..."

logger = logging.getLogger(__name__)


def _install_file_logging() -> None:
    """Send every record to ``LOG_FILE``, once per process."""
    root = logging.getLogger()
    for handler in root.handlers:
        if isinstance(handler, RotatingFileHandler) and Path(handler.baseFilename) == LOG_FILE:
            return
    try:
        LOG_FILE.parent.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(LOG_FILE, maxBytes=1_000_000, backupCount=3, encoding="utf-8")
    except OSError:  # pragma: no cover - read-only home
        logger.warning("Logging to %s is unavailable", LOG_FILE)
        return
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    root.addHandler(handler)
    root.setLevel(logging.DEBUG)


class FFOverlayGUI(QMainWindow, UIHelpers):
    """Pick the two videos and optional music, toggle options, and run."""

    layout: QVBoxLayout
    foreground: FileField
    background: FileField
    music: FileField
    output: QLineEdit
    run_btn: QPushButton
    progress_bar: QProgressBar
    status_text: QTextEdit

    def __init__(self) -> None:
        super().__init__()
        self.setWindowTitle("ffoverlay")
        self.resize(560, 520)
        self.output_overridden = False
        self.controller = FFOverlayController(self)
        self._build_ui()
        self._mirror_warnings()
        self.run_btn.setEnabled(self.controller.load_engine())

    def _build_ui(self) -> None:
        central = QWidget()
        self.layout = QVBoxLayout(central)
        self.setCentralWidget(central)

        inputs = self.add_group("Inputs")
        self.foreground = self.add_file_field(inputs, "Foreground video", VIDEO_FILE_FILTER)
        self.background = self.add_file_field(inputs, "Background video", VIDEO_FILE_FILTER)
        self.music = self.add_file_field(inputs, "Background music (optional)", AUDIO_FILE_FILTER)

        toggles = self.add_group("Composition")
        self.mute_foreground = self.add_checkbox(toggles, "Mute foreground video")
        self.mute_background = self.add_checkbox(toggles, "Mute background video")
        self.add_waveform = self.add_checkbox(toggles, "Add audio waveform")

        output = self.add_group("Output")
        self.output = QLineEdit()
        self.output.setPlaceholderText(f"<background>{OVERLAY_SUFFIX}{OUTPUT_SUFFIX}")
        self.output.textEdited.connect(self._on_output_edited)
        output.addWidget(self.output)

        self.progress_label = QLabel("Processing video...")
        self.progress_bar = QProgressBar()
        self.progress_bar.setRange(0, PERCENT_MAX)
        self.layout.addWidget(self.progress_label)
        self.layout.addWidget(self.progress_bar)

        self.run_btn = QPushButton(RUN_LABEL)
        self.run_btn.clicked.connect(self.controller.run)
        self.layout.addWidget(self.run_btn)

        self.status_text = QTextEdit()
        self.status_text.setReadOnly(True)
        self.layout.addWidget(self.status_text)
        self.toggle_conversion_ui(converting=False)

    def _mirror_warnings(self) -> None:
        # Keep references; Qt would otherwise collect the emitter.
        _install_file_logging()
        self._log_emitter = LogEmitter()
        self._log_emitter.message.connect(self.append_status)
        self._qt_handler = QtLogHandler(self._log_emitter)
        self._qt_handler.setLevel(logging.WARNING)
        self._qt_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
        logging.getLogger().addHandler(self._qt_handler)

    def collect_widget_values(self) -> dict[str, object]:
        """Return the form as a mapping accepted by ``Options.model_validate``."""
        values: dict[str, object] = {
            role: field.text()
            for role, field in (("foreground", self.foreground), ("background", self.background), ("music", self.music))
            if field.text()
        }
        values["composition"] = {
            "mute_foreground": self.mute_foreground.isChecked(),
            "mute_background": self.mute_background.isChecked(),
            "add_waveform": self.add_waveform.isChecked(),
        }
        output = self.output.text().strip()
        if self.output_overridden and output:
            values["output"] = output
        return values

    def on_settings_changed(self) -> None:
        """Suggest an output next to the background until the user types one."""
        if self.output_overridden or not hasattr(self, "output"):
            return
        bg = self.background.text()
        if not bg:
            self.output.clear()
            return
        path = Path(bg)
        self.output.setText(str(path.with_name(f"{path.stem}{OVERLAY_SUFFIX}{OUTPUT_SUFFIX}")))

    def _on_output_edited(self, text: str) -> None:
        self.output_overridden = bool(text.strip())

    def append_status(self, message: str) -> None:
        self.status_text.append(message)
        self.status_text.ensureCursorVisible()

    def clear_status(self) -> None:
        self.status_text.clear()

    def set_progress(self, value: int) -> None:
        self.progress_bar.setValue(value)

    def toggle_conversion_ui(self, *, converting: bool) -> None:
        """Lock the trigger and show the progress bar while a run is in flight."""
        self.run_btn.setEnabled(not converting and self.controller.engine is not None)
        self.run_btn.setText(BUSY_LABEL if converting else RUN_LABEL)
        self.progress_label.setVisible(converting)
        self.progress_bar.setVisible(converting)
        self.progress_bar.setValue(0)

    def show_error(self, message: str) -> None:
        QMessageBox.critical(self, "Error", message)

    def on_conversion_finished(self, result: dict) -> None:
        """Unlock the form and surface a failed run."""
        self.toggle_conversion_ui(converting=False)
        if not result["success"]:
            self.show_error(result["error"] or "Composition failed")

    def closeEvent(self, event: QCloseEvent | None) -> None:  # noqa: N802
        """Remove the engine's storage before the window goes away."""
        self.controller.close()
        super().closeEvent(event)


def _log_uncaught(
    exc_type: type[BaseException],
    exc_value: BaseException,
    exc_traceback: TracebackType | None,
) -> None:
    """Record crashes in the log file; there is no console to print them to."""
    if issubclass(exc_type, KeyboardInterrupt):
        sys.__excepthook__(exc_type, exc_value, exc_traceback)
        return
    logger.critical("Uncaught exception", exc_info=(exc_type, exc_value, exc_traceback))


def run_gui() -> None:
    """Start the Qt event loop with the main window."""
    _install_file_logging()
    sys.excepthook = _log_uncaught
    app = QApplication(sys.argv)
    app.setApplicationName("ffoverlay")
    window = FFOverlayGUI()
    window.show()
    sys.exit(app.exec())


if __name__ == "__main__":  # pragma: no cover - manual execution
    run_gui()
