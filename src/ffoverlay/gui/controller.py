"""Controller to manage option collection and composition runs."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ffoverlay.backend import FFmpegEngine
from ffoverlay.errors import EngineNotReadyError
from ffoverlay.models import Options, RuntimeContext

from .ui_helpers import CompositionThread

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from ffoverlay.backend import Engine

    from .main_window import FFOverlayGUI


class FFOverlayController:
    """Coordinate GUI actions with the engine.

    One engine is loaded when the window opens and reused by every run. Runs
    are serialized: a new one cannot start while a thread is in flight.
    """

    def __init__(self, gui: FFOverlayGUI, engine: Engine | None = None) -> None:
        """Store reference to the GUI window and the shared engine."""
        self.gui = gui
        self.engine = engine
        self.processing_thread: CompositionThread | None = None

    def load_engine(self) -> bool:
        """Load the shared FFmpeg engine, reporting failures to the user."""
        if self.engine is not None and self.engine.loaded:
            return True
        engine = FFmpegEngine(RuntimeContext())
        try:
            engine.load()
        except EngineNotReadyError as e:
            logger.exception("Failed to load engine")
            self.gui.show_error(f"FFmpeg not loaded: {e}. Install FFmpeg and restart.")
            return False
        self.engine = engine
        return True

    def close(self) -> None:
        """Release engine storage."""
        if isinstance(self.engine, FFmpegEngine):
            self.engine.close()

    @property
    def busy(self) -> bool:
        """Whether a composition is still running."""
        return self.processing_thread is not None and self.processing_thread.isRunning()

    def get_options(self) -> Options:
        """Collect options from the GUI widgets."""
        return Options.model_validate(self.gui.collect_widget_values())

    def run(self) -> None:
        """Start a composition in a background thread."""
        if self.busy:
            return
        try:
            self.gui.clear_status()
            opts = self.get_options()
            self.gui.toggle_conversion_ui(converting=True)
            self.processing_thread = CompositionThread(
                opts,
                self.engine,
                self.gui.append_status,
                self.gui.set_progress,
            )
            self.processing_thread.finished.connect(self.gui.on_conversion_finished)
            self.processing_thread.start()
        except (RuntimeError, ValueError) as e:
            logger.exception("Failed to start composition thread")
            self.gui.show_error(f"Error starting composition: {e}")
            self.gui.toggle_conversion_ui(converting=False)
