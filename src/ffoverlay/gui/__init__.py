"""Qt front end.

Importing this package never fails when the Qt bindings are broken; the
import error is written to the log file and re-raised from :func:`run_gui`
so the GUI launcher (which has no console) leaves a trace.
"""

from __future__ import annotations

import logging
from contextlib import suppress
from pathlib import Path

LOG_FILE = Path.home() / ".ffoverlay" / "ffoverlay.log"

logger = logging.getLogger(__name__)

try:  # pragma: no cover - depends on the installed Qt bindings
    from .controller import FFOverlayController
    from .main_window import FFOverlayGUI
    from .main_window import run_gui as _launch
except ImportError as exc:  # pragma: no cover - missing Qt bindings
    FFOverlayController = FFOverlayGUI = _launch = None  # type: ignore[assignment,misc]
    _import_error: ImportError | None = exc
    with suppress(OSError):
        LOG_FILE.parent.mkdir(parents=True, exist_ok=True)
        logging.basicConfig(filename=LOG_FILE, encoding="utf-8", level=logging.ERROR)
    logger.error("Qt front end unavailable", exc_info=exc)
else:
    _import_error = None

__all__ = ["LOG_FILE", "FFOverlayController", "FFOverlayGUI", "run_gui"]


def run_gui() -> None:
    """Open the main window, or raise why the Qt front end cannot load."""
    if _import_error is not None:
        raise _import_error
    _launch()
