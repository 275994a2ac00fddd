"""``ffoverlay`` console script."""

import sys

from cyclopts import App

from .backend import ffoverlay

app = App(name="ffoverlay", help="Overlay a foreground video onto a background video with FFmpeg.")
app.default(ffoverlay)


def main(argv: list[str] | None = None) -> int:
    """Parse ``argv`` (default: the process arguments) and run one composition."""
    return app(sys.argv[1:] if argv is None else argv)


if __name__ == "__main__":
    raise SystemExit(main())
