"""Entry point: python -m latin1_ascii

With file arguments this runs the command-line converter; without any it
opens the desktop editor.
"""

from __future__ import annotations

import os
import sys


def _apply_platform_fixes() -> None:
    """Set platform-specific env vars BEFORE any Qt import."""
    import platform
    os.environ.setdefault("QT_LOGGING_RULES", "qt.qpa.drawing=false;qt.qpa.*=false")
    if platform.system() == "Darwin":
        os.environ.setdefault("QT_MAC_WANTS_LAYER", "1")


def main() -> None:
    if len(sys.argv) > 1:
        from latin1_ascii.cli import main as cli_main

        sys.exit(cli_main(sys.argv[1:]))

    _apply_platform_fixes()
    try:
        from latin1_ascii.ui.app import create_app
    except ImportError as exc:
        print(
            f"[latin1-ascii] Desktop editor unavailable ({exc}).\n"
            "  Install it with: pip install \"latin1-ascii[desktop]\"\n"
            "  or pass file names to use the command-line converter.",
            file=sys.stderr,
        )
        sys.exit(2)

    app, window = create_app(sys.argv)
    window.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
