"""QApplication factory."""

from __future__ import annotations

import logging
import sys

from PySide6.QtCore import Qt
from PySide6.QtWidgets import QApplication

from latin1_ascii.core.config import ConfigLoader


def create_app(argv: list[str] | None = None) -> tuple:
    """Create and configure the QApplication and MainWindow.

    Returns:
        (app, window) tuple.
    """
    if argv is None:
        argv = sys.argv

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    # Must be created before any other Qt objects
    app = QApplication.instance()
    if app is None:
        app = QApplication(argv)

    app.setApplicationName("latin1-ascii")
    app.setApplicationDisplayName("latin1-ascii — Latin-1 to ASCII")
    app.styleHints().setColorScheme(Qt.ColorScheme.Unknown)  # follow system
    app.setStyleSheet(_STYLESHEET)

    # Import here so the core stays importable without a display
    from latin1_ascii.ui.main_window import MainWindow

    window = MainWindow(ConfigLoader().load())
    return app, window


_STYLESHEET = """
QToolBar {
    spacing: 4px;
    padding: 4px 6px;
    border-bottom: 1px solid palette(mid);
}

QToolBar QToolButton {
    padding: 4px 8px;
    border-radius: 4px;
}

QToolBar QToolButton:checked {
    background-color: palette(highlight);
    color: palette(highlighted-text);
}

QPlainTextEdit {
    font-size: 13px;
    selection-background-color: palette(highlight);
    selection-color: palette(highlighted-text);
}

QStatusBar {
    font-size: 12px;
}
"""
