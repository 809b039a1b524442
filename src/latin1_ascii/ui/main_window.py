"""MainWindow: plain-text editor with region conversion actions."""

from __future__ import annotations

import logging
from pathlib import Path

from PySide6.QtCore import QSize, Qt
from PySide6.QtGui import QAction, QFont, QKeySequence, QTextCursor
from PySide6.QtWidgets import (
    QFileDialog,
    QLabel,
    QMainWindow,
    QMessageBox,
    QPlainTextEdit,
    QStatusBar,
    QToolBar,
)

from latin1_ascii.core.config import ConverterConfig
from latin1_ascii.core.converter import NoRegionError
from latin1_ascii.core.models import Decision
from latin1_ascii.core.session import EditorSession
from latin1_ascii.ui.qt_buffer import QtTextBuffer

_log = logging.getLogger(__name__)

ENCODING = "latin-1"

_BUTTON_DECISIONS = {
    QMessageBox.StandardButton.Yes: Decision.YES,
    QMessageBox.StandardButton.No: Decision.NO,
    QMessageBox.StandardButton.YesToAll: Decision.ALL,
    QMessageBox.StandardButton.Abort: Decision.QUIT,
}


class MainWindow(QMainWindow):
    """Application main window."""

    def __init__(self, config: ConverterConfig) -> None:
        super().__init__()
        self._config = config
        self._path: Path | None = None
        self.setWindowTitle("latin1-ascii")
        self.resize(900, 650)

        self._editor = QPlainTextEdit()
        self._editor.setFont(QFont("Monospace"))
        self._editor.setLineWrapMode(QPlainTextEdit.LineWrapMode.NoWrap)
        self._buffer = QtTextBuffer(self._editor)
        self._session = EditorSession(
            self._buffer, config, prompt=self._prompt, notify=self._show_status
        )

        self._build_ui()

    # ------------------------------------------------------------------
    # UI construction
    # ------------------------------------------------------------------

    def _build_ui(self) -> None:
        self._build_toolbar()
        self.setCentralWidget(self._editor)

        self._status_bar = QStatusBar()
        self._status_label = QLabel("Select a region, then convert it.")
        self._status_bar.addWidget(self._status_label, 1)
        self.setStatusBar(self._status_bar)

    def _build_toolbar(self) -> None:
        tb = QToolBar("Main toolbar")
        tb.setMovable(False)
        tb.setIconSize(QSize(20, 20))
        tb.setToolButtonStyle(Qt.ToolButtonStyle.ToolButtonTextBesideIcon)
        self.addToolBar(tb)

        self._act_open = QAction("Open…", self)
        self._act_open.setShortcut(QKeySequence.StandardKey.Open)
        self._act_open.triggered.connect(self._open_file)
        tb.addAction(self._act_open)

        self._act_save = QAction("Save", self)
        self._act_save.setShortcut(QKeySequence.StandardKey.Save)
        self._act_save.triggered.connect(self._save_file)
        tb.addAction(self._act_save)

        tb.addSeparator()

        self._act_convert = QAction("Convert region", self)
        self._act_convert.setShortcut(QKeySequence("Ctrl+Shift+A"))
        self._act_convert.triggered.connect(self._convert)
        tb.addAction(self._act_convert)

        self._act_convert_interactive = QAction("Convert interactively", self)
        self._act_convert_interactive.setShortcut(QKeySequence("Ctrl+Shift+I"))
        self._act_convert_interactive.triggered.connect(self._convert_interactive)
        tb.addAction(self._act_convert_interactive)

        self._act_check = QAction("Check 8-bit", self)
        self._act_check.triggered.connect(self._check)
        tb.addAction(self._act_check)

        self._act_strict = QAction("Strict", self)
        self._act_strict.setCheckable(True)
        self._act_strict.setChecked(self._config.strict)
        self._act_strict.setToolTip("Refuse to convert when unhandled 8-bit characters would remain")
        tb.addAction(self._act_strict)

        tb.addSeparator()

        act_undo = QAction("Undo", self)
        act_undo.setShortcut(QKeySequence.StandardKey.Undo)
        act_undo.triggered.connect(self._editor.undo)
        self._editor.undoAvailable.connect(act_undo.setEnabled)
        act_undo.setEnabled(False)
        tb.addAction(act_undo)

        act_redo = QAction("Redo", self)
        act_redo.setShortcut(QKeySequence.StandardKey.Redo)
        act_redo.triggered.connect(self._editor.redo)
        self._editor.redoAvailable.connect(act_redo.setEnabled)
        act_redo.setEnabled(False)
        tb.addAction(act_redo)

    # ------------------------------------------------------------------
    # Files
    # ------------------------------------------------------------------

    def _open_file(self) -> None:
        name, _ = QFileDialog.getOpenFileName(self, "Open text file")
        if not name:
            return
        try:
            text = Path(name).read_text(encoding=ENCODING)
        except OSError as exc:
            QMessageBox.critical(self, "Open failed", str(exc))
            return
        self._path = Path(name)
        self._editor.setPlainText(text)
        self.setWindowTitle(f"latin1-ascii — {self._path.name}")
        self._show_status(f"Opened {self._path}")

    def _save_file(self) -> None:
        if self._path is None:
            name, _ = QFileDialog.getSaveFileName(self, "Save text file")
            if not name:
                return
            self._path = Path(name)
        try:
            self._path.write_text(self._editor.toPlainText(), encoding=ENCODING)
        except (OSError, UnicodeEncodeError) as exc:
            QMessageBox.critical(self, "Save failed", str(exc))
            return
        self._editor.document().setModified(False)
        self._show_status(f"Saved {self._path}")

    # ------------------------------------------------------------------
    # Conversion actions
    # ------------------------------------------------------------------

    def _convert(self) -> None:
        self._run_conversion(
            lambda: self._session.convert_region(strict=self._act_strict.isChecked())
        )

    def _convert_interactive(self) -> None:
        self._run_conversion(
            lambda: self._session.convert_region_interactive(
                strict=self._act_strict.isChecked()
            )
        )

    def _check(self) -> None:
        try:
            found = self._session.region_has_uncovered_8bit()
        except NoRegionError:
            self._show_status("No region selected.")
            return
        self._show_status(
            "Region contains unhandled 8-bit characters."
            if found
            else "Region has no unhandled 8-bit characters."
        )

    def _run_conversion(self, convert) -> None:
        self._show_status("")
        # One edit block: a single Undo reverts the whole conversion.
        block = QTextCursor(self._editor.document())
        block.beginEditBlock()
        try:
            changed = convert()
        except NoRegionError:
            self._show_status("No region selected.")
            return
        finally:
            block.endEditBlock()
            # Undo goes through the Qt document.
            self._session.history.clear()
        _log.info("Editor conversion: changed=%s", changed)
        if changed:
            self._show_status("Region converted.")
        elif not self._status_label.text():
            self._show_status("Nothing to convert.")

    def _prompt(self, message: str) -> Decision:
        buttons = QMessageBox.StandardButton.NoButton
        for button in _BUTTON_DECISIONS:
            buttons |= button
        answer = QMessageBox.question(
            self, "Convert character", message, buttons, QMessageBox.StandardButton.Yes
        )
        return _BUTTON_DECISIONS.get(answer, Decision.QUIT)

    def _show_status(self, message: str) -> None:
        self._status_label.setText(message)
