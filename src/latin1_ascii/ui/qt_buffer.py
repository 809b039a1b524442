"""TextBuffer adapter over a QPlainTextEdit document.

QTextCursor positions already float: a cursor moves forward when text is
inserted before it, which is exactly the end-marker behaviour the scanner
needs.
"""

from __future__ import annotations

from PySide6.QtGui import QTextCursor
from PySide6.QtWidgets import QPlainTextEdit

from latin1_ascii.core.buffer import Marker, TextBuffer


class _CursorMarker(Marker):
    def __init__(self, cursor: QTextCursor) -> None:
        self._cursor: QTextCursor | None = cursor

    @property
    def position(self) -> int:
        if self._cursor is None:
            raise RuntimeError("marker has been released")
        return self._cursor.position()

    def release(self) -> None:
        self._cursor = None


class QtTextBuffer(TextBuffer):
    """Expose the editor's document and selection as a :class:`TextBuffer`."""

    def __init__(self, editor: QPlainTextEdit) -> None:
        self._editor = editor

    def __len__(self) -> int:
        return self._editor.document().characterCount() - 1

    def read_text_range(self, start: int, end: int) -> str:
        return self._editor.document().toPlainText()[start:end]

    def replace_range(self, start: int, end: int, text: str) -> None:
        cursor = QTextCursor(self._editor.document())
        cursor.setPosition(start)
        cursor.setPosition(end, QTextCursor.MoveMode.KeepAnchor)
        cursor.insertText(text)

    def make_floating_end_marker(self, position: int) -> Marker:
        cursor = QTextCursor(self._editor.document())
        cursor.setPosition(position)
        return _CursorMarker(cursor)

    def get_current_selection(self) -> tuple[int, int] | None:
        cursor = self._editor.textCursor()
        if not cursor.hasSelection():
            return None
        return cursor.selectionStart(), cursor.selectionEnd()
