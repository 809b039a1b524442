"""Command pattern for undoable conversions.

Every conversion run through an :class:`~latin1_ascii.core.session.EditorSession`
goes through a Command so that the undo/redo stack stays consistent.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable

from latin1_ascii.core.buffer import TextBuffer
from latin1_ascii.core.models import Edit


class Command(ABC):
    """Abstract base for all undoable commands."""

    @abstractmethod
    def execute(self) -> None: ...

    @abstractmethod
    def undo(self) -> None: ...

    @property
    @abstractmethod
    def description(self) -> str: ...


class ConvertRegionCommand(Command):
    """Run a conversion once, then replay or revert its journal.

    Args:
        buffer: The buffer the conversion modifies.
        run: Performs the conversion, appending each replacement to the
            journal list it is given, and returns whether anything changed.
        label: Text used in :attr:`description`.
    """

    def __init__(
        self,
        buffer: TextBuffer,
        run: Callable[[list[Edit]], bool],
        label: str = "Convert region",
    ) -> None:
        self._buffer = buffer
        self._run = run
        self._label = label
        self._edits: list[Edit] = []
        self._executed = False
        self.changed = False

    def execute(self) -> None:
        if not self._executed:
            self.changed = self._run(self._edits)
            self._executed = True
            return
        for edit in self._edits:
            self._buffer.replace_range(edit.start, edit.start + len(edit.old_text), edit.new_text)

    def undo(self) -> None:
        for edit in reversed(self._edits):
            self._buffer.replace_range(edit.start, edit.start + len(edit.new_text), edit.old_text)

    @property
    def edits(self) -> list[Edit]:
        return list(self._edits)

    @property
    def description(self) -> str:
        return f"{self._label} ({len(self._edits)} replacements)"
