"""Undo/redo of region conversions."""

from __future__ import annotations

from collections import deque

from latin1_ascii.core.commands import Command

UNDO_DEPTH = 50


class CommandHistory:
    """Conversions that changed the buffer, oldest dropped past *max_depth*."""

    def __init__(self, max_depth: int = UNDO_DEPTH) -> None:
        self._undo_stack: deque[Command] = deque(maxlen=max_depth)
        self._redo_stack: list[Command] = []

    def push(self, cmd: Command) -> None:
        # cmd has already run; a new conversion invalidates anything undone.
        self._undo_stack.append(cmd)
        self._redo_stack.clear()

    def undo(self) -> Command | None:
        if not self._undo_stack:
            return None
        cmd = self._undo_stack.pop()
        cmd.undo()
        self._redo_stack.append(cmd)
        return cmd

    def redo(self) -> Command | None:
        if not self._redo_stack:
            return None
        cmd = self._redo_stack.pop()
        cmd.execute()
        self._undo_stack.append(cmd)
        return cmd

    @property
    def undo_count(self) -> int:
        return len(self._undo_stack)

    @property
    def can_undo(self) -> bool:
        return bool(self._undo_stack)

    @property
    def can_redo(self) -> bool:
        return bool(self._redo_stack)

    def clear(self) -> None:
        self._undo_stack.clear()
        self._redo_stack.clear()
