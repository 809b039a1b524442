"""EditorSession: the host-level surface of the converter.

A session binds one buffer to its settings, its operator collaborators
(prompt and notify) and an undo history. The three exposed operations take
optional bounds; missing bounds come from the buffer's selection.
"""

from __future__ import annotations

import logging

from latin1_ascii.core.buffer import TextBuffer
from latin1_ascii.core.commands import ConvertRegionCommand
from latin1_ascii.core.config import ConverterConfig
from latin1_ascii.core.converter import (
    NotifyFn,
    PromptFn,
    convert_region,
    convert_region_interactive,
    region_has_uncovered_8bit,
    resolve_region,
)
from latin1_ascii.core.history import CommandHistory
from latin1_ascii.core.models import Edit

_log = logging.getLogger(__name__)


def _log_notify(message: str) -> None:
    _log.warning("%s", message)


class EditorSession:
    """Conversion operations on one buffer, with undo/redo."""

    def __init__(
        self,
        buffer: TextBuffer,
        config: ConverterConfig | None = None,
        prompt: PromptFn | None = None,
        notify: NotifyFn | None = None,
        history: CommandHistory | None = None,
    ) -> None:
        self.buffer = buffer
        self.config = config or ConverterConfig()
        self._prompt = prompt
        self._notify = notify or _log_notify
        self.history = history or CommandHistory()

    # ------------------------------------------------------------------
    # Exposed operations
    # ------------------------------------------------------------------

    def convert_region(
        self, start: int | None = None, end: int | None = None, strict: bool | None = None
    ) -> bool:
        """Replace every covered character in the region; see :func:`convert_region`."""
        strict = self.config.strict if strict is None else strict

        def run(journal: list[Edit]) -> bool:
            region = resolve_region(self.buffer, start, end)
            if self.config.control_table is None:
                return convert_region(
                    self.buffer, region.start, region.end, strict=strict,
                    table=self.config.table, journal=journal,
                )
            # One strict check covers both passes.
            if strict and self.region_has_uncovered_8bit(region.start, region.end):
                _log.info("Region [%d, %d) rejected by strict check", region.start, region.end)
                return False
            changed = convert_region(
                self.buffer, region.start, region.end,
                table=self.config.table, journal=journal,
            )
            shift = sum(len(e.new_text) - len(e.old_text) for e in journal)
            return convert_region(
                self.buffer, region.start, region.end + shift,
                table=self.config.control_table, journal=journal,
            ) or changed

        return self._execute(ConvertRegionCommand(self.buffer, run, label="Convert region"))

    def convert_region_interactive(
        self, start: int | None = None, end: int | None = None, strict: bool | None = None
    ) -> bool:
        """Ask before each replacement; see :func:`convert_region_interactive`."""
        if self._prompt is None:
            raise RuntimeError("interactive conversion needs a prompt callable")
        strict = self.config.strict if strict is None else strict

        def run(journal: list[Edit]) -> bool:
            return convert_region_interactive(
                self.buffer, self._prompt, start, end, strict=strict,
                table=self.config.table, notify=self._notify, journal=journal,
            )

        return self._execute(
            ConvertRegionCommand(self.buffer, run, label="Convert region interactively")
        )

    def region_has_uncovered_8bit(self, start: int | None = None, end: int | None = None) -> bool:
        return region_has_uncovered_8bit(self.buffer, start, end, table=self.config.table)

    # ------------------------------------------------------------------
    # Undo / redo
    # ------------------------------------------------------------------

    def undo(self) -> bool:
        cmd = self.history.undo()
        if cmd is None:
            return False
        _log.info("Undone: %s", cmd.description)
        return True

    def redo(self) -> bool:
        cmd = self.history.redo()
        if cmd is None:
            return False
        _log.info("Redone: %s", cmd.description)
        return True

    def _execute(self, cmd: ConvertRegionCommand) -> bool:
        cmd.execute()
        if cmd.changed:
            self.history.push(cmd)
        return cmd.changed
