"""Tests for EditorSession and the Command/History undo system."""

from __future__ import annotations

import pytest

from latin1_ascii.core.buffer import StringBuffer
from latin1_ascii.core.commands import ConvertRegionCommand
from latin1_ascii.core.config import ConverterConfig
from latin1_ascii.core.converter import STRICT_REJECTED_MESSAGE, NoRegionError, convert_region
from latin1_ascii.core.history import CommandHistory
from latin1_ascii.core.models import Decision
from latin1_ascii.core.session import EditorSession
from latin1_ascii.core.tables import CONTROL_TABLE, LATIN1_TABLE


class TestEditorSession:
    def test_convert_region(self):
        session = EditorSession(StringBuffer("a©b"))
        assert session.convert_region(0, 3)
        assert session.buffer.text == "a (C) b"

    def test_convert_selection(self):
        session = EditorSession(StringBuffer("«x»", selection=(0, 1)))
        session.convert_region()
        assert session.buffer.text == "<<x»"

    def test_no_region(self):
        session = EditorSession(StringBuffer("©"))
        with pytest.raises(NoRegionError):
            session.convert_region()
        assert not session.history.can_undo

    def test_strict_default_from_config(self):
        session = EditorSession(StringBuffer("Ð©"), ConverterConfig(strict=True))
        assert not session.convert_region(0, 2)
        assert session.buffer.text == "Ð©"

    def test_strict_argument_overrides_config(self):
        session = EditorSession(StringBuffer("Ð©"), ConverterConfig(strict=True))
        assert session.convert_region(0, 2, strict=False)
        assert session.buffer.text == "Ð (C) "

    def test_configured_table_used(self):
        table = LATIN1_TABLE.with_overrides({0xD0: "D"})
        session = EditorSession(StringBuffer("Ð"), ConverterConfig(table=table))
        assert not session.region_has_uncovered_8bit(0, 1)
        session.convert_region(0, 1)
        assert session.buffer.text == "D"

    def test_interactive(self):
        answers = iter([Decision.NO, Decision.YES])
        session = EditorSession(StringBuffer("«»"), prompt=lambda message: next(answers))
        assert session.convert_region_interactive(0, 2)
        assert session.buffer.text == "«>>"

    def test_interactive_strict_notifies(self):
        notices: list[str] = []
        session = EditorSession(
            StringBuffer("Ð«"),
            prompt=lambda message: Decision.ALL,
            notify=notices.append,
        )
        assert not session.convert_region_interactive(0, 2, strict=True)
        assert notices == [STRICT_REJECTED_MESSAGE]

    def test_interactive_needs_prompt(self):
        session = EditorSession(StringBuffer("«»"))
        with pytest.raises(RuntimeError):
            session.convert_region_interactive(0, 2)

    def test_region_has_uncovered_8bit(self):
        session = EditorSession(StringBuffer("ab Ð", selection=(0, 2)))
        assert not session.region_has_uncovered_8bit()
        assert session.region_has_uncovered_8bit(0, 4)


class TestControlCharacters:
    def _session(self, text: str, strict: bool = False) -> EditorSession:
        config = ConverterConfig(strict=strict, control_table=CONTROL_TABLE)
        return EditorSession(StringBuffer(text), config)

    def test_second_pass_converts_control_characters(self):
        session = self._session("\x01©\x7f")
        assert session.convert_region(0, 3)
        assert session.buffer.text == "^A (C) ^?"

    def test_control_only(self):
        session = self._session("a\x1bb")
        assert session.convert_region(0, 3)
        assert session.buffer.text == "a^[b"

    def test_control_characters_after_region_untouched(self):
        session = self._session("©\x01|\x01")
        session.convert_region(0, 2)
        assert session.buffer.text == " (C) ^A|\x01"

    def test_strict_rejection_covers_both_passes(self):
        session = self._session("\x01Ð", strict=True)
        assert not session.convert_region(0, 2)
        assert session.buffer.text == "\x01Ð"

    def test_undo_reverts_both_passes(self):
        session = self._session("\x01©\x7f")
        session.convert_region(0, 3)
        session.undo()
        assert session.buffer.text == "\x01©\x7f"

    def test_control_table_off_by_default(self):
        session = EditorSession(StringBuffer("\x01©"))
        session.convert_region(0, 2)
        assert session.buffer.text == "\x01 (C) "


# ---------------------------------------------------------------------------
# Undo / redo
# ---------------------------------------------------------------------------


class TestUndoRedo:
    def test_undo_restores_text(self):
        session = EditorSession(StringBuffer("« hi » ©"))
        session.convert_region(0, 8)
        assert session.undo()
        assert session.buffer.text == "« hi » ©"

    def test_redo_reapplies(self):
        session = EditorSession(StringBuffer("« hi » ©"))
        session.convert_region(0, 8)
        converted = session.buffer.text
        session.undo()
        assert session.redo()
        assert session.buffer.text == converted

    def test_partial_interactive_conversion_undone(self):
        answers = iter([Decision.NO, Decision.YES, Decision.QUIT])
        session = EditorSession(StringBuffer("«©»"), prompt=lambda message: next(answers))
        session.convert_region_interactive(0, 3)
        assert session.buffer.text == "« (C) »"
        session.undo()
        assert session.buffer.text == "«©»"

    def test_unchanged_conversion_not_recorded(self):
        session = EditorSession(StringBuffer("plain"))
        session.convert_region(0, 5)
        assert not session.history.can_undo
        assert not session.undo()

    def test_new_conversion_clears_redo(self):
        session = EditorSession(StringBuffer("«»"))
        session.convert_region(0, 1)
        session.undo()
        assert session.history.can_redo
        session.convert_region(1, 2)
        assert not session.history.can_redo

    def test_successive_conversions_undo_in_order(self):
        session = EditorSession(StringBuffer("«»"))
        session.convert_region(0, 1)
        session.convert_region(2, 3)
        assert session.buffer.text == "<<>>"
        session.undo()
        assert session.buffer.text == "<<»"
        session.undo()
        assert session.buffer.text == "«»"
        assert session.history.can_redo


class TestConvertRegionCommand:
    def test_description_counts_replacements(self):
        buf = StringBuffer("«»")
        cmd = ConvertRegionCommand(buf, lambda journal: convert_region(buf, 0, 2, journal=journal))
        cmd.execute()
        assert cmd.changed
        assert "2 replacements" in cmd.description
        assert [e.new_text for e in cmd.edits] == ["<<", ">>"]

    def test_execute_runs_conversion_once(self):
        buf = StringBuffer("«")
        calls = []

        def run(journal):
            calls.append(1)
            return convert_region(buf, 0, 1, journal=journal)

        cmd = ConvertRegionCommand(buf, run)
        cmd.execute()
        cmd.undo()
        cmd.execute()
        assert calls == [1]
        assert buf.text == "<<"


class TestCommandHistory:
    def test_empty_history(self):
        history = CommandHistory()
        assert history.undo() is None
        assert history.redo() is None
        assert history.undo_count == 0

    def test_max_depth_respected(self):
        buf = StringBuffer("«" * 15)
        history = CommandHistory(max_depth=10)
        for i in range(15):
            cmd = ConvertRegionCommand(
                buf, lambda journal, i=i: convert_region(buf, i * 2, i * 2 + 1, journal=journal)
            )
            cmd.execute()
            history.push(cmd)
        assert history.undo_count == 10

    def test_clear(self):
        buf = StringBuffer("«")
        history = CommandHistory()
        cmd = ConvertRegionCommand(buf, lambda journal: convert_region(buf, 0, 1, journal=journal))
        cmd.execute()
        history.push(cmd)
        history.clear()
        assert not history.can_undo
