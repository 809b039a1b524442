"""Region scanner: find table-covered characters and replace them in place.

The region end is held by a floating marker for the whole pass. A
replacement is usually longer than the single character it replaces (for
example ``"(TM)"``), so a fixed end offset would stop the scan short of the
original region end.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping

from latin1_ascii.core.buffer import TextBuffer
from latin1_ascii.core.models import Edit, MatchAction, MatchResult
from latin1_ascii.core.tables import build_match_regex, build_other_8bit_regex

_log = logging.getLogger(__name__)

MatchCallback = Callable[[MatchResult], MatchAction]


def scan_and_replace(
    buffer: TextBuffer,
    start: int,
    end: int,
    table: Mapping[int, str],
    on_match: MatchCallback,
    journal: list[Edit] | None = None,
) -> bool:
    """Walk ``[start, end)`` and offer every table-covered character to *on_match*.

    Args:
        buffer: The buffer to modify in place.
        start: First offset of the region.
        end: Region end. Converted to a floating marker for the pass.
        table: Code point -> replacement mapping.
        on_match: Called once per match. ``REPLACE`` substitutes the mapped
            text, ``SKIP`` leaves the character, ``STOP`` ends the pass and
            keeps the replacements already made.
        journal: If given, each applied replacement is appended as an
            :class:`Edit`.

    Returns:
        True if at least one replacement was made.
    """
    pattern = build_match_regex(table)
    changed = False
    pos = start

    with buffer.make_floating_end_marker(end) as end_marker:
        while True:
            span = buffer.search_forward(pattern, pos, end_marker.position)
            if span is None:
                break
            m_start, m_end = span
            char = buffer.read_text_range(m_start, m_end)
            codepoint = ord(char)
            match = MatchResult(
                codepoint=codepoint,
                start=m_start,
                end=m_end,
                replacement=table[codepoint],
            )

            action = on_match(match)
            if action is MatchAction.STOP:
                _log.debug("Scan stopped at offset %d", m_start)
                break
            if action is MatchAction.SKIP:
                pos = m_end
                continue

            buffer.replace_range(m_start, m_end, match.replacement)
            if journal is not None:
                journal.append(Edit(start=m_start, old_text=char, new_text=match.replacement))
            _log.debug(
                "Replaced 0x%02X at %d with %r", codepoint, m_start, match.replacement
            )
            pos = m_start + len(match.replacement)
            changed = True

    return changed


def find_uncovered_8bit(
    buffer: TextBuffer, start: int, end: int, table: Mapping[int, str]
) -> list[tuple[int, str]]:
    """Return ``(offset, char)`` for each 8-bit character in the region missing from *table*."""
    pattern = build_other_8bit_regex(table)
    text = buffer.read_text_range(start, end)
    return [(start + m.start(), m.group()) for m in pattern.finditer(text)]


def has_uncovered_8bit(
    buffer: TextBuffer, start: int, end: int, table: Mapping[int, str]
) -> bool:
    """True if ``[start, end)`` holds a code point in [128, 255] that *table* lacks.

    Read-only: creates no marker and never touches the buffer.
    """
    if start >= end:
        return False
    return buffer.search_forward(build_other_8bit_regex(table), start, end) is not None
