"""Mode controller: unconditional and interactive region conversion.

Both modes resolve the region and run the strict pre-check before touching
the buffer, so a validation failure can never leave a partial conversion.
Once replacing has started only an operator ``quit`` ends it early, and
replacements already made are kept.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping

from latin1_ascii.core.buffer import TextBuffer
from latin1_ascii.core.models import Decision, Edit, MatchAction, MatchResult, Region
from latin1_ascii.core.scanner import has_uncovered_8bit, scan_and_replace
from latin1_ascii.core.tables import LATIN1_TABLE

_log = logging.getLogger(__name__)

PromptFn = Callable[[str], Decision]
NotifyFn = Callable[[str], None]

STRICT_REJECTED_MESSAGE = "Region contains unhandled 8-bit characters; no conversion"


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class RegionError(ValueError):
    """The requested region does not fit the buffer."""


class NoRegionError(RegionError):
    """No explicit bounds were given and the buffer has no active selection."""


# ---------------------------------------------------------------------------
# Region resolution
# ---------------------------------------------------------------------------


def resolve_region(buffer: TextBuffer, start: int | None = None, end: int | None = None) -> Region:
    """Fill missing bounds from the current selection and normalise the order.

    Raises:
        NoRegionError: a bound is missing and there is no selection.
        RegionError: a bound lies outside the buffer.
    """
    if start is None or end is None:
        selection = buffer.get_current_selection()
        if selection is None:
            raise NoRegionError("no region given and no active selection")
        sel_start, sel_end = sorted(selection)
        start = sel_start if start is None else start
        end = sel_end if end is None else end

    if start > end:
        start, end = end, start
    if start < 0 or end > len(buffer):
        raise RegionError(f"region [{start}, {end}) outside buffer of length {len(buffer)}")
    return Region(start, end)


def describe_match(match: MatchResult) -> str:
    """Prompt text: glyph, octal and hex code, and the proposed replacement."""
    glyph = match.char if match.char.isprintable() else repr(match.char)
    return (
        f"Replace {glyph} (\\{match.codepoint:03o}, 0x{match.codepoint:02X}) "
        f"with {match.replacement!r}? "
    )


def _strict_rejects(buffer: TextBuffer, region: Region, table: Mapping[int, str]) -> bool:
    if has_uncovered_8bit(buffer, region.start, region.end, table):
        _log.info(
            "Region [%d, %d) contains 8-bit characters outside table %r; not converting",
            region.start,
            region.end,
            table,
        )
        return True
    return False


# ---------------------------------------------------------------------------
# Public operations
# ---------------------------------------------------------------------------


def convert_region(
    buffer: TextBuffer,
    start: int | None = None,
    end: int | None = None,
    strict: bool = False,
    table: Mapping[int, str] | None = None,
    journal: list[Edit] | None = None,
) -> bool:
    """Replace every table-covered character in the region.

    Returns:
        True if the buffer was modified. False when nothing matched or when
        *strict* is set and the region holds uncovered 8-bit characters.
    """
    table = LATIN1_TABLE if table is None else table
    region = resolve_region(buffer, start, end)
    if strict and _strict_rejects(buffer, region, table):
        return False

    changed = scan_and_replace(
        buffer,
        region.start,
        region.end,
        table,
        lambda match: MatchAction.REPLACE,
        journal=journal,
    )
    _log.info("Converted region [%d, %d): changed=%s", region.start, region.end, changed)
    return changed


class _InteractiveReplacer:
    """Per-match callback driving the Prompting / AutoReplaceRest / Aborted states."""

    def __init__(self, prompt: PromptFn) -> None:
        self._prompt = prompt
        self.auto_replace = False
        self.aborted = False

    def __call__(self, match: MatchResult) -> MatchAction:
        if self.auto_replace:
            return MatchAction.REPLACE

        decision = Decision(self._prompt(describe_match(match)))
        if decision is Decision.YES:
            return MatchAction.REPLACE
        if decision is Decision.NO:
            return MatchAction.SKIP
        if decision is Decision.ALL:
            self.auto_replace = True
            return MatchAction.REPLACE
        self.aborted = True
        return MatchAction.STOP


def convert_region_interactive(
    buffer: TextBuffer,
    prompt: PromptFn,
    start: int | None = None,
    end: int | None = None,
    strict: bool = False,
    table: Mapping[int, str] | None = None,
    notify: NotifyFn | None = None,
    journal: list[Edit] | None = None,
) -> bool:
    """Replace table-covered characters, asking *prompt* before each one.

    *prompt* receives a message and blocks until the operator answers with a
    :class:`Decision`. ``ALL`` replaces the current match and every later one
    without asking again; ``QUIT`` stops at once and keeps earlier
    replacements.

    Returns:
        True if the buffer was modified.
    """
    table = LATIN1_TABLE if table is None else table
    region = resolve_region(buffer, start, end)
    if strict and _strict_rejects(buffer, region, table):
        if notify is not None:
            notify(STRICT_REJECTED_MESSAGE)
        return False

    replacer = _InteractiveReplacer(prompt)
    changed = scan_and_replace(
        buffer, region.start, region.end, table, replacer, journal=journal
    )
    if replacer.aborted:
        _log.info("Interactive conversion aborted by operator; changed=%s", changed)
    return changed


def region_has_uncovered_8bit(
    buffer: TextBuffer,
    start: int | None = None,
    end: int | None = None,
    table: Mapping[int, str] | None = None,
) -> bool:
    """True if the region holds an 8-bit character the table does not cover."""
    table = LATIN1_TABLE if table is None else table
    region = resolve_region(buffer, start, end)
    return has_uncovered_8bit(buffer, region.start, region.end, table)
