"""Replacement tables and the regular expressions derived from them.

The main table maps Latin-1 high-bit characters (plus the Windows-1252
punctuation that commonly turns up in the 0x80-0x9F range) to plain 7-bit
ASCII. The control table maps raw C0 control characters to caret notation;
it is never merged into the main table and is only applied on request.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator, Mapping

# A pattern that can never match; used when a character class would be empty.
_NEVER_RE = re.compile(r"(?!)")

HIGH_BIT_RANGE = range(128, 256)


# ---------------------------------------------------------------------------
# ReplacementTable
# ---------------------------------------------------------------------------


class ReplacementTable(Mapping):
    """Immutable, ordered mapping of code point -> ASCII replacement text.

    Args:
        pairs: ``(codepoint, replacement)`` pairs in table order.
        name: Label used in log messages.

    Raises:
        ValueError: on a duplicate code point, a code point outside
            [0, 255], or a replacement that is empty or not 7-bit ASCII.
    """

    def __init__(self, pairs: Iterable[tuple[int, str]], name: str = "") -> None:
        entries: dict[int, str] = {}
        for codepoint, replacement in pairs:
            if not isinstance(codepoint, int) or not 0 <= codepoint <= 255:
                raise ValueError(f"code point out of range: {codepoint!r}")
            if codepoint in entries:
                raise ValueError(f"duplicate code point 0x{codepoint:02X}")
            if not replacement or not replacement.isascii():
                raise ValueError(
                    f"replacement for 0x{codepoint:02X} must be non-empty ASCII, got {replacement!r}"
                )
            entries[codepoint] = replacement
        self._entries = entries
        self.name = name

    def __getitem__(self, codepoint: int) -> str:
        return self._entries[codepoint]

    def __iter__(self) -> Iterator[int]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"ReplacementTable({self.name!r}, {len(self)} entries)"

    def with_overrides(self, overrides: Mapping[int, str | None]) -> "ReplacementTable":
        """Return a new table with entries added, replaced, or (value None) removed."""
        merged = dict(self._entries)
        for codepoint, replacement in overrides.items():
            if replacement is None:
                merged.pop(codepoint, None)
            else:
                merged[codepoint] = replacement
        return ReplacementTable(merged.items(), name=self.name)


# ---------------------------------------------------------------------------
# Static tables
# ---------------------------------------------------------------------------

LATIN1_TABLE = ReplacementTable(
    [
        (0x82, ","),       # single low-9 quotation mark (cp1252)
        (0x84, ",,"),      # double low-9 quotation mark (cp1252)
        (0x85, "..."),     # horizontal ellipsis (cp1252)
        (0x88, "^"),       # modifier circumflex (cp1252)
        (0x8B, "<"),       # single left angle quotation mark (cp1252)
        (0x91, "'"),       # left single quotation mark (cp1252)
        (0x92, "'"),       # right single quotation mark (cp1252)
        (0x93, '"'),       # left double quotation mark (cp1252)
        (0x94, '"'),       # right double quotation mark (cp1252)
        (0x95, "*"),       # bullet (cp1252)
        (0x96, "-"),       # en dash (cp1252)
        (0x97, "--"),      # em dash (cp1252)
        (0x98, "~"),       # small tilde (cp1252)
        (0x99, "(TM)"),    # trade mark sign (cp1252)
        (0x9B, ">"),       # single right angle quotation mark (cp1252)
        (0xA0, " "),       # no-break space
        (0xA6, "|"),       # broken bar
        (0xA9, " (C) "),   # copyright sign
        (0xAB, "<<"),      # left-pointing guillemet
        (0xAD, "-"),       # soft hyphen
        (0xAE, " (R) "),   # registered sign
        (0xB4, "'"),       # acute accent
        (0xB7, "."),       # middle dot
        (0xB8, ","),       # cedilla
        (0xBB, ">>"),      # right-pointing guillemet
        (0xBC, " 1/4"),    # vulgar fraction one quarter
        (0xBD, " 1/2"),    # vulgar fraction one half
        (0xBE, " 3/4"),    # vulgar fraction three quarters
        (0xC6, "AE"),      # capital ligature AE
        (0xD7, "x"),       # multiplication sign
        (0xE6, "ae"),      # small ligature ae
        (0xF7, "/"),       # division sign
    ],
    name="latin1",
)

# C0 controls except TAB, LF, FF and CR, plus DEL, shown in caret notation.
CONTROL_TABLE = ReplacementTable(
    [(cp, "^" + chr(cp + 64)) for cp in range(32) if cp not in (0x09, 0x0A, 0x0C, 0x0D)]
    + [(0x7F, "^?")],
    name="control",
)


# ---------------------------------------------------------------------------
# Lookup and regex derivation
# ---------------------------------------------------------------------------


def lookup(table: Mapping[int, str], codepoint: int) -> str | None:
    """Return the replacement for *codepoint*, or None if the table lacks it."""
    return table.get(codepoint)


def _char_class(codepoints: Iterable[int]) -> re.Pattern[str]:
    chars = "".join(re.escape(chr(cp)) for cp in codepoints)
    if not chars:
        return _NEVER_RE
    return re.compile(f"[{chars}]")


def build_match_regex(table: Mapping[int, str]) -> re.Pattern[str]:
    """Pattern matching exactly one character whose code point is a table key."""
    return _char_class(table)


def build_other_8bit_regex(table: Mapping[int, str]) -> re.Pattern[str]:
    """Pattern matching one character in [128, 255] that is NOT a table key."""
    return _char_class(cp for cp in HIGH_BIT_RANGE if cp not in table)
