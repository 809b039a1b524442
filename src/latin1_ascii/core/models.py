"""Core data model dataclasses and enums.

All other modules import from here. Keep this module free of side-effects and
Qt imports so it can be used in tests and CLI contexts without a display.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class Decision(str, Enum):
    """Operator answer to one interactive replacement prompt."""

    YES = "yes"
    NO = "no"
    ALL = "all"
    QUIT = "quit"


class MatchAction(str, Enum):
    """What the scanner should do with the match it just reported."""

    REPLACE = "replace"
    SKIP = "skip"
    STOP = "stop"


# ---------------------------------------------------------------------------
# Region / match
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Region:
    start: int
    end: int

    def __len__(self) -> int:
        return self.end - self.start


@dataclass(frozen=True)
class MatchResult:
    """A table-covered character found by the scanner."""

    codepoint: int
    start: int  # buffer offset of the character
    end: int  # always start + 1
    replacement: str

    @property
    def char(self) -> str:
        return chr(self.codepoint)


# ---------------------------------------------------------------------------
# Edit (one applied replacement)
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Edit:
    """Journal entry for one replacement, in buffer coordinates at apply time."""

    start: int
    old_text: str
    new_text: str

    def to_dict(self) -> dict:
        return {"start": self.start, "old_text": self.old_text, "new_text": self.new_text}
