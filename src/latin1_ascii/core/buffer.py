"""Text buffer abstraction used by the scanner and the mode controller.

A host editor exposes its document through :class:`TextBuffer`. The only
non-trivial requirement is :meth:`TextBuffer.make_floating_end_marker`: a
position handle that moves forward when text is inserted before it, so a
region end keeps pointing at the same place while replacements change the
length of the text in front of it.

:class:`StringBuffer` is the in-memory implementation used by the CLI, the
web API and the tests.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod


class Marker(ABC):
    """Auto-adjusting position handle. Release it once it is no longer needed."""

    @property
    @abstractmethod
    def position(self) -> int: ...

    @abstractmethod
    def release(self) -> None: ...

    def __enter__(self) -> "Marker":
        return self

    def __exit__(self, *exc_info) -> None:
        self.release()


class TextBuffer(ABC):
    """Abstract mutable text buffer with selection and markers."""

    @abstractmethod
    def __len__(self) -> int: ...

    @abstractmethod
    def read_text_range(self, start: int, end: int) -> str: ...

    @abstractmethod
    def replace_range(self, start: int, end: int, text: str) -> None:
        """Replace ``[start, end)`` with *text*, adjusting live markers."""

    @abstractmethod
    def make_floating_end_marker(self, position: int) -> Marker: ...

    def get_current_selection(self) -> tuple[int, int] | None:
        """Return the active selection as ``(start, end)``, or None."""
        return None

    def search_forward(
        self, pattern: re.Pattern[str], start: int, bound: int
    ) -> tuple[int, int] | None:
        """Return the span of the first match of *pattern* in ``[start, bound)``."""
        if start >= bound:
            return None
        m = pattern.search(self.read_text_range(start, bound))
        if m is None:
            return None
        return start + m.start(), start + m.end()

    @property
    def text(self) -> str:
        return self.read_text_range(0, len(self))


# ---------------------------------------------------------------------------
# In-memory implementation
# ---------------------------------------------------------------------------


class _FloatingMarker(Marker):
    def __init__(self, buffer: "StringBuffer", position: int) -> None:
        self._buffer = buffer
        self._pos = position
        self._released = False

    @property
    def position(self) -> int:
        if self._released:
            raise RuntimeError("marker has been released")
        return self._pos

    def release(self) -> None:
        if not self._released:
            self._buffer._markers.remove(self)
            self._released = True

    def _adjust(self, start: int, end: int, new_length: int) -> None:
        self._pos = _shift(self._pos, start, end, new_length)


def _shift(pos: int, start: int, end: int, new_length: int) -> int:
    """Where *pos* lands after ``[start, end)`` is replaced by *new_length* characters."""
    if pos >= end:
        return pos + new_length - (end - start)
    if pos > start:
        # Inside the replaced span: move to the end of the new text.
        return start + new_length
    return pos


class StringBuffer(TextBuffer):
    """Mutable text held in a Python string, with optional selection."""

    def __init__(self, text: str = "", selection: tuple[int, int] | None = None) -> None:
        self._text = text
        self._markers: list[_FloatingMarker] = []
        self._selection: tuple[int, int] | None = None
        if selection is not None:
            self.set_selection(*selection)

    def __len__(self) -> int:
        return len(self._text)

    def __repr__(self) -> str:
        return f"StringBuffer({self._text!r})"

    @property
    def text(self) -> str:
        return self._text

    @property
    def live_marker_count(self) -> int:
        return len(self._markers)

    def set_selection(self, start: int, end: int) -> None:
        self._check_range(min(start, end), max(start, end))
        self._selection = (start, end)

    def clear_selection(self) -> None:
        self._selection = None

    def get_current_selection(self) -> tuple[int, int] | None:
        return self._selection

    def read_text_range(self, start: int, end: int) -> str:
        self._check_range(start, end)
        return self._text[start:end]

    def replace_range(self, start: int, end: int, text: str) -> None:
        self._check_range(start, end)
        self._text = self._text[:start] + text + self._text[end:]
        for marker in self._markers:
            marker._adjust(start, end, len(text))
        if self._selection is not None:
            self._selection = tuple(_shift(p, start, end, len(text)) for p in self._selection)

    def make_floating_end_marker(self, position: int) -> Marker:
        self._check_range(position, position)
        marker = _FloatingMarker(self, position)
        self._markers.append(marker)
        return marker

    def search_forward(
        self, pattern: re.Pattern[str], start: int, bound: int
    ) -> tuple[int, int] | None:
        m = pattern.search(self._text, start, bound)
        return m.span() if m else None

    def _check_range(self, start: int, end: int) -> None:
        if not 0 <= start <= end <= len(self._text):
            raise IndexError(f"range [{start}, {end}) outside buffer of length {len(self._text)}")
