"""Tests for StringBuffer and its floating markers."""

from __future__ import annotations

import re

import pytest

from latin1_ascii.core.buffer import StringBuffer, TextBuffer


class TestStringBuffer:
    def test_read_and_replace(self):
        buf = StringBuffer("hello world")
        assert buf.read_text_range(0, 5) == "hello"
        buf.replace_range(0, 5, "goodbye")
        assert buf.text == "goodbye world"
        assert len(buf) == 13

    def test_out_of_range_raises(self):
        buf = StringBuffer("abc")
        with pytest.raises(IndexError):
            buf.read_text_range(0, 4)
        with pytest.raises(IndexError):
            buf.replace_range(2, 1, "x")

    def test_selection(self):
        buf = StringBuffer("abcdef", selection=(1, 4))
        assert buf.get_current_selection() == (1, 4)
        buf.clear_selection()
        assert buf.get_current_selection() is None

    def test_selection_follows_edits(self):
        buf = StringBuffer("a©b", selection=(0, 3))
        buf.replace_range(1, 2, " (C) ")
        assert buf.get_current_selection() == (0, 7)

    def test_selection_outside_buffer_rejected(self):
        with pytest.raises(IndexError):
            StringBuffer("abc", selection=(0, 10))

    def test_search_forward_respects_bound(self):
        buf = StringBuffer("a©b©")
        pattern = re.compile("©")
        assert buf.search_forward(pattern, 0, 4) == (1, 2)
        assert buf.search_forward(pattern, 2, 3) is None
        assert buf.search_forward(pattern, 2, 4) == (3, 4)


class TestFloatingMarker:
    def test_moves_forward_when_text_grows_before_it(self):
        buf = StringBuffer("abcdef")
        marker = buf.make_floating_end_marker(4)
        buf.replace_range(1, 2, "XYZ")
        assert buf.text == "aXYZcdef"
        assert marker.position == 6

    def test_moves_back_when_text_shrinks_before_it(self):
        buf = StringBuffer("abcdef")
        marker = buf.make_floating_end_marker(5)
        buf.replace_range(0, 3, "")
        assert marker.position == 2

    def test_stays_when_text_changes_after_it(self):
        buf = StringBuffer("abcdef")
        marker = buf.make_floating_end_marker(2)
        buf.replace_range(4, 5, "LONGER")
        assert marker.position == 2

    def test_replacement_ending_at_marker_pushes_it(self):
        buf = StringBuffer("abc")
        marker = buf.make_floating_end_marker(2)
        buf.replace_range(1, 2, "xyz")
        assert marker.position == 4
        assert buf.text[marker.position:] == "c"

    def test_insertion_at_marker_pushes_it(self):
        buf = StringBuffer("abc")
        marker = buf.make_floating_end_marker(1)
        buf.replace_range(1, 1, "--")
        assert marker.position == 3

    def test_marker_inside_replaced_span_moves_to_its_end(self):
        buf = StringBuffer("abcdef")
        marker = buf.make_floating_end_marker(3)
        buf.replace_range(1, 5, "Z")
        assert marker.position == 2

    def test_release(self):
        buf = StringBuffer("abc")
        marker = buf.make_floating_end_marker(3)
        assert buf.live_marker_count == 1
        marker.release()
        marker.release()  # idempotent
        assert buf.live_marker_count == 0
        with pytest.raises(RuntimeError):
            _ = marker.position

    def test_context_manager_releases(self):
        buf = StringBuffer("abc")
        with buf.make_floating_end_marker(2) as marker:
            assert marker.position == 2
        assert buf.live_marker_count == 0

    def test_released_marker_no_longer_tracks(self):
        buf = StringBuffer("abc")
        marker = buf.make_floating_end_marker(3)
        marker.release()
        buf.replace_range(0, 0, "xx")
        assert buf.live_marker_count == 0


class _ListBuffer(TextBuffer):
    """Minimal subclass relying on the base-class search."""

    def __init__(self, text: str) -> None:
        self._chars = list(text)

    def __len__(self) -> int:
        return len(self._chars)

    def read_text_range(self, start: int, end: int) -> str:
        return "".join(self._chars[start:end])

    def replace_range(self, start: int, end: int, text: str) -> None:
        self._chars[start:end] = list(text)

    def make_floating_end_marker(self, position: int):
        raise NotImplementedError


class TestTextBufferBase:
    def test_default_search_forward_uses_absolute_offsets(self):
        buf = _ListBuffer("xx»yy»")
        pattern = re.compile("»")
        assert buf.search_forward(pattern, 3, 6) == (5, 6)
        assert buf.search_forward(pattern, 3, 5) is None
        assert buf.search_forward(pattern, 4, 4) is None

    def test_default_has_no_selection(self):
        assert _ListBuffer("abc").get_current_selection() is None

    def test_text_property(self):
        assert _ListBuffer("abc").text == "abc"
