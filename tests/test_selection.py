"""Tests for range selection and clip timing."""

import pytest

from lyric_clip.errors import InvalidSelection
from lyric_clip.selection import parse_range, prompt_selection, select_range
from lyric_clip.timeline import TimedLine
from lyric_clip.timing import TAIL_PAD, to_relative

ABC = [
    TimedLine(0.0, 3.0, "a"),
    TimedLine(3.0, 7.0, "b"),
    TimedLine(7.0, 12.0, "c"),
]


class TestSelectRange:
    def test_whole_timeline(self):
        """Lines 1-3 of a/b/c: offset 0, duration 12 - 0 + 2."""
        sel = select_range(ABC, 1, 3)
        assert sel.offset == 0.0
        assert sel.duration == 14.0
        assert len(sel) == 3

    def test_single_line(self):
        sel = select_range(ABC, 1, 1)
        assert list(sel) == [ABC[0]]
        assert sel.duration == 3.0 + TAIL_PAD

    def test_middle_range(self):
        sel = select_range(ABC, 2, 3)
        assert sel.offset == 3.0
        assert sel.duration == 12.0 - 3.0 + 2.0
        assert (sel.first, sel.last) == (2, 3)

    @pytest.mark.parametrize("start,end", [(0, 1), (1, 4), (3, 2), (-1, 2)])
    def test_out_of_range(self, start, end):
        with pytest.raises(InvalidSelection):
            select_range(ABC, start, end)

    def test_empty_timeline(self):
        with pytest.raises(InvalidSelection):
            select_range([], 1, 1)

    def test_non_integer(self):
        with pytest.raises(InvalidSelection):
            select_range(ABC, "1", 2)

    def test_duration_positive(self, timeline):
        for start in range(1, len(timeline) + 1):
            for end in range(start, len(timeline) + 1):
                assert select_range(timeline, start, end).duration > 0

    def test_audio_length_is_sum_of_spans(self):
        sel = select_range(ABC, 1, 3)
        assert sel.audio_length == 12.0

    def test_relative_time(self):
        sel = select_range(ABC, 2, 3)
        assert to_relative(ABC[2].start, sel.offset) == 4.0


class TestParseRange:
    def test_pair(self):
        assert parse_range("5 12") == (5, 12)

    def test_extra_whitespace(self):
        assert parse_range("  2   3 ") == (2, 3)

    @pytest.mark.parametrize("text", ["", "5", "a b", "1 2 3", "1.5 2"])
    def test_malformed(self, text):
        with pytest.raises(InvalidSelection):
            parse_range(text)


class TestPrompt:
    def test_prompt_lists_and_selects(self, capsys):
        sel = prompt_selection(ABC, ask=lambda _: "2 3")
        assert [ln.text for ln in sel] == ["b", "c"]
        out = capsys.readouterr().out
        assert " 1: " in out and " 3: " in out

    def test_prompt_rejects_bad_answer(self):
        with pytest.raises(InvalidSelection):
            prompt_selection(ABC, ask=lambda _: "9 10")
