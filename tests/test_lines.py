"""Tests for the line table."""

from __future__ import annotations

from ppcodemap.lines import build_line_table, line_containing, line_start
from ppcodemap.source import Span


class TestBuildLineTable:
    def test_empty_buffer_has_one_empty_line(self):
        assert build_line_table(b"") == [Span(0, 0)]

    def test_terminated_lines(self):
        assert build_line_table(b"ab\ncd\n") == [Span(0, 2), Span(3, 5)]

    def test_unterminated_last_line(self):
        assert build_line_table(b"ab\ncd") == [Span(0, 2), Span(3, 5)]

    def test_blank_lines(self):
        assert build_line_table(b"\n\nx\n") == [Span(0, 0), Span(1, 1), Span(2, 3)]

    def test_single_newline(self):
        assert build_line_table(b"\n") == [Span(0, 0)]

    def test_lines_are_gapless_except_newline(self):
        text = b"one\ntwo\n\nfour"
        lines = build_line_table(text)
        for before, after in zip(lines, lines[1:]):
            assert after.start == before.end + 1
            assert text[before.end : before.end + 1] == b"\n"
        assert lines[-1].end == len(text)


class TestLineLookup:
    def test_line_containing(self):
        lines = build_line_table(b"ab\ncd\n")
        assert [line_containing(lines, i) for i in range(6)] == [0, 0, 0, 1, 1, 1]

    def test_newline_belongs_to_its_line(self):
        lines = build_line_table(b"ab\ncd\n")
        assert line_containing(lines, 2) == 0

    def test_line_start_past_the_end(self):
        lines = build_line_table(b"ab\ncd\n")
        assert line_start(lines, 1, 6) == 3
        assert line_start(lines, 2, 6) == 6

    def test_spans_count_utf8_bytes(self):
        lines = build_line_table("é\nx\n".encode("utf-8"))
        assert lines == [Span(0, 2), Span(3, 4)]
        assert line_containing(lines, 3) == 1
