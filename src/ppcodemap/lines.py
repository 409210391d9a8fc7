"""Line table: the flattened buffer split into per-line byte spans."""

from __future__ import annotations

from bisect import bisect_right

from ppcodemap.source import Span


def build_line_table(data: bytes) -> list[Span]:
    """Split ``data`` into line spans, newline excluded from each span.

    The newline itself is owned by the line it terminates: the next line
    starts one past it. An unterminated final line still gets a span ending
    at ``len(data)``. An empty buffer has a single empty line.
    """
    lines: list[Span] = []
    start = 0
    newline = data.find(b"\n")
    while newline != -1:
        lines.append(Span(start, newline))
        start = newline + 1
        newline = data.find(b"\n", start)
    if start < len(data) or not lines:
        lines.append(Span(start, len(data)))
    return lines


def line_start(lines: list[Span], index: int, length: int) -> int:
    """Offset where line ``index`` starts, ``length`` for one past the last line."""
    if index < len(lines):
        return lines[index].start
    return length


def line_containing(lines: list[Span], offset: int) -> int:
    """Index of the line owning ``offset``, its terminating newline included."""
    return max(bisect_right(lines, offset, key=lambda span: span.start) - 1, 0)
