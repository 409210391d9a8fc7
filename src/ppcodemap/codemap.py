"""Codemap of a preprocessed file.

The flattened text is split into segments at every line directive. Each
segment knows the file it came from (a span of the buffer holding the name)
and the offset between flattened and original line indices, so offsets in
the flattened text can be reported against the user's real source.
"""

from __future__ import annotations

from bisect import bisect_right
from pathlib import Path

from ppcodemap.directives import DEFAULT_MARKER, Directive, scan_directives
from ppcodemap.errors import DiagnosticLabel, LineTooLarge, OffsetOutOfRange
from ppcodemap.lines import build_line_table, line_containing, line_start
from ppcodemap.source import Location, Segment, Span


def _as_bytes(contents: str | bytes) -> bytes:
    if isinstance(contents, str):
        return contents.encode("utf-8")
    return contents


def build_segments(source: bytes, lines: list[Span], directives: list[Directive]) -> list[Segment]:
    """Partition ``source`` into provenance segments.

    A directive line belongs to the segment before it, so the segments cover
    every offset and every line exactly once. The segment a directive opens
    starts on the line after it and carries its offset and filename (or the
    last filename seen when it names none).
    """
    length = len(source)
    current = Span(0, 0)

    if not directives:
        return [Segment(current, Span(0, length), Span(0, len(lines)), 0)]

    def starting_at(line: int) -> int:
        return line_start(lines, line, length)

    first = directives[0]
    segments = [
        Segment(
            name=current,
            bytes=Span(0, starting_at(first.line_index + 1)),
            lines=Span(0, first.line_index + 1),
            offset=0,
        )
    ]

    for start, end in zip(directives, directives[1:]):
        if start.filename is not None:
            current = start.filename
        segments.append(
            Segment(
                name=current,
                bytes=Span(starting_at(start.line_index + 1), starting_at(end.line_index + 1)),
                lines=Span(start.line_index + 1, end.line_index + 1),
                offset=start.offset,
            )
        )

    last = directives[-1]
    if last.line_index + 1 < len(lines):
        segments.append(
            Segment(
                name=last.filename if last.filename is not None else current,
                bytes=Span(starting_at(last.line_index + 1), length),
                lines=Span(last.line_index + 1, len(lines)),
                offset=last.offset,
            )
        )

    for before, after in zip(segments, segments[1:]):
        assert before.bytes.end == after.bytes.start, (before, after)
        assert before.lines.end == after.lines.start, (before, after)
    return segments


class PreprocessedFile:
    """The codemap of a preprocessed file.

    Built once from the complete flattened text and immutable afterwards.
    Implements the coordinate-source interface used by
    :class:`~ppcodemap.errors.DiagnosticRenderer`.
    """

    def __init__(
        self, contents: str | bytes, filename: str = "<stdin>", *, marker: str = DEFAULT_MARKER
    ) -> None:
        self.filename = filename
        self.contents = _as_bytes(contents)
        self.lines = build_line_table(self.contents)
        directives = scan_directives(self.contents, self.lines, marker)
        self.segments = build_segments(self.contents, self.lines, directives)
        self._segment_starts = [s.bytes.start for s in self.segments]

    @classmethod
    def open(cls, path: Path, *, marker: str = DEFAULT_MARKER) -> PreprocessedFile:
        """Read ``path`` and build its codemap."""
        return cls(Path(path).read_bytes(), str(path), marker=marker)

    def __len__(self) -> int:
        return len(self.contents)

    def __repr__(self) -> str:
        return f"PreprocessedFile({self.filename!r}, segments={len(self.segments)})"

    # ── Coordinate source ─────────────────────────────────────────

    def segment_for(self, byte_index: int) -> Segment:
        """Segment owning ``byte_index``.

        A boundary offset belongs to the segment starting there. Offsets
        outside the buffer are clamped to the first or last segment.
        """
        index = bisect_right(self._segment_starts, byte_index) - 1
        return self.segments[min(max(index, 0), len(self.segments) - 1)]

    def name(self, segment: Segment) -> str:
        return segment.name.text(self.contents)

    def source(self) -> bytes:
        return self.contents

    def line_index(self, segment: Segment, byte_index: int) -> int:
        """Zero-based original line index of ``byte_index`` within ``segment``.

        Offsets at or past the end of the segment map to its last line.
        """
        if byte_index >= segment.bytes.end:
            return segment.last_line_index
        if byte_index < segment.bytes.start:
            raise OffsetOutOfRange(byte_index, segment.bytes)
        return segment.original_line(line_containing(self.lines, byte_index))

    def line_range(self, segment: Segment, line_index: int) -> Span:
        """Span of the original line ``line_index`` of ``segment``."""
        flattened = segment.flattened_line(line_index)
        if not 0 <= flattened < len(self.lines):
            raise LineTooLarge(line_index, segment.original_line(len(self.lines) - 1))
        return self.lines[flattened]

    # ── Conveniences ──────────────────────────────────────────────

    def location(self, byte_index: int) -> Location:
        """1-based file/line/column of ``byte_index``, for display.

        The column counts characters, not bytes. Offsets outside the buffer
        are clamped to its first or last position.
        """
        byte_index = min(max(byte_index, 0), len(self.contents))
        segment = self.segment_for(byte_index)
        line_index = self.line_index(segment, byte_index)
        line = self.line_range(segment, line_index)
        prefix = Span(line.start, min(max(byte_index, line.start), line.end))
        column = prefix.char_len(self.contents) + 1
        return Location(self.name(segment), line_index + 1, column)

    def primary_label(self, span: Span, message: str = "") -> DiagnosticLabel:
        return DiagnosticLabel(span=span, message=message, segment=self.segment_for(span.start))

    def secondary_label(self, span: Span, message: str = "") -> DiagnosticLabel:
        return DiagnosticLabel(
            span=span, message=message, style="secondary", segment=self.segment_for(span.start)
        )


class SourceFile:
    """A plain, unpreprocessed file: one segment, one name, identity offset."""

    def __init__(self, content: str | bytes, filename: str = "<stdin>") -> None:
        self.filename = filename
        self.content = _as_bytes(content)
        self.lines = build_line_table(self.content)
        self.segment = Segment(
            name=Span(0, 0),
            bytes=Span(0, len(self.content)),
            lines=Span(0, len(self.lines)),
            offset=0,
        )

    @classmethod
    def open(cls, path: Path) -> SourceFile:
        return cls(Path(path).read_bytes(), str(path))

    def segment_for(self, byte_index: int) -> Segment:
        return self.segment

    def name(self, segment: Segment) -> str:
        return self.filename

    def source(self) -> bytes:
        return self.content

    def line_index(self, segment: Segment, byte_index: int) -> int:
        if byte_index >= len(self.content):
            return segment.last_line_index
        if byte_index < 0:
            raise OffsetOutOfRange(byte_index, segment.bytes)
        return line_containing(self.lines, byte_index)

    def line_range(self, segment: Segment, line_index: int) -> Span:
        if not 0 <= line_index < len(self.lines):
            raise LineTooLarge(line_index, len(self.lines) - 1)
        return self.lines[line_index]

