"""Spans, segments, and the coordinate-source interface used for diagnostics."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True, order=True)
class Span:
    """A half-open range ``[start, end)`` of byte offsets or line indices."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.end < self.start:
            raise ValueError(f"span end {self.end} precedes start {self.start}")

    def __len__(self) -> int:
        return self.end - self.start

    def __contains__(self, index: object) -> bool:
        return isinstance(index, int) and self.start <= index < self.end

    def __str__(self) -> str:
        return f"{self.start}..{self.end}"

    def text(self, source: bytes) -> str:
        """Slice the covered bytes out of ``source`` and decode them as UTF-8."""
        return source[self.start : self.end].decode("utf-8", errors="replace")

    def char_len(self, source: bytes) -> int:
        """Number of characters the covered bytes decode to."""
        return len(self.text(source))


@dataclass(frozen=True)
class Segment:
    """A run of the flattened buffer sharing one original file and line offset.

    ``name`` points at the file name inside the buffer (empty when unknown),
    ``bytes`` and ``lines`` are the flattened spans owned by the segment, and
    ``offset`` converts line indices: ``original = flattened - offset``.
    """

    name: Span
    bytes: Span
    lines: Span
    offset: int

    def original_line(self, flattened: int) -> int:
        return flattened - self.offset

    def flattened_line(self, original: int) -> int:
        return original + self.offset

    @property
    def last_line_index(self) -> int:
        """Original index of the last line owned by this segment."""
        return self.original_line(max(self.lines.start, self.lines.end - 1))


@dataclass(frozen=True)
class Location:
    """A display location: file name with 1-based line and column."""

    name: str
    line: int
    column: int

    def __str__(self) -> str:
        return f"{self.name}:{self.line}:{self.column}"


class CoordinateSource(Protocol):
    """What a diagnostic renderer needs to turn offsets into file positions."""

    def segment_for(self, byte_index: int) -> Segment: ...

    def name(self, segment: Segment) -> str: ...

    def source(self) -> bytes: ...

    def line_index(self, segment: Segment, byte_index: int) -> int: ...

    def line_range(self, segment: Segment, line_index: int) -> Span: ...

