"""Shared test helpers for the ppcodemap test suite."""

from __future__ import annotations

from ppcodemap.codemap import PreprocessedFile
from ppcodemap.source import Segment

SCENARIO = (
    '#line 1 "top_file"\n'
    "a first statement;\n"
    "another one\n"
    "\n"
    '#line 1 "included_file"\n'
    "continue...\n"
    "\n"
    "#line 5\n"
    "another line\n"
    "the last one\n"
)


def linear_segment_for(codemap: PreprocessedFile, offset: int) -> Segment:
    """Reference lookup: first segment containing the offset, else the last."""
    for segment in codemap.segments:
        if offset in segment.bytes:
            return segment
    return codemap.segments[-1]


def segment_names(codemap: PreprocessedFile) -> list[str]:
    return [codemap.name(s) for s in codemap.segments]
