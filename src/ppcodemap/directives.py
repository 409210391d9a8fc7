"""Scanner for line-marker directives in preprocessed text.

Recognizes lines of the form::

    #line 42 "path/to/file"
    #line 42

The number is the 1-based original line of the text that follows the
directive. A missing filename keeps the previously active one.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from ppcodemap.errors import CompileError, Diagnostic, DiagnosticLabel, Severity
from ppcodemap.source import Span

DEFAULT_MARKER = "#line"


@dataclass(frozen=True)
class Directive:
    """A parsed marker line.

    ``offset`` satisfies ``original = flattened - offset`` for the lines it
    governs; ``filename`` spans the text between the quotes, if any.
    """

    line_index: int
    byte_index: int
    offset: int
    filename: Span | None = None


class DirectiveScanner:
    """Finds and parses line markers over a precomputed line table."""

    def __init__(
        self,
        source: bytes,
        lines: list[Span],
        marker: str = DEFAULT_MARKER,
    ) -> None:
        self.source = source
        self.lines = lines
        self.marker = marker.encode("utf-8")
        escaped = re.escape(self.marker)
        self._directive = re.compile(escaped + rb' +([0-9]+)(?: +"([^"]*)")?')
        self._bad_number = re.compile(escaped + rb' +(\S+) +"[^"]*"')
        self._no_number = re.compile(escaped + rb' +"[^"]*"')
        self.directives: list[Directive] = []
        self.diagnostics: list[Diagnostic] = []

    def scan(self) -> list[Directive]:
        """Scan every line in order and return the directives found."""
        prefix = self.marker + b" "
        for index, line in enumerate(self.lines):
            raw = self.source[line.start : line.end]
            text = raw.strip()
            if not text.startswith(prefix):
                continue
            lead = len(raw) - len(raw.lstrip())
            self._scan_line(index, line, text, line.start + lead)

        if self.diagnostics:
            raise CompileError(self.diagnostics)
        return self.directives

    def _scan_line(self, index: int, line: Span, text: bytes, text_start: int) -> None:
        match = self._directive.fullmatch(text)
        if match is None:
            bad = self._bad_number.fullmatch(text)
            if self._no_number.fullmatch(text):
                self._error("E001", "line directive is missing its line number", line)
            elif bad is not None:
                number = bad.group(1).decode("utf-8", errors="replace")
                self._error("E002", f"invalid line number `{number}` in line directive", line)
            return

        declared = int(match.group(1))
        if declared == 0:
            self._error("E003", "line numbers in directives start at 1", line)
            return

        filename = None
        if match.group(2) is not None:
            filename = Span(text_start + match.start(2), text_start + match.end(2))

        # The directive sits on line `index`; line `index + 1` is original line
        # `declared`, i.e. zero-based `declared - 1`.
        self.directives.append(
            Directive(
                line_index=index,
                byte_index=line.start,
                offset=index + 2 - declared,
                filename=filename,
            )
        )

    def _error(self, code: str, message: str, line: Span) -> None:
        self.diagnostics.append(
            Diagnostic(
                severity=Severity.ERROR,
                code=code,
                message=message,
                labels=[DiagnosticLabel(span=line, message="")],
            )
        )


def scan_directives(
    source: bytes,
    lines: list[Span],
    marker: str = DEFAULT_MARKER,
) -> list[Directive]:
    """Convenience wrapper around :class:`DirectiveScanner`."""
    return DirectiveScanner(source, lines, marker).scan()
