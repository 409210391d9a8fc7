"""Error types and Rust-style colored diagnostic rendering."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from ppcodemap.source import CoordinateSource, Segment, Span


class CodemapError(Exception):
    """Base class for codemap failures."""


class OffsetOutOfRange(CodemapError, IndexError):
    """An offset lies before the segment it was resolved against."""

    def __init__(self, given: int, bounds: Span) -> None:
        self.given = given
        self.bounds = bounds
        super().__init__(f"offset {given} is outside {bounds}")


class LineTooLarge(CodemapError, IndexError):
    """A line index does not exist in the line table."""

    def __init__(self, given: int, max: int) -> None:
        self.given = given
        self.max = max
        super().__init__(f"line index {given} is too large (max {max})")


class Severity(Enum):
    BUG = "bug"
    ERROR = "error"
    WARNING = "warning"
    NOTE = "note"
    HELP = "help"


# ANSI color codes
_COLORS = {
    Severity.BUG: "\033[1;31m",      # bold red
    Severity.ERROR: "\033[1;31m",    # bold red
    Severity.WARNING: "\033[1;33m",  # bold yellow
    Severity.NOTE: "\033[1;32m",     # bold green
    Severity.HELP: "\033[1;36m",     # bold cyan
}
_BOLD = "\033[1m"
_BLUE = "\033[1;34m"
_RESET = "\033[0m"


@dataclass(frozen=True)
class DiagnosticLabel:
    """Points to a range of the flattened buffer.

    ``segment`` is filled in when the label was built by a codemap; otherwise
    the renderer resolves it from ``span.start``.
    """

    span: Span
    message: str = ""
    style: str = "primary"  # "primary" or "secondary"
    segment: Segment | None = None


@dataclass
class Diagnostic:
    """A single diagnostic message with optional labels and notes."""

    severity: Severity
    code: str = ""
    message: str = ""
    labels: list[DiagnosticLabel] = field(default_factory=list)
    notes: list[str] = field(default_factory=list)

    @classmethod
    def bug(cls) -> Diagnostic:
        return cls(Severity.BUG)

    @classmethod
    def error(cls) -> Diagnostic:
        return cls(Severity.ERROR)

    @classmethod
    def warning(cls) -> Diagnostic:
        return cls(Severity.WARNING)

    @classmethod
    def note(cls) -> Diagnostic:
        return cls(Severity.NOTE)

    @classmethod
    def help(cls) -> Diagnostic:
        return cls(Severity.HELP)

    def with_code(self, code: str) -> Diagnostic:
        self.code = code
        return self

    def with_message(self, message: str) -> Diagnostic:
        self.message = message
        return self

    def with_note(self, note: str) -> Diagnostic:
        self.notes.append(note)
        return self

    def with_label(self, label: DiagnosticLabel) -> Diagnostic:
        self.labels.append(label)
        return self

    def with_primary_label(self, span: Span, message: str = "") -> Diagnostic:
        return self.with_label(DiagnosticLabel(span=span, message=message))

    def with_secondary_label(self, span: Span, message: str = "") -> Diagnostic:
        return self.with_label(DiagnosticLabel(span=span, message=message, style="secondary"))


class DiagnosticRenderer:
    """Renders diagnostics in Rust-style format with colors.

    Label positions are resolved through ``source``, so a label on the
    flattened buffer of a preprocessed file is reported against the original
    file and line.
    """

    def __init__(self, source: CoordinateSource, *, color: bool = True) -> None:
        self.source = source
        self.color = color

    def _c(self, code: str) -> str:
        return code if self.color else ""

    def render(self, diag: Diagnostic) -> str:
        lines: list[str] = []
        sev = diag.severity
        color = _COLORS[sev]

        # Header: error[E042]: message
        code = f"[{diag.code}]" if diag.code else ""
        lines.append(
            f"{self._c(color)}{sev.value}{code}{self._c(_RESET)}"
            f"{self._c(_BOLD)}: {diag.message}{self._c(_RESET)}"
        )

        for label in diag.labels:
            lines.extend(self._render_label(label, color))

        for note in diag.notes:
            lines.append(f"  {self._c(_BLUE)}={self._c(_RESET)} note: {note}")

        return "\n".join(lines)

    def _render_label(self, label: DiagnosticLabel, color: str) -> list[str]:
        span = label.span
        segment = label.segment or self.source.segment_for(span.start)
        name = self.source.name(segment) or "<unknown>"
        try:
            line_index = self.source.line_index(segment, span.start)
            line = self.source.line_range(segment, line_index)
        except CodemapError:
            return [
                f"  {self._c(_BLUE)}-->{self._c(_RESET)} {name} "
                "(no precise location available)"
            ]

        source = self.source.source()
        start = min(max(span.start, line.start), line.end)
        column = Span(line.start, start).char_len(source) + 1
        lineno = line_index + 1
        gutter = f"{lineno:>4}"
        out = [
            f"  {self._c(_BLUE)}-->{self._c(_RESET)} {name}:{lineno}:{column}",
            f"  {self._c(_BLUE)}     |{self._c(_RESET)}",
            f"  {self._c(_BLUE)}{gutter} |{self._c(_RESET)} {line.text(source)}",
        ]

        # Multi-line spans are underlined up to the end of their first line.
        width = max(1, Span(start, max(start, min(span.end, line.end))).char_len(source))
        mark = "^" if label.style == "primary" else "-"
        out.append(
            f"  {self._c(_BLUE)}     |{self._c(_RESET)} "
            f"{' ' * (column - 1)}{self._c(color)}{mark * width}{self._c(_RESET)}"
        )

        if label.message:
            out.append(
                f"  {self._c(_BLUE)}     |{self._c(_RESET)}   "
                f"{self._c(color)}{label.message}{self._c(_RESET)}"
            )
        return out


class CompileError(CodemapError):
    """Construction failure carrying one diagnostic per rejected directive."""

    def __init__(self, diagnostics: list[Diagnostic]) -> None:
        self.diagnostics = diagnostics
        messages = [d.message for d in diagnostics]
        super().__init__(f"{len(diagnostics)} error(s): {'; '.join(messages)}")
