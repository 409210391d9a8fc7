"""Diagnostic emission with error and warning tallies."""

from __future__ import annotations

import threading

import click

from ppcodemap.errors import Diagnostic, DiagnosticRenderer, Severity
from ppcodemap.source import CoordinateSource


class Reporter:
    """Reporting context for one run.

    Renders diagnostics to stderr against ``source`` and counts errors and
    warnings. Safe to share between threads.
    """

    def __init__(self, source: CoordinateSource, *, color: bool = True) -> None:
        self.renderer = DiagnosticRenderer(source, color=color)
        self._lock = threading.Lock()
        self._errors = 0
        self._warnings = 0

    @property
    def errors(self) -> int:
        with self._lock:
            return self._errors

    @property
    def warnings(self) -> int:
        with self._lock:
            return self._warnings

    def emit(self, diag: Diagnostic) -> None:
        with self._lock:
            if diag.severity in (Severity.BUG, Severity.ERROR):
                self._errors += 1
            elif diag.severity == Severity.WARNING:
                self._warnings += 1
            click.echo(self.renderer.render(diag), err=True)

    def emit_status(self) -> bool:
        """Print warning and error totals. Returns True if no error was emitted."""
        warnings, errors = self.warnings, self.errors
        if warnings:
            noun = "warning" if warnings == 1 else "warnings"
            diag = Diagnostic.warning().with_message(f"{warnings} {noun} emitted")
            click.echo(self.renderer.render(diag), err=True)
        if errors:
            noun = "error" if errors == 1 else "errors"
            diag = Diagnostic.error().with_message(f"{errors} {noun} emitted")
            click.echo(self.renderer.render(diag), err=True)
        return errors == 0
