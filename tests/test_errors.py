"""Tests for diagnostics and their rendering through a codemap."""

from __future__ import annotations

import pytest

from ppcodemap.codemap import PreprocessedFile, SourceFile
from ppcodemap.errors import (
    CodemapError,
    CompileError,
    Diagnostic,
    DiagnosticLabel,
    DiagnosticRenderer,
    LineTooLarge,
    OffsetOutOfRange,
    Severity,
)
from ppcodemap.source import Span


class TestDiagnosticBuilder:
    def test_factories(self):
        assert Diagnostic.bug().severity == Severity.BUG
        assert Diagnostic.error().severity == Severity.ERROR
        assert Diagnostic.warning().severity == Severity.WARNING
        assert Diagnostic.note().severity == Severity.NOTE
        assert Diagnostic.help().severity == Severity.HELP

    def test_fluent_helpers(self):
        diag = (
            Diagnostic.error()
            .with_code("E042")
            .with_message("bad thing")
            .with_note("first note")
            .with_primary_label(Span(0, 1), "here")
            .with_secondary_label(Span(2, 3))
        )
        assert diag.code == "E042"
        assert diag.message == "bad thing"
        assert diag.notes == ["first note"]
        assert [label.style for label in diag.labels] == ["primary", "secondary"]
        assert diag.labels[0].message == "here"


class TestRenderer:
    def test_render_through_codemap(self, scenario):
        diag = (
            Diagnostic.note()
            .with_message("this is just an example")
            .with_label(scenario.primary_label(Span(113, 117), "do you see that ?"))
            .with_label(scenario.secondary_label(Span(21, 26), "is it related to this ?"))
        )
        output = DiagnosticRenderer(scenario, color=False).render(diag)
        lines = output.splitlines()

        assert lines[0] == "note: this is just an example"
        assert "--> included_file:6:5" in output
        assert "   6 | the last one" in output
        assert "|     ^^^^" in output
        assert "do you see that ?" in output
        assert "--> top_file:1:3" in output
        assert "   1 | a first statement;" in output
        assert "|   -----" in output

    def test_unlabelled_span_is_resolved(self, scenario):
        diag = Diagnostic.error().with_primary_label(Span(96, 103))
        output = DiagnosticRenderer(scenario, color=False).render(diag)
        assert "included_file:5:1" in output

    def test_code_in_header(self, scenario):
        diag = Diagnostic(Severity.WARNING, "W001", "unused marker")
        output = DiagnosticRenderer(scenario, color=False).render(diag)
        assert output.startswith("warning[W001]: unused marker")

    def test_notes(self, scenario):
        diag = Diagnostic.help().with_message("m").with_note("try again")
        output = DiagnosticRenderer(scenario, color=False).render(diag)
        assert "= note: try again" in output

    def test_unknown_name(self):
        codemap = PreprocessedFile("plain\n")
        output = DiagnosticRenderer(codemap, color=False).render(
            Diagnostic.error().with_primary_label(Span(0, 5))
        )
        assert "--> <unknown>:1:1" in output

    def test_span_running_past_line_end(self, scenario):
        diag = Diagnostic.error().with_primary_label(Span(109, 122))
        output = DiagnosticRenderer(scenario, color=False).render(diag)
        assert "^" * len("the last one") in output
        assert "^" * (len("the last one") + 1) not in output

    def test_end_of_file_label(self, scenario):
        diag = Diagnostic.error().with_primary_label(Span(len(scenario), len(scenario)))
        output = DiagnosticRenderer(scenario, color=False).render(diag)
        assert "included_file:6:" in output

    def test_unresolvable_label(self, scenario):
        label = DiagnosticLabel(span=Span(3, 4), segment=scenario.segments[2])
        output = DiagnosticRenderer(scenario, color=False).render(
            Diagnostic.error().with_label(label)
        )
        assert "included_file (no precise location available)" in output

    def test_color_codes(self, scenario):
        diag = Diagnostic.error().with_message("m")
        assert "\033[" in DiagnosticRenderer(scenario, color=True).render(diag)
        assert "\033[" not in DiagnosticRenderer(scenario, color=False).render(diag)

    def test_render_against_plain_file(self):
        sf = SourceFile("one\ntwo\n", "plain.c")
        diag = Diagnostic.error().with_primary_label(Span(4, 7), "here")
        output = DiagnosticRenderer(sf, color=False).render(diag)
        assert "--> plain.c:2:1" in output
        assert "   2 | two" in output

    def test_columns_and_carets_count_characters(self):
        sf = SourceFile("naïve = bad;\n", "plain.c")
        start = len("naïve = ".encode("utf-8"))
        diag = Diagnostic.error().with_primary_label(Span(start, start + 3))
        output = DiagnosticRenderer(sf, color=False).render(diag)
        assert "--> plain.c:1:9" in output
        assert "   1 | naïve = bad;" in output
        assert "     |         ^^^\n" in output + "\n"

    def test_caret_under_multibyte_span(self):
        sf = SourceFile("naïve\n", "plain.c")
        diag = Diagnostic.error().with_secondary_label(Span(2, 6))
        output = DiagnosticRenderer(sf, color=False).render(diag)
        assert "--> plain.c:1:3" in output
        assert output.splitlines()[-1].endswith("|   ---")


class TestErrors:
    def test_compile_error(self):
        diags = [
            Diagnostic(Severity.ERROR, "E001", "first error"),
            Diagnostic(Severity.ERROR, "E002", "second error"),
        ]
        err = CompileError(diags)
        assert len(err.diagnostics) == 2
        assert "2 error(s)" in str(err)
        assert isinstance(err, CodemapError)

    def test_query_errors_are_index_errors(self):
        assert issubclass(OffsetOutOfRange, IndexError)
        assert issubclass(LineTooLarge, IndexError)
        assert "max 3" in str(LineTooLarge(7, 3))
        assert "0..5" in str(OffsetOutOfRange(9, Span(0, 5)))

    def test_construction_errors_render(self):
        source = 'ok\n#line "missing.c"\n'
        with pytest.raises(CompileError) as exc:
            PreprocessedFile(source, "bad.i")
        renderer = DiagnosticRenderer(SourceFile(source, "bad.i"), color=False)
        output = renderer.render(exc.value.diagnostics[0])
        assert output.startswith("error[E001]")
        assert "--> bad.i:2:1" in output
