"""ppcodemap command-line interface."""

from __future__ import annotations

from pathlib import Path
from typing import BinaryIO

import click

from ppcodemap import __version__
from ppcodemap.codemap import PreprocessedFile, SourceFile
from ppcodemap.config import PpcodemapConfig, resolve_config
from ppcodemap.errors import CompileError, Diagnostic, Severity
from ppcodemap.reporting import Reporter
from ppcodemap.source import Span


def _load(file: BinaryIO, config: PpcodemapConfig, color: bool) -> PreprocessedFile:
    """Build the codemap of ``file``, reporting rejected directives and exiting."""
    contents = file.read()
    filename = _filename(file)
    try:
        return PreprocessedFile(contents, filename, marker=config.codemap.marker)
    except CompileError as e:
        reporter = Reporter(SourceFile(contents, filename), color=color)
        for diag in e.diagnostics:
            reporter.emit(diag)
        reporter.emit_status()
        raise SystemExit(1)


def _filename(file: BinaryIO) -> str:
    name = getattr(file, "name", None)
    return name if isinstance(name, str) else "<stdin>"


def _config_for(file: BinaryIO) -> PpcodemapConfig:
    path = Path(_filename(file))
    return resolve_config(path if path.exists() else None)


@click.group()
@click.version_option(__version__, prog_name="ppcodemap")
@click.option("--no-color", is_flag=True, help="Disable colored output.")
@click.pass_context
def main(ctx: click.Context, no_color: bool) -> None:
    """Map preprocessed text back to its original files and lines."""
    ctx.obj = {"no_color": no_color}


def _color(ctx: click.Context, config: PpcodemapConfig) -> bool:
    return config.report.color and not ctx.obj["no_color"]


@main.command()
@click.argument("file", type=click.File("rb"))
@click.pass_context
def segments(ctx: click.Context, file: BinaryIO) -> None:
    """List the segments of a preprocessed FILE."""
    config = _config_for(file)
    codemap = _load(file, config, _color(ctx, config))
    for segment in codemap.segments:
        name = codemap.name(segment) or "<unknown>"
        click.echo(
            f"{name}\tbytes {segment.bytes}\tlines {segment.lines}\toffset {segment.offset}"
        )


@main.command()
@click.argument("file", type=click.File("rb"))
@click.argument("offsets", nargs=-1, required=True, type=int)
@click.pass_context
def locate(ctx: click.Context, file: BinaryIO, offsets: tuple[int, ...]) -> None:
    """Print the original file:line:column of each byte OFFSET in FILE."""
    config = _config_for(file)
    codemap = _load(file, config, _color(ctx, config))
    for offset in offsets:
        click.echo(f"{offset}\t{codemap.location(offset)}")


@main.command()
@click.argument("file", type=click.File("rb"))
@click.argument("start", type=int)
@click.argument("end", type=int)
@click.option("--message", "-m", default="", help="Diagnostic message.")
@click.option("--label", "-l", default="", help="Message attached to the span.")
@click.option(
    "--severity",
    type=click.Choice([s.value for s in Severity]),
    default=Severity.NOTE.value,
    show_default=True,
    help="Diagnostic severity.",
)
@click.pass_context
def annotate(
    ctx: click.Context, file: BinaryIO, start: int, end: int, message: str, label: str, severity: str
) -> None:
    """Report a diagnostic on bytes START..END of FILE."""
    if end < start:
        raise click.BadParameter(f"end {end} precedes start {start}", param_hint="END")
    config = _config_for(file)
    color = _color(ctx, config)
    codemap = _load(file, config, color)
    reporter = Reporter(codemap, color=color)
    diag = Diagnostic(Severity(severity), message=message)
    diag.with_label(codemap.primary_label(Span(start, end), label))
    reporter.emit(diag)
    if not reporter.emit_status():
        raise SystemExit(1)


@main.command()
@click.argument("file", type=click.File("rb"))
@click.pass_context
def view(ctx: click.Context, file: BinaryIO) -> None:
    """Show FILE with the original location of every line."""
    from pygments import highlight
    from pygments.formatters import TerminalFormatter

    from ppcodemap.highlight import PreprocessedLexer

    config = _config_for(file)
    color = _color(ctx, config)
    codemap = _load(file, config, color)
    source = codemap.source()
    lexer = PreprocessedLexer(stripnl=False, ensurenl=False, marker=config.codemap.marker)
    formatter = TerminalFormatter()

    # One row per line table entry; carriage returns would split rows.
    text_lines = [line.text(source).replace("\r", "") for line in codemap.lines]
    if color:
        text_lines = [highlight(text, lexer, formatter).rstrip("\n") for text in text_lines]

    for segment in codemap.segments:
        name = codemap.name(segment) or "<unknown>"
        for flattened in range(segment.lines.start, segment.lines.end):
            where = f"{name}:{segment.original_line(flattened) + 1}"
            click.echo(f"{where:>24} | {text_lines[flattened]}")
