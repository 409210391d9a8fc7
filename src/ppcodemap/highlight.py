"""Pygments lexer for preprocessed text."""

import re

from pygments.lexer import Lexer
from pygments.token import Comment, Number, String, Text, Whitespace

from ppcodemap.directives import DEFAULT_MARKER

_LINE = re.compile(r"[^\n]*\n|[^\n]+")

# Token type of each group in a directive match
_DIRECTIVE_TOKENS = (
    Whitespace,
    Comment.Preproc,
    Whitespace,
    Number.Integer,
    Whitespace,
    String.Double,
    Whitespace,
)


class PreprocessedLexer(Lexer):
    """Highlights line markers and leaves everything else as plain text.

    Additional options accepted:

    `marker`
        The directive token (default ``"#line"``), e.g. ``"#"`` for GCC
        style ``# 12 "file.c"`` markers.
    """

    name = "Preprocessed"
    aliases = ["preprocessed", "cpp-output"]
    filenames = ["*.i", "*.ii"]
    mimetypes = ["text/x-preprocessed"]

    def __init__(self, **options):
        super().__init__(**options)
        self.marker = options.get("marker") or DEFAULT_MARKER
        self._directive = re.compile(
            rf'([ \t]*)({re.escape(self.marker)})( +)([0-9]+)(?:( +)("[^"\n]*"))?([ \t]*)'
        )

    def get_tokens_unprocessed(self, text):
        pos = 0
        for line in _LINE.findall(text):
            body = line.rstrip("\n")
            match = self._directive.fullmatch(body)
            if match is not None:
                for group, token in enumerate(_DIRECTIVE_TOKENS, start=1):
                    if match.group(group):
                        yield pos + match.start(group), token, match.group(group)
            elif body:
                yield pos, Text, body
            if len(body) < len(line):
                yield pos + len(body), Whitespace, "\n"
            pos += len(line)
