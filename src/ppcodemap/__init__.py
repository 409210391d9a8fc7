"""Codemap for preprocessed files.

Maps offsets in the flattened output of ``cpp``/``m4`` style preprocessors
back to the original file and line named by ``#line`` directives.
"""

from ppcodemap.codemap import PreprocessedFile, SourceFile
from ppcodemap.located import Located
from ppcodemap.source import CoordinateSource, Location, Segment, Span

__version__ = "0.1.0"

__all__ = [
    "CoordinateSource",
    "Located",
    "Location",
    "PreprocessedFile",
    "Segment",
    "SourceFile",
    "Span",
    "__version__",
]
