from __future__ import annotations

from .config import Charset, Config, Styles
from .diagnostic import Diagnostic, Footnote, Label
from .errors import DiagnosticError, InvalidSpan, LineOutOfBounds, SpanOutOfBounds
from .source import Source, SourceLine
from .spans import SourceSpan

__all__ = [
    "Charset",
    "Config",
    "Diagnostic",
    "DiagnosticError",
    "Footnote",
    "InvalidSpan",
    "Label",
    "LineOutOfBounds",
    "Source",
    "SourceLine",
    "SourceSpan",
    "SpanOutOfBounds",
    "Styles",
]
