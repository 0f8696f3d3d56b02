from __future__ import annotations

from dataclasses import dataclass


class DiagnosticError(Exception):
    pass


class InvalidSpan(DiagnosticError, ValueError):
    """A span was constructed with `end < start` or a negative bound."""


@dataclass(slots=True)
class SpanOutOfBounds(DiagnosticError, IndexError):
    offset: int
    length: int
    name: str | None = None

    def __str__(self) -> str:
        where = self.name or "<source>"
        return f"{where}: byte offset {self.offset} is out of bounds (source is {self.length} bytes)"


@dataclass(slots=True)
class LineOutOfBounds(DiagnosticError, IndexError):
    index: int
    count: int
    name: str | None = None

    def __str__(self) -> str:
        where = self.name or "<source>"
        return f"{where}: line index {self.index} is out of bounds (source has {self.count} lines)"
