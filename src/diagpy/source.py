from __future__ import annotations

import bisect
from dataclasses import dataclass, field

from rich.style import Style

from .errors import LineOutOfBounds, SpanOutOfBounds
from .spans import SourceSpan
from .text import dedent


@dataclass(frozen=True, slots=True)
class SourceLine:
    """One line of a source buffer.

    `span` covers the whole line without its terminator; `dedented_span` and
    `text` leave out the leading run of spaces/tabs, whose display width is
    `indent_width`.
    """

    index: int
    span: SourceSpan
    dedented_span: SourceSpan
    indent_width: int
    text: str

    def slice(self, start: int, end: int) -> str:
        """Dedented text between two absolute byte offsets, clamped to the line."""
        base = self.dedented_span.start
        lo = min(max(start, base), self.dedented_span.end) - base
        hi = min(max(end, base), self.dedented_span.end) - base
        if hi <= lo:
            return ""
        return self.text.encode("utf-8")[lo:hi].decode("utf-8", errors="ignore")


def _index_lines(text: str) -> tuple[SourceLine, ...]:
    lines: list[SourceLine] = []
    offset = 0
    parts = text.split("\n")
    if len(parts) > 1 and parts[-1] == "":
        # a final terminator does not open a new line
        parts.pop()
    for index, raw in enumerate(parts):
        raw_len = len(raw.encode("utf-8"))
        # CRLF: the carriage return belongs to the terminator
        body = raw[:-1] if raw.endswith("\r") else raw
        body_len = raw_len - (len(raw) - len(body))
        skip, width, rest = dedent(body)
        lines.append(
            SourceLine(
                index=index,
                span=SourceSpan(offset, offset + body_len),
                dedented_span=SourceSpan(offset + skip, offset + body_len),
                indent_width=width,
                text=rest,
            )
        )
        offset += raw_len + 1
    return tuple(lines)


@dataclass(frozen=True, slots=True)
class Source:
    """A named source buffer indexed by line.

    Immutable once built, so one instance can back any number of diagnostics.
    """

    text: str
    name: str | None = None
    style: Style | None = None
    lines: tuple[SourceLine, ...] = field(init=False, repr=False)
    _starts: tuple[int, ...] = field(init=False, repr=False, compare=False)
    _length: int = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        lines = _index_lines(self.text)
        object.__setattr__(self, "lines", lines)
        object.__setattr__(self, "_starts", tuple(ln.span.start for ln in lines))
        object.__setattr__(self, "_length", len(self.text.encode("utf-8")))

    @property
    def size(self) -> int:
        """Length of the buffer in UTF-8 bytes."""
        return self._length

    def line(self, index: int) -> SourceLine:
        if not 0 <= index < len(self.lines):
            raise LineOutOfBounds(index=index, count=len(self.lines), name=self.name)
        return self.lines[index]

    def line_index_at(self, offset: int) -> int:
        if offset < 0 or offset > self._length or not self.lines:
            raise SpanOutOfBounds(offset=offset, length=self._length, name=self.name)
        return bisect.bisect_right(self._starts, offset) - 1

    def line_range_of_span(self, span: SourceSpan) -> range:
        first = self.line_index_at(span.start)
        last = self.line_index_at(max(span.start, span.end - 1))
        return range(first, last + 1)

    def is_singleline(self, span: SourceSpan) -> bool:
        return len(self.line_range_of_span(span)) == 1
