from __future__ import annotations

import io
import logging
import sys
from dataclasses import dataclass, field
from typing import TextIO

from rich.style import Style

from .compact import write_compact_labels
from .config import Config
from .layout import BodyDescriptor
from .source import Source
from .spans import SourceSpan
from .writer import BodyWriter


logger = logging.getLogger(__name__)

SpanLike = SourceSpan | tuple[int, int] | range


@dataclass(frozen=True, slots=True)
class Label:
    """A message pointing at a span of the diagnostic's source."""

    span: SourceSpan
    message: str
    indicator_style: Style | None = None

    @classmethod
    def new(cls, span: SpanLike, message: str) -> Label:
        return cls(span=SourceSpan.coerce(span), message=str(message))

    @classmethod
    def styled(cls, span: SpanLike, message: str, style: Style | str) -> Label:
        if isinstance(style, str):
            style = Style.parse(style)
        return cls(span=SourceSpan.coerce(span), message=str(message), indicator_style=style)


@dataclass(frozen=True, slots=True)
class Footnote:
    message: str


@dataclass(slots=True)
class Diagnostic:
    """A message with labels into a source and trailing footnotes.

    Builder methods mutate in place and return the diagnostic, so calls chain.
    """

    message: str
    labels: list[Label] = field(default_factory=list)
    footnotes: list[Footnote] = field(default_factory=list)
    source: Source | None = None

    def add_label(self, label: Label) -> None:
        self.labels.append(label)

    def with_label(self, label: Label) -> Diagnostic:
        self.add_label(label)
        return self

    def with_labels(self, labels: list[Label]) -> Diagnostic:
        self.labels = list(labels)
        return self

    def add_footnote(self, footnote: Footnote | str) -> None:
        if isinstance(footnote, str):
            footnote = Footnote(footnote)
        self.footnotes.append(footnote)

    def with_footnote(self, footnote: Footnote | str) -> Diagnostic:
        self.add_footnote(footnote)
        return self

    def with_source(self, source: Source) -> Diagnostic:
        self.source = source
        return self

    def _source_name(self) -> str:
        if self.source is None or self.source.name is None:
            return "unknown"
        return self.source.name

    def _write_footnotes(self, sink: TextIO, config: Config, padding: int | None) -> None:
        marker = config.paint(">", config.styles.footnote_indicator)
        for footnote in self.footnotes:
            if padding is None:
                sink.write(f"{marker} {footnote.message}\n")
            else:
                sink.write(f"{' ' * padding} {marker} {footnote.message}\n")

    def write(self, sink: TextIO, config: Config) -> None:
        """Write the full annotated listing to `sink`.

        Labels are laid out before anything is written, so a span that does
        not fit the source raises without leaving partial output behind.
        """
        if self.source is None:
            if self.labels:
                logger.warning("diagnostic %r has labels but no source; labels skipped", self.message)
            sink.write(f"{self.message}\n")
            self._write_footnotes(sink, config, padding=None)
            sink.write("\n")
            return

        descriptor = BodyDescriptor.build(self.source, self.labels)
        padding = max(1, descriptor.line_number_width)
        sink.write(f"{self.message}\n")
        styles = config.styles
        sink.write(
            f"{' ' * padding} {config.paint('@', styles.left_column)} "
            f"{config.paint('[', styles.left_column)}"
            f"{config.paint(self._source_name(), styles.source_name)}"
            f"{config.paint(']', styles.left_column)}\n"
        )
        BodyWriter(sink, config, descriptor, source_style=self.source.style).write()
        self._write_footnotes(sink, config, padding=padding)
        sink.write("\n")

    def write_compact(self, sink: TextIO, config: Config) -> None:
        """Write the degraded one-row-per-label form to `sink`."""
        styles = config.styles
        if self.source is not None:
            ranges = [self.source.line_range_of_span(label.span) for label in self.labels]
            sink.write(f"{self.message}\n")
            sink.write(
                f"{config.paint('@', styles.left_column)} "
                f"{config.paint('[', styles.left_column)}"
                f"{config.paint(self._source_name(), styles.source_name)}"
                f"{config.paint(']:', styles.left_column)}\n"
            )
            write_compact_labels(sink, config, zip(ranges, self.labels))
        else:
            if self.labels:
                logger.warning("diagnostic %r has labels but no source; labels skipped", self.message)
            sink.write(f"{self.message}\n")
        self._write_footnotes(sink, config, padding=None)
        sink.write("\n")

    def render(self, config: Config | None = None) -> str:
        buf = io.StringIO()
        self.write(buf, config or Config())
        return buf.getvalue()

    def render_compact(self, config: Config | None = None) -> str:
        buf = io.StringIO()
        self.write_compact(buf, config or Config())
        return buf.getvalue()

    def eprint(self, config: Config | None = None) -> None:
        self.write(sys.stderr, config or Config())
        sys.stderr.flush()

    def eprint_compact(self, config: Config | None = None) -> None:
        self.write_compact(sys.stderr, config or Config())
        sys.stderr.flush()
