from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .source import Source, SourceLine
from .spans import SourceSpan

if TYPE_CHECKING:
    from .diagnostic import Label


logger = logging.getLogger(__name__)


@dataclass(slots=True)
class BodyChunk:
    """One emitted source line and the label events attached to it."""

    line: SourceLine
    singleline_labels: list[Label] = field(default_factory=list)
    starting_multiline_labels: list[tuple[int, Label]] = field(default_factory=list)
    finishing_multiline_ids: list[int] = field(default_factory=list)


@dataclass(slots=True)
class BodyDescriptor:
    """The chunks of a body plus the capacities the writer needs up front."""

    chunks: list[BodyChunk]
    # indentation width removed from every rendered line
    indent_trim: int
    # digits needed for the largest line number shown
    line_number_width: int
    # most multi-line labels alive on any single line
    maximum_parallel_labels: int

    @classmethod
    def build(cls, source: Source, labels: list[Label]) -> BodyDescriptor:
        return DescriptorBuilder(source, labels).build()


class DescriptorBuilder:
    """Sweeps the source once, line by line, turning labels into chunks.

    Lines that are neither labelled nor inside an open multi-line label are
    skipped.
    """

    def __init__(self, source: Source, labels: list[Label]) -> None:
        self.source = source
        # stack: popping yields labels in ascending start order
        self.labels = sorted(labels, key=lambda label: label.span.start, reverse=True)
        self.active: list[tuple[int, SourceSpan]] = []
        self.next_id = 0
        self.current_line = 0
        self.indent_trim: int | None = None
        self.chunks: list[BodyChunk] = []

    def _last_line_of(self, span: SourceSpan) -> int:
        return self.source.line_range_of_span(span).stop - 1

    def _take_starting(self, chunk: BodyChunk) -> None:
        while self.labels:
            label = self.labels[-1]
            if self.source.line_index_at(label.span.start) != self.current_line:
                break
            self.labels.pop()
            if self.source.is_singleline(label.span):
                chunk.singleline_labels.append(label)
            else:
                self.active.append((self.next_id, label.span))
                chunk.starting_multiline_labels.append((self.next_id, label))
                self.next_id += 1

    def _take_finishing(self, chunk: BodyChunk) -> None:
        still_active: list[tuple[int, SourceSpan]] = []
        for label_id, span in self.active:
            if self._last_line_of(span) == self.current_line:
                chunk.finishing_multiline_ids.append(label_id)
            else:
                still_active.append((label_id, span))
        self.active = still_active

    def _sweep(self) -> None:
        while self.labels or self.active:
            if self.active:
                self.current_line += 1
            else:
                self.current_line = self.source.line_index_at(self.labels[-1].span.start)

            line = self.source.line(self.current_line)
            # empty lines would always force a zero trim
            if line.text:
                if self.indent_trim is None or line.indent_width < self.indent_trim:
                    self.indent_trim = line.indent_width

            chunk = BodyChunk(line=line)
            self._take_starting(chunk)
            self._take_finishing(chunk)
            self.chunks.append(chunk)

    def _line_number_width(self) -> int:
        if not self.chunks:
            return 0
        return len(str(self.chunks[-1].line.index + 1))

    def _maximum_parallel_labels(self) -> int:
        count = 0
        peak = 0
        for chunk in self.chunks:
            count += len(chunk.starting_multiline_labels)
            peak = max(peak, count)
            # a label finishing on a line is still drawn on it
            count -= len(chunk.finishing_multiline_ids)
        return peak

    def build(self) -> BodyDescriptor:
        self._sweep()
        descriptor = BodyDescriptor(
            chunks=self.chunks,
            indent_trim=self.indent_trim or 0,
            line_number_width=self._line_number_width(),
            maximum_parallel_labels=self._maximum_parallel_labels(),
        )
        logger.debug(
            "built body: %d chunks, indent_trim=%d, line_number_width=%d, max_parallel=%d",
            len(descriptor.chunks),
            descriptor.indent_trim,
            descriptor.line_number_width,
            descriptor.maximum_parallel_labels,
        )
        return descriptor
