from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, TextIO

from rich.style import Style

from .config import Config
from .layout import BodyChunk, BodyDescriptor
from .text import display_width

if TYPE_CHECKING:
    from .diagnostic import Label


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Empty:
    pass


@dataclass(frozen=True, slots=True)
class RecentlyStarted:
    label_id: int
    label: Label


@dataclass(frozen=True, slots=True)
class Active:
    label_id: int
    label: Label


Slot = Empty | RecentlyStarted | Active

EMPTY = Empty()


class BodyWriter:
    """Writes the rows described by a `BodyDescriptor`.

    Each live multi-line label owns one slot (a two-column lane left of the
    source text) from the row where it starts until its closing row.
    """

    def __init__(
        self,
        sink: TextIO,
        config: Config,
        descriptor: BodyDescriptor,
        *,
        source_style: Style | None = None,
    ) -> None:
        self.sink = sink
        self.config = config
        self.descriptor = descriptor
        self.source_style = source_style if source_style is not None else config.styles.source
        self.slots: list[Slot] = [EMPTY] * descriptor.maximum_parallel_labels
        self.current_indent = 0

    def _multiline_style(self, label: Label) -> Style:
        if label.indicator_style is not None:
            return label.indicator_style
        return self.config.styles.multiline_indicator

    def _singleline_style(self, label: Label) -> Style:
        if label.indicator_style is not None:
            return label.indicator_style
        return self.config.styles.singleline_indicator

    def _left_column(self, line_index: int | None) -> str:
        cfg = self.config
        width = self.descriptor.line_number_width
        if line_index is None:
            number = " " * width
            bar = cfg.charset.separator
        else:
            number = f"{line_index + 1:>{width}}"
            bar = cfg.charset.vertical_bar
        return f"{cfg.paint(number, cfg.styles.left_column)} {cfg.paint(bar, cfg.styles.left_column)} "

    def _lanes(self, finishing: list[int]) -> str:
        charset = self.config.charset
        out: list[str] = []
        for i, slot in enumerate(self.slots):
            if isinstance(slot, Empty):
                out.append("  ")
                continue
            if isinstance(slot, RecentlyStarted):
                glyph = charset.multiline_start
                self.slots[i] = Active(slot.label_id, slot.label)
            elif slot.label_id in finishing:
                glyph = charset.multiline_end
            else:
                glyph = charset.vertical_bar
            out.append(self.config.paint(glyph, self._multiline_style(slot.label)) + " ")
        return "".join(out)

    def _allocate(self, label_id: int, label: Label) -> None:
        for i, slot in enumerate(self.slots):
            if isinstance(slot, Empty):
                self.slots[i] = RecentlyStarted(label_id, label)
                return
        raise RuntimeError(
            f"no free slot for multi-line label {label_id} "
            f"(capacity {len(self.slots)}); body descriptor undercounted parallel labels"
        )

    def _write_source_line(self, chunk: BodyChunk) -> None:
        line = chunk.line
        # empty lines were not part of the trim computation
        self.current_indent = line.indent_width - self.descriptor.indent_trim if line.text else 0
        row = (
            self._left_column(line.index)
            + self._lanes(chunk.finishing_multiline_ids)
            + " " * self.current_indent
            + self.config.paint(line.text, self.source_style)
        )
        self.sink.write(row + "\n")

    def _write_singleline_labels(self, chunk: BodyChunk) -> None:
        line = chunk.line
        # longest first, so shorter nested underlines are drawn below
        labels = sorted(chunk.singleline_labels, key=lambda label: len(label.span), reverse=True)
        for label in labels:
            before = display_width(line.slice(line.dedented_span.start, label.span.start))
            under = display_width(line.slice(label.span.start, label.span.end))
            style = self._singleline_style(label)
            indicator = " " * before + self.config.charset.underliner * under
            row = (
                self._left_column(None)
                + self._lanes(chunk.finishing_multiline_ids)
                + " " * self.current_indent
                + self.config.paint(indicator, style)
            )
            if label.message:
                row += " " + self.config.paint(label.message, style)
            self.sink.write(row + "\n")

    def _write_closing(self, index: int, chunk: BodyChunk) -> None:
        charset = self.config.charset
        closing = self.slots[index]
        if not isinstance(closing, Active):
            raise RuntimeError(f"closing slot {index} holds no active label: {closing!r}")
        style = self._multiline_style(closing.label)
        parts = [self._left_column(None)]
        for slot in self.slots[:index]:
            if isinstance(slot, Empty):
                parts.append("  ")
            else:
                parts.append(self.config.paint(charset.vertical_bar, self._multiline_style(slot.label)) + " ")
        parts.append(self.config.paint(charset.connection_top_to_right + charset.horizontal_bar, style))
        for slot in self.slots[index + 1 :]:
            if isinstance(slot, Empty):
                parts.append(self.config.paint(charset.horizontal_bar * 2, style))
            else:
                parts.append(self.config.paint(charset.multiline_crossing, self._multiline_style(slot.label)))
                parts.append(self.config.paint(charset.horizontal_bar, style))
        rule = self.current_indent + display_width(chunk.line.text)
        parts.append(self.config.paint(charset.horizontal_bar * rule, style))
        if closing.label.message:
            parts.append(" " + self.config.paint(closing.label.message, style))
        self.sink.write("".join(parts) + "\n")
        self.slots[index] = EMPTY

    def _finish_multiline_labels(self, chunk: BodyChunk) -> None:
        finishing = set(chunk.finishing_multiline_ids)
        for index, slot in enumerate(self.slots):
            if isinstance(slot, Active) and slot.label_id in finishing:
                self._write_closing(index, chunk)

    def write(self) -> None:
        for chunk in self.descriptor.chunks:
            for label_id, label in chunk.starting_multiline_labels:
                self._allocate(label_id, label)
            self._write_source_line(chunk)
            self._write_singleline_labels(chunk)
            self._finish_multiline_labels(chunk)
        logger.debug("wrote body of %d chunks", len(self.descriptor.chunks))
