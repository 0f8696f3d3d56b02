from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, TextIO

from .config import Config

if TYPE_CHECKING:
    from .diagnostic import Label


def write_compact_labels(sink: TextIO, config: Config, labels: Iterable[tuple[range, Label]]) -> None:
    """One row per label, no layout: `[line N]` or `[lines N..M]` (M exclusive).

    `labels` pairs each label with its line range; line numbers are 0-based.
    """

    styles = config.styles
    bar = config.paint(config.charset.vertical_bar, styles.left_column)
    for lines, label in labels:
        if len(lines) == 1:
            where = config.paint(f"line {lines.start}", styles.source)
        else:
            where = config.paint(f"lines {lines.start}..{lines.stop}", styles.source)
        sink.write(
            f"{bar} {config.paint('[', styles.left_column)}{where}"
            f"{config.paint(']: ', styles.left_column)}{label.message}\n"
        )
