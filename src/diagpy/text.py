from __future__ import annotations

from collections.abc import Iterator

import regex
from rich.cells import cell_len


TAB = "\t"
ZERO_WIDTH_JOINER = "\u200d"
VARIATION_SELECTOR_16 = "\ufe0f"
SKIN_TONES = (
    "\U0001f3fb",  # light
    "\U0001f3fc",  # medium-light
    "\U0001f3fd",  # medium
    "\U0001f3fe",  # medium-dark
    "\U0001f3ff",  # dark
)
TAB_WIDTH = 4

_GRAPHEME_RE = regex.compile(r"\X")


def graphemes(text: str) -> Iterator[tuple[int, str]]:
    """Split `text` into extended grapheme clusters.

    Yields `(index, cluster)` pairs where `index` is the character index of the
    cluster's first code point.
    """

    for match in _GRAPHEME_RE.finditer(text):
        yield match.start(), match.group()


def grapheme_width(grapheme: str) -> int:
    """Display width of a single grapheme cluster.

    Does not check that the argument is one cluster; results for longer text
    are not meaningful.
    """

    if grapheme == TAB:
        return TAB_WIDTH
    if grapheme in (ZERO_WIDTH_JOINER, VARIATION_SELECTOR_16):
        return 0
    if ZERO_WIDTH_JOINER in grapheme:
        return 2
    for tone in SKIN_TONES:
        if tone in grapheme:
            return 2
    return cell_len(grapheme)


def display_width(text: str) -> int:
    return sum(grapheme_width(g) for _, g in graphemes(text))


def dedent(text: str) -> tuple[int, int, str]:
    """Strip leading spaces and tabs.

    Returns `(byte offset of the first kept grapheme, display width removed,
    remaining text)`. Only ASCII whitespace is stripped, so the byte offset
    equals the character offset.
    """

    width = 0
    for index, g in graphemes(text):
        if g == " ":
            width += 1
        elif g == TAB:
            width += TAB_WIDTH
        else:
            return index, width, text[index:]
    return len(text.encode("utf-8")), display_width(text), ""
