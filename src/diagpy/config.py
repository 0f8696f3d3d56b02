from __future__ import annotations

from dataclasses import dataclass, field

from rich.color import ColorSystem
from rich.style import Style


@dataclass(frozen=True, slots=True)
class Charset:
    """Glyphs used to draw a diagnostic body."""

    vertical_bar: str = "│"
    horizontal_bar: str = "╶"
    # underlines single-line labels
    underliner: str = "^"
    # replaces the vertical bar in the gutter of rows that are not source lines
    separator: str = ":"
    # closing corner of a multi-line label
    connection_top_to_right: str = "╰"
    multiline_start: str = "┬"
    multiline_end: str = "┼"
    multiline_crossing: str = "┼"

    @classmethod
    def ascii(cls) -> Charset:
        return cls(
            vertical_bar="|",
            horizontal_bar="-",
            underliner="^",
            separator=":",
            connection_top_to_right="`",
            multiline_start=",",
            multiline_end="+",
            multiline_crossing="+",
        )


@dataclass(frozen=True, slots=True)
class Styles:
    source_name: Style = field(default_factory=lambda: Style(color="white", bold=True))
    source: Style = field(default_factory=lambda: Style(color="white"))
    left_column: Style = field(default_factory=lambda: Style(color="bright_blue", bold=True))
    multiline_indicator: Style = field(default_factory=lambda: Style(color="yellow"))
    singleline_indicator: Style = field(default_factory=lambda: Style(color="yellow"))
    footnote_indicator: Style = field(default_factory=lambda: Style(color="bright_blue", bold=True))


@dataclass(frozen=True, slots=True)
class Config:
    """Everything a render needs besides the diagnostic itself.

    `color_system=None` renders plain text without escape sequences.
    """

    charset: Charset = field(default_factory=Charset)
    styles: Styles = field(default_factory=Styles)
    color_system: ColorSystem | None = ColorSystem.TRUECOLOR

    @classmethod
    def plain(cls, charset: Charset | None = None) -> Config:
        return cls(charset=charset or Charset(), color_system=None)

    def paint(self, text: str, style: Style) -> str:
        return style.render(text, color_system=self.color_system)
