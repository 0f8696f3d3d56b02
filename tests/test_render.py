from __future__ import annotations

import io
import re

import pytest

from diagpy import Charset, Config, Diagnostic, Label, Source, SpanOutOfBounds
from diagpy.layout import BodyDescriptor
from diagpy.writer import BodyWriter, Empty

PLAIN = Config.plain()
NESTED = "fn main() {\n    let x = 1;\n    if x {\n        go();\n    }\n}\n"
ROWS = "a = 1\nb = 2\nc = 3\nd = 4\n"

_ANSI_RE = re.compile(r"\x1b\[[0-9;]*m")


def _lines(*rows: str) -> str:
    return "\n".join(rows) + "\n"


def _nested() -> Diagnostic:
    return (
        Diagnostic("mismatched braces")
        .with_source(Source(NESTED, name="main.rs"))
        .with_label(Label.new((0, 59), "function body"))
        .with_label(Label.new((31, 57), "conditional"))
    )


def test_single_underline() -> None:
    diag = (
        Diagnostic("oops")
        .with_source(Source("hello there darling!\n\nworld", name="sample.txt"))
        .with_label(Label.new((0, 5), "greeting"))
    )
    assert diag.render(PLAIN) == _lines(
        "oops",
        "  @ [sample.txt]",
        "1 │ hello there darling!",
        "  : ^^^^^ greeting",
        "",
    )


def test_nested_multiline() -> None:
    assert _nested().render(PLAIN) == _lines(
        "mismatched braces",
        "  @ [main.rs]",
        "1 │ ┬   fn main() {",
        "2 │ │       let x = 1;",
        "3 │ │ ┬     if x {",
        "4 │ │ │         go();",
        "5 │ │ ┼     }",
        "  : │ ╰╶╶╶╶╶╶ conditional",
        "6 │ ┼   }",
        "  : ╰╶╶╶╶ function body",
        "",
    )


def test_crossing_multiline() -> None:
    diag = (
        Diagnostic("overlap")
        .with_source(Source(ROWS, name="t.txt"))
        .with_label(Label.new((0, 17), "first"))
        .with_label(Label.new((6, 23), "second"))
    )
    assert diag.render(PLAIN) == _lines(
        "overlap",
        "  @ [t.txt]",
        "1 │ ┬   a = 1",
        "2 │ │ ┬ b = 2",
        "3 │ ┼ │ c = 3",
        "  : ╰╶┼╶╶╶╶╶╶ first",
        "4 │   ┼ d = 4",
        "  :   ╰╶╶╶╶╶╶ second",
        "",
    )


def test_ascii_charset() -> None:
    diag = (
        Diagnostic("overlap")
        .with_source(Source(ROWS, name="t.txt"))
        .with_label(Label.new((0, 17), "first"))
        .with_label(Label.new((6, 23), "second"))
    )
    assert diag.render(Config.plain(Charset.ascii())) == _lines(
        "overlap",
        "  @ [t.txt]",
        "1 | ,   a = 1",
        "2 | | , b = 2",
        "3 | + | c = 3",
        "  : `-+------ first",
        "4 |   + d = 4",
        "  :   `------ second",
        "",
    )


def test_longest_underline_first_and_indent_trim() -> None:
    diag = (
        Diagnostic("bad call")
        .with_source(Source("\tlet value = compute(x);\n"))
        .with_label(Label.new((13, 23), "call"))
        .with_label(Label.new((13, 20), "callee"))
    )
    assert diag.render(PLAIN) == _lines(
        "bad call",
        "  @ [unknown]",
        "1 │ let value = compute(x);",
        "  :             ^^^^^^^^^^ call",
        "  :             ^^^^^^^ callee",
        "",
    )


def test_relative_indentation_is_kept() -> None:
    diag = (
        Diagnostic("x")
        .with_source(Source("    if x:\n        y()\n"))
        .with_label(Label.new((4, 6), "if"))
        .with_label(Label.new((18, 21), "call"))
    )
    assert diag.render(PLAIN) == _lines(
        "x",
        "  @ [unknown]",
        "1 │ if x:",
        "  : ^^ if",
        "2 │     y()",
        "  :     ^^^ call",
        "",
    )


def test_underline_uses_display_width() -> None:
    src = Source('a\tb = 1\nx = "漢字";\n\U0001f44d\U0001f3fd ok\n')
    diag = (
        Diagnostic("widths")
        .with_source(src)
        .with_label(Label.new((2, 3), "after tab"))
        .with_label(Label.new((13, 19), "wide"))
        .with_label(Label.new((31, 33), "after emoji"))
    )
    out = diag.render(PLAIN)
    assert "  :      ^ after tab\n" in out
    assert "  :      ^^^^ wide\n" in out
    assert "  :    ^^ after emoji\n" in out


def test_span_ending_on_newline_underlines_line_only() -> None:
    diag = Diagnostic("c").with_source(Source("abc\ndef\n")).with_label(Label.new((0, 4), "line"))
    assert diag.render(PLAIN) == _lines("c", "  @ [unknown]", "1 │ abc", "  : ^^^ line", "")


def test_empty_line_inside_region() -> None:
    diag = Diagnostic("e").with_source(Source("    a\n\n    b\n")).with_label(Label.new((4, 12), "block"))
    assert diag.render(PLAIN) == _lines(
        "e",
        "  @ [unknown]",
        "1 │ ┬ a",
        "2 │ │ ",
        "3 │ ┼ b",
        "  : ╰╶╶ block",
        "",
    )


def test_singleline_label_rows_show_lanes() -> None:
    diag = (
        Diagnostic("lanes")
        .with_source(Source(ROWS))
        .with_label(Label.new((0, 17), "region"))
        .with_label(Label.new((6, 7), "b"))
    )
    assert diag.render(PLAIN) == _lines(
        "lanes",
        "  @ [unknown]",
        "1 │ ┬ a = 1",
        "2 │ │ b = 2",
        "  : │ ^ b",
        "3 │ ┼ c = 3",
        "  : ╰╶╶╶╶╶╶ region",
        "",
    )


def test_footnotes() -> None:
    diag = (
        Diagnostic("oops")
        .with_source(Source("hello", name="f"))
        .with_label(Label.new((0, 5), ""))
        .with_footnote("try again")
    )
    assert diag.render(PLAIN) == _lines("oops", "  @ [f]", "1 │ hello", "  : ^^^^^", "  > try again", "")


def test_without_source() -> None:
    diag = Diagnostic("bare").with_label(Label.new((0, 1), "lost")).with_footnote("note")
    assert diag.render(PLAIN) == "bare\n> note\n\n"


def test_colored_output_strips_to_plain() -> None:
    diag = _nested().with_label(Label.styled((3, 7), "name", "bold red"))
    colored = diag.render(Config())
    assert "\x1b[" in colored
    assert "\x1b[1;31m" in colored
    assert _ANSI_RE.sub("", colored) == diag.render(PLAIN)


def test_render_is_deterministic() -> None:
    diag = _nested()
    assert diag.render(Config()) == diag.render(Config())
    assert diag.render(PLAIN) == diag.render(PLAIN)


def test_out_of_bounds_writes_nothing() -> None:
    diag = Diagnostic("x").with_source(Source("abc")).with_label(Label.new((1, 40), "far"))
    buf = io.StringIO()
    with pytest.raises(SpanOutOfBounds):
        diag.write(buf, PLAIN)
    assert buf.getvalue() == ""


class _BrokenSink:
    def write(self, s: str) -> int:
        raise OSError("disk full")


def test_sink_errors_propagate() -> None:
    with pytest.raises(OSError):
        _nested().write(_BrokenSink(), PLAIN)


def test_slots_are_released() -> None:
    src = Source(NESTED)
    d = BodyDescriptor.build(src, [Label.new((0, 59), "outer"), Label.new((31, 57), "inner")])
    writer = BodyWriter(io.StringIO(), PLAIN, d)
    writer.write()
    assert len(writer.slots) == 2
    assert all(isinstance(slot, Empty) for slot in writer.slots)


def test_slot_overflow_is_loud() -> None:
    d = BodyDescriptor.build(Source("a\nb\n"), [Label.new((0, 3), "x")])
    d.maximum_parallel_labels = 0
    with pytest.raises(RuntimeError):
        BodyWriter(io.StringIO(), PLAIN, d).write()


def test_underline_after_zwj_sequence() -> None:
    # the arrow sequence is one two-column cluster spanning 15 bytes
    src = Source("x = \u2194\ufe0f\u200d\u2194\ufe0f; y\n")
    diag = Diagnostic("zwj").with_source(src).with_label(Label.new((21, 22), "y"))
    assert "  : " + " " * 8 + "^ y\n" in diag.render(PLAIN)


def test_closing_an_empty_slot_is_loud() -> None:
    d = BodyDescriptor.build(Source(ROWS), [Label.new((0, 17), "region")])
    writer = BodyWriter(io.StringIO(), PLAIN, d)
    with pytest.raises(RuntimeError):
        writer._write_closing(0, d.chunks[-1])
