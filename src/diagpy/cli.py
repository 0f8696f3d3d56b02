from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .config import Charset, Config
from .diagnostic import Diagnostic, Label
from .errors import DiagnosticError
from .source import Source


logger = logging.getLogger(__name__)


def _label_arg(value: str) -> tuple[int, int, str]:
    start, sep, rest = value.partition(":")
    end, _, message = rest.partition(":")
    try:
        if not sep:
            raise ValueError(value)
        return int(start), int(end), message
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected START:END[:MESSAGE], got {value!r}") from None


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(prog="diagpy", description="Render a diagnostic over a source file")
    ap.add_argument("file", help="Source file (UTF-8)")
    ap.add_argument("-m", "--message", default="error", help="Diagnostic message")
    ap.add_argument(
        "-l",
        "--label",
        action="append",
        default=[],
        type=_label_arg,
        metavar="START:END[:MESSAGE]",
        help="Byte span to annotate (repeatable)",
    )
    ap.add_argument("-f", "--footnote", action="append", default=[], help="Footnote (repeatable)")
    ap.add_argument("--name", help="Source name shown in the header (default: the file path)")
    ap.add_argument("--compact", action="store_true", help="One line per label, no source listing")
    ap.add_argument("--ascii", action="store_true", help="Draw with ASCII glyphs only")
    ap.add_argument("--no-color", action="store_true", help="Do not emit ANSI escape sequences")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging on stderr")
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    path = Path(args.file).expanduser()
    source = Source(path.read_text(encoding="utf-8"), name=args.name or str(path))
    diag = Diagnostic(args.message).with_source(source)
    for start, end, message in args.label:
        try:
            diag.add_label(Label.new((start, end), message))
        except DiagnosticError as e:
            print(f"diagpy: {e}", file=sys.stderr)
            return 1
    for note in args.footnote:
        diag.add_footnote(note)

    charset = Charset.ascii() if args.ascii else Charset()
    config = Config.plain(charset) if args.no_color else Config(charset=charset)
    logger.debug("rendering %d labels over %s", len(diag.labels), source.name)
    try:
        if args.compact:
            diag.write_compact(sys.stdout, config)
        else:
            diag.write(sys.stdout, config)
    except DiagnosticError as e:
        print(f"diagpy: {e}", file=sys.stderr)
        return 1
    return 0
