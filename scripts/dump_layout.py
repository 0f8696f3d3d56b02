from __future__ import annotations

import argparse
from pathlib import Path

from diagpy import Label, Source
from diagpy.layout import BodyDescriptor


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(prog="dump_layout")
    ap.add_argument("file")
    ap.add_argument("spans", nargs="+", help="START:END byte spans")
    args = ap.parse_args(argv)

    src = Source(Path(args.file).read_text(encoding="utf-8"), name=args.file)
    labels = []
    for i, s in enumerate(args.spans):
        start, end = s.split(":", 1)
        labels.append(Label.new((int(start), int(end)), f"#{i}"))

    d = BodyDescriptor.build(src, labels)
    print(f"indent_trim: {d.indent_trim}")
    print(f"line_number_width: {d.line_number_width}")
    print(f"maximum_parallel_labels: {d.maximum_parallel_labels}")
    for c in d.chunks:
        single = ", ".join(lb.message for lb in c.singleline_labels)
        starting = ", ".join(f"{i}={lb.message}" for i, lb in c.starting_multiline_labels)
        finishing = ", ".join(str(i) for i in c.finishing_multiline_ids)
        print(f"{c.line.index + 1:>4}: single[{single}] start[{starting}] finish[{finishing}]")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
