from __future__ import annotations

import argparse
import hashlib
import sys

from diagpy import Config
from diagpy.testing import generate_diagnostics


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(prog="render_corpus")
    ap.add_argument("--seed", type=int, default=1)
    ap.add_argument("--count", type=int, default=100)
    ap.add_argument("--color", action="store_true", help="Keep ANSI escapes in the output")
    ap.add_argument("--hash", action="store_true", help="Print only the sha256 of the rendered corpus")
    args = ap.parse_args(argv)

    config = Config() if args.color else Config.plain()
    h = hashlib.sha256()
    for diag in generate_diagnostics(seed=args.seed, count=args.count):
        out = diag.render(config)
        h.update(out.encode("utf-8"))
        if not args.hash:
            sys.stdout.write(out)

    if args.hash:
        print(h.hexdigest())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
