#!/usr/bin/env python3
"""Print the human-readable summary of one or more .splice pattern files.

Usage:
    python tools/render_pattern.py fixtures/pattern_1.splice
    python tools/render_pattern.py "patterns/**/*.splice" --verbose
"""

from __future__ import annotations

import argparse
import glob
import logging
from pathlib import Path
import sys
from typing import Iterable, List

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from splice.decoder import decode_file
from splice.errors import PatternError
from splice.log_config import setup_logging
from splice.pattern import render_text

logger = logging.getLogger("splice.tools.render_pattern")


def collect_paths(patterns: Iterable[str]) -> List[Path]:
    """Expand each argument as a glob, falling back to the literal path.

    A pattern file named by two arguments is rendered once, in the order it
    was first seen.
    """
    found: List[Path] = []
    seen: set[Path] = set()
    for pattern in patterns:
        expanded = sorted(Path(p) for p in glob.glob(pattern, recursive=True))
        if not expanded and Path(pattern).exists():
            expanded = [Path(pattern)]
        for path in expanded:
            key = path.resolve()
            if key in seen:
                continue
            seen.add(key)
            found.append(path)
    return found


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Show version, tempo and step grid for .splice pattern files."
    )
    parser.add_argument(
        "paths",
        nargs="+",
        help="File paths or glob patterns (quotes recommended for wildcards).",
    )
    parser.add_argument(
        "--max-payload",
        type=int,
        default=None,
        help="Reject files declaring a payload larger than this many bytes",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log header and per-track decode details to stderr",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = _build_arg_parser()
    args = parser.parse_args(argv)
    setup_logging(verbose=args.verbose)

    targets = collect_paths(args.paths)
    if not targets:
        parser.error("No files matched the provided paths/patterns.")

    status = 0
    for idx, path in enumerate(targets):
        try:
            pattern = decode_file(path, max_payload_size=args.max_payload)
        except (PatternError, OSError) as err:
            logger.debug("decode failed for %s", path, exc_info=True)
            print(f"{path}: ERR {err}", file=sys.stderr)
            status = 1
            continue

        if len(targets) > 1:
            if idx:
                print()
            print(f"== {path}")
        sys.stdout.write(render_text(pattern))

    return status


if __name__ == "__main__":
    raise SystemExit(main())
