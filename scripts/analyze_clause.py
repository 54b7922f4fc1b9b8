#!/usr/bin/env python3
"""Rule-based review of one clause: risks, balance, guidance.

Usage:
    python3 scripts/analyze_clause.py --input clause.txt
    python3 scripts/analyze_clause.py --input clause.txt --action balance
    echo "Supplier may terminate at its sole discretion." | \\
        python3 scripts/analyze_clause.py --input - --action analyze

Without --action every check runs. Structured JSON output goes to stdout;
human messages go to stderr.
"""
from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import asdict
from typing import Any

import orjson

from clauselab.analysis import ANALYSIS_ACTIONS, analyze_clause, analyze_clause_action
from clauselab.io_utils import read_text


def dump_json(obj: Any) -> None:
    sys.stdout.buffer.write(orjson.dumps(obj, option=orjson.OPT_INDENT_2))
    sys.stdout.buffer.write(b"\n")


def log(msg: str) -> None:
    print(msg, file=sys.stderr, flush=True)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Rule-based clause analysis",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--input", required=True, help="Clause text file (- for stdin)")
    parser.add_argument(
        "--action", default=None,
        help=f"One of {', '.join(ANALYSIS_ACTIONS)} (default: all)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output to stderr")
    return parser


def run(text: str, action: str | None) -> dict[str, Any]:
    """Analysis payload for one clause; raises ValueError for unknown actions."""
    if action is None:
        return asdict(analyze_clause(text))
    return analyze_clause_action(text, action)


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )
    try:
        text = read_text(args.input)
        output = run(text, args.action)
    except (FileNotFoundError, ValueError) as exc:
        log(f"Error: {exc}")
        return 1
    if not text.strip():
        log("Warning: empty clause text")
    dump_json(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
