"""Command-line interface for threadline."""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import TextIO

from . import (
    ANSIFormatter,
    FileCache,
    Formatter,
    PlainFormatter,
    RenderConfig,
    ThreadlineException,
    process_stream,
)


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""

    parser = argparse.ArgumentParser(
        description="Render diagnostic reports from JSONL",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Output Formats:
    ansi        Terminal colors (default)
    plain       Plain text, no formatting

Input:
    One report per line, e.g.
    {"kind": "error", "code": "E0412", "message": "cannot find type `Lab`",
     "views": [{"source_id": "src/lib.rs", "anchor": 218,
                "labels": [{"span": [218, 221], "message": "not found"}]}]}

Examples:
    %(prog)s reports.jsonl                      # Render every report
    %(prog)s reports.jsonl --root ~/project     # Resolve sources under a directory
    %(prog)s reports.jsonl -n 5                 # Only the last 5 reports
    lint --json | %(prog)s --format plain       # Read from stdin
        """
    )

    # Positional file argument
    parser.add_argument("input_file", nargs="?", type=Path, help="JSONL file to read")
    parser.add_argument("-f", "--file", type=Path, help="Read from JSONL file")

    # Output format
    parser.add_argument(
        "--format", "-F",
        choices=["ansi", "plain"],
        default=None,
        help="Output format (default: ansi, or plain if piped)"
    )

    # Sources and layout
    parser.add_argument("--root", type=Path, default=None,
                        help="Directory source ids are relative to (default: cwd)")
    parser.add_argument("--tab-width", type=int, default=4, metavar="N",
                        help="Columns per tab in excerpts and column numbers")
    parser.add_argument("--width", type=int, default=None, metavar="N",
                        help="Wrap messages at N columns")
    parser.add_argument("-n", "--lines", type=int, default=0, metavar="N",
                        help="Render only the last N lines of input")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output")

    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point."""

    args = parse_args(argv)

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(levelname)s %(name)s: %(message)s",
            stream=sys.stderr,
        )

    if args.tab_width < 1:
        print("error: --tab-width must be positive", file=sys.stderr)
        return 1
    if args.width is not None and args.width < 1:
        print("error: --width must be positive", file=sys.stderr)
        return 1

    config = RenderConfig(tab_width=args.tab_width, message_width=args.width)

    # Select formatter (default to plain if stdout is not a TTY)
    output_format = args.format
    if output_format is None:
        output_format = "ansi" if sys.stdout.isatty() else "plain"

    formatter: Formatter
    if output_format == "plain":
        formatter = PlainFormatter()
    else:
        formatter = ANSIFormatter()

    # Determine input source
    input_file: TextIO

    # Positional file takes precedence over -f/--file
    file_path = args.input_file or args.file

    if file_path:
        if not file_path.exists():
            print(f"error: file not found: {file_path}", file=sys.stderr)
            return 1
        input_file = open(file_path, encoding="utf-8")
    elif not sys.stdin.isatty():
        input_file = sys.stdin
    else:
        print("error: no input source specified", file=sys.stderr)
        return 1

    cache = FileCache(args.root)

    try:
        process_stream(input_file, cache, formatter, config, tail_lines=args.lines)
    except ThreadlineException as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    finally:
        if input_file is not sys.stdin:
            input_file.close()

    return 0


if __name__ == "__main__":
    exit_code: int = 0
    try:
        exit_code = main()
    except KeyboardInterrupt:
        print("\nexiting", file=sys.stderr)

    sys.exit(exit_code)
