"""Stream processing for JSONL report data.

Each line of the input holds one report as JSON. process_stream parses,
renders and writes the reports in order, skipping lines it cannot use.
"""

from __future__ import annotations

import json
import sys
from typing import TextIO

from pydantic import ValidationError

from .cache import Cache
from .exc import DisplayNameMissing, SourceNotFound
from .formatters import Formatter
from .models import RenderConfig, parse_report


def process_stream(
    input_file: TextIO,
    cache: Cache,
    formatter: Formatter,
    config: RenderConfig | None = None,
    tail_lines: int = 0,
    output: TextIO | None = None,
) -> int:
    """Render every report in a JSONL stream.

    Args:
        input_file: File-like object to read JSONL from
        cache: Source cache the reports refer to
        formatter: Output formatter
        config: Rendering configuration
        tail_lines: If > 0, only process the last N lines
        output: Where to write reports (default: stdout)

    Returns:
        The number of reports written.
    """
    config = config or RenderConfig()
    output = output or sys.stdout

    # If tail_lines specified, read all and take last N
    if tail_lines > 0:
        all_lines = input_file.readlines()
        lines_to_process = all_lines[-tail_lines:]
        start_line_num = max(0, len(all_lines) - tail_lines)
    else:
        lines_to_process = input_file
        start_line_num = 0

    line_num = start_line_num
    written = 0

    for line in lines_to_process:
        line_num += 1
        line = line.strip()

        if not line:
            continue

        try:
            data = json.loads(line)
        except json.JSONDecodeError:
            print(f"warning: invalid JSON on line {line_num}", file=sys.stderr)
            continue

        try:
            report = parse_report(data)
        except ValidationError as e:
            print(
                f"warning: invalid report on line {line_num} ({e.error_count()} errors)",
                file=sys.stderr,
            )
            continue

        try:
            formatter.write(report, cache, output, config)
        except (SourceNotFound, DisplayNameMissing) as e:
            print(f"error: line {line_num}: {e}", file=sys.stderr)
            continue

        written += 1

    return written
