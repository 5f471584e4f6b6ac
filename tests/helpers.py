"""Test helpers for comparing rendered output."""

from __future__ import annotations

import re

ANSI_ESCAPE = re.compile(r"\x1b\[[0-9;]*m")


def strip_ansi(text: str) -> str:
    """Remove SGR escape sequences from ``text``."""
    return ANSI_ESCAPE.sub("", text)


def rstripped(text: str) -> list[str]:
    """Split rendered output into lines without their trailing padding."""
    return [line.rstrip() for line in text.splitlines()]
