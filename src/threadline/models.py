"""Data models for diagnostic reports.

This module contains the TypedDicts describing report JSON, the Pydantic
models for reports, source views, labels and comments, RenderConfig, and
parse_report. Each model knows how to render itself into an element tree;
formatters then turn that tree into text.
"""

from __future__ import annotations

import logging
import re
import sys
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, TextIO

from pydantic import BaseModel, Field, field_validator
from typing_extensions import TypedDict

from .blocks import LINE_BREAKS, Box, Element, HStack, Inline, VStack
from .exc import DisplayNameMissing
from .style import NAMED_COLORS, Color, Style, Styled, to_runs

if TYPE_CHECKING:
    from .cache import Cache
    from .formatters import Formatter

logger = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

BORDER_STYLE = Style(foreground=NAMED_COLORS["gray"])
GUTTER_STYLE = Style(foreground=NAMED_COLORS["gray"])


# =============================================================================
# TypedDicts for Known Structures
# =============================================================================

class StyleData(TypedDict, total=False):
    """Style as it appears in report JSON."""

    foreground: str | list[int]
    background: str | list[int]
    bold: bool
    italic: bool


class RunData(TypedDict, total=False):
    """A styled text run."""

    value: str
    style: StyleData


# A message is a plain string or a list of strings and runs
MessageData = str | list[str | RunData]


class LabelData(TypedDict, total=False):
    """Label structure."""

    span: list[int]
    message: MessageData
    color: str | list[int]


class ViewData(TypedDict, total=False):
    """Source view structure."""

    source_id: str
    anchor: int
    labels: list[LabelData]


class CommentData(TypedDict):
    """Help or note attached to a report."""

    kind: str
    message: MessageData


class ReportData(TypedDict, total=False):
    """Report structure."""

    kind: str
    code: str
    message: MessageData
    views: list[ViewData]
    comments: list[CommentData]


# =============================================================================
# Render Configuration
# =============================================================================

@dataclass
class RenderConfig:
    """Configuration for rendering reports."""

    # Columns a tab advances, both in source excerpts and in column numbers
    tab_width: int = 4
    # Shown when a cache has no display name; None makes that an error
    unknown_source_name: str | None = "<unknown>"
    empty_label: str = "<empty label>"
    # Wrap report, label and comment messages at this many columns
    message_width: int | None = None


# =============================================================================
# Source Helpers
# =============================================================================

def locate(source: bytes, offset: int, tab_width: int = 4) -> tuple[int, int]:
    """Return the 1-based (line, column) of byte ``offset`` in ``source``.

    Columns count characters; a tab counts ``tab_width`` columns.

    >>> locate(b"ab\\n\\tcd", 5)
    (2, 6)
    """
    offset = min(offset, len(source))
    line = source.count(b"\n", 0, offset) + 1
    line_start = source.rfind(b"\n", 0, offset) + 1
    prefix = source[line_start:offset].decode("utf-8", errors="replace")
    column = 1 + sum(tab_width if char == "\t" else 1 for char in prefix)
    return line, column


def enclosing_window(source: bytes, spans: Iterable[tuple[int, int]]) -> tuple[int, int]:
    """Smallest byte range of whole lines enclosing every span.

    The window starts right after the last line break before the earliest
    span start and ends at the first line break at or after the latest span
    end. Without such a break the span boundary itself is used.
    """
    spans = list(spans)
    lo = min(min(start for start, _ in spans), len(source))
    hi = min(max(end for _, end in spans), len(source))

    before = source.rfind(b"\n", 0, lo)
    start = before + 1 if before != -1 else lo
    after = source.find(b"\n", hi)
    end = after if after != -1 else hi
    return start, max(start, end)


# C0 controls and DEL show as their Unicode control pictures, C1 controls as U+FFFD
_CONTROL_PICTURES = {code: 0x2400 + code for code in range(0x20)}
_CONTROL_PICTURES[0x7F] = 0x2421
_CONTROL_PICTURES.update({code: 0xFFFD for code in range(0x80, 0xA0)})

_LINE_BREAK = re.compile("\r\n|[" + re.escape("".join(sorted(LINE_BREAKS))) + "]")


def _clean_text(text: str, tab_width: int) -> str:
    """Expand tabs and make every other control character visible."""
    return text.replace("\t", " " * tab_width).translate(_CONTROL_PICTURES)


def _clean_line(line: str, tab_width: int) -> str:
    """Flatten ``line`` onto a single row of printable text."""
    line = "".join(" " if char in LINE_BREAKS else char for char in line.rstrip("\r"))
    return _clean_text(line, tab_width)


def _message(runs: Sequence[Styled[str]], config: RenderConfig) -> Element:
    """Lay out message runs, one box per line of the message.

    Line breaks inside a run start a new row; each piece keeps the style
    of the run it came from.
    """
    lines: list[list[Inline]] = [[]]
    for run in runs:
        for i, part in enumerate(_LINE_BREAK.split(run.value)):
            if i:
                lines.append([])
            if part:
                lines[-1].append(Inline(text=_clean_text(part, config.tab_width), style=run.style))

    rows = [Box(children=tuple(line), width=config.message_width) for line in lines]
    if len(rows) == 1:
        return rows[0]
    return VStack(children=tuple(rows))


# =============================================================================
# Report Models
# =============================================================================

class ReportKind(str, Enum):
    """Severity of a report or comment."""

    ERROR = "error"
    WARNING = "warning"
    NOTE = "note"
    HELP = "help"

    @property
    def style(self) -> Style:
        return Style(foreground=NAMED_COLORS[self.value], bold=True)

    def render(self) -> Inline:
        return Inline(text=self.value, style=self.style)


class Label(BaseModel):
    """A span of source text with an optional message."""

    span: tuple[int, int]
    message: tuple[Styled[str], ...] | None = None
    color: Color | None = None

    model_config = {"frozen": True}

    @field_validator("span", mode="before")
    @classmethod
    def _parse_span(cls, value: Any) -> Any:
        if isinstance(value, range):
            return (value.start, value.stop)
        return value

    @field_validator("span")
    @classmethod
    def _check_span(cls, value: tuple[int, int]) -> tuple[int, int]:
        start, end = value
        if start < 0 or end < start:
            msg = f"invalid span {start}..{end}"
            raise ValueError(msg)
        return value

    @field_validator("message", mode="before")
    @classmethod
    def _parse_message(cls, value: Any) -> Any:
        return None if value is None else to_runs(value)

    @field_validator("color", mode="before")
    @classmethod
    def _parse_color(cls, value: Any) -> Color | None:
        return None if value is None else Color.parse(value)

    @property
    def span_repr(self) -> str:
        start, end = self.span
        return f"{{{start}..{end}}}"

    def with_message(self, message: Any) -> Label:
        return self.model_copy(update={"message": to_runs(message)})

    def with_color(self, color: Color | str) -> Label:
        return self.model_copy(update={"color": Color.parse(color)})

    def render(self, config: RenderConfig) -> Element:
        """Render this label as one ``=> message {start..end}`` row."""
        arrow_style = Style(foreground=self.color) if self.color else Style()
        message = self.message or (Styled[str](value=config.empty_label),)
        return HStack(children=(
            Inline(text="=> ", style=arrow_style),
            _message(message, config),
            Inline(text=f" {self.span_repr}"),
        ))


class SourceView(BaseModel):
    """Annotated excerpt of one source."""

    source_id: str
    anchor: int = Field(default=0, ge=0)
    labels: tuple[Label, ...] = ()

    model_config = {"frozen": True}

    def with_label(self, label: Label) -> SourceView:
        return self.model_copy(update={"labels": (*self.labels, label)})

    def with_labels(self, labels: Iterable[Label]) -> SourceView:
        return self.model_copy(update={"labels": (*self.labels, *labels)})

    def display_name(self, cache: Cache, config: RenderConfig) -> str:
        """Resolve the name shown in the view header."""
        name = cache.display_name(self.source_id)
        if name is not None:
            return str(name)
        if config.unknown_source_name is None:
            raise DisplayNameMissing(self.source_id)
        logger.debug("no display name for %s, using placeholder", self.source_id)
        return config.unknown_source_name

    def render(self, cache: Cache, config: RenderConfig) -> Element:
        """Render the header, source excerpt and labels of this view."""
        source = cache.fetch(self.source_id).encode("utf-8")
        name = self.display_name(cache, config)
        line, column = locate(source, self.anchor, config.tab_width)

        lines: list[str] = []
        first_line = line
        if self.labels:
            start, end = enclosing_window(source, (label.span for label in self.labels))
            first_line = source.count(b"\n", 0, start) + 1
            text = source[start:end].decode("utf-8", errors="replace")
            lines = [_clean_line(part, config.tab_width) for part in text.split("\n")]
            logger.debug(
                "%s: window %d..%d covers lines %d-%d",
                self.source_id, start, end, first_line, first_line + len(lines) - 1,
            )

        last_line = first_line + max(len(lines) - 1, 0)
        gutter = len(str(last_line))
        indent = Inline(text=" " * (gutter + 1))

        rows: list[Element] = [
            HStack(children=(
                indent,
                Inline(text="╭─", style=BORDER_STYLE),
                Inline(text=f"[{_clean_line(name, config.tab_width)}:{line}:{column}]"),
            ))
        ]
        if lines:
            numbers = range(first_line, first_line + len(lines))
            rows.append(HStack(children=(
                VStack(children=tuple(
                    Inline(text=str(number).rjust(gutter), style=GUTTER_STYLE) for number in numbers
                )),
                Inline(text=" "),
                VStack(children=tuple(Inline(text="│ ", style=BORDER_STYLE) for _ in lines)),
                VStack(children=tuple(Inline(text=text) for text in lines)),
            )))
        rows.append(HStack(children=(indent, Inline(text="╰─╯", style=BORDER_STYLE))))

        # Labels keep the order the caller gave them, not span order
        for label in self.labels:
            rows.append(label.render(config))

        return VStack(children=tuple(rows))


class Comment(BaseModel):
    """Help or note line shown after the source views."""

    kind: ReportKind
    message: tuple[Styled[str], ...] = ()

    model_config = {"frozen": True}

    @field_validator("message", mode="before")
    @classmethod
    def _parse_message(cls, value: Any) -> Any:
        return to_runs(value)

    def render(self, config: RenderConfig) -> Element:
        return HStack(children=(
            self.kind.render(),
            Inline(text=": "),
            _message(self.message, config),
        ))


class Report(BaseModel):
    """A diagnostic: kind, optional code, message, source views and comments."""

    kind: ReportKind
    code: str | None = None
    message: tuple[Styled[str], ...] = ()
    views: tuple[SourceView, ...] = ()
    comments: tuple[Comment, ...] = ()

    model_config = {"frozen": True}

    @field_validator("code", mode="before")
    @classmethod
    def _parse_code(cls, value: Any) -> Any:
        return None if value is None else str(value)

    @field_validator("message", mode="before")
    @classmethod
    def _parse_message(cls, value: Any) -> Any:
        return to_runs(value)

    def with_code(self, code: Any) -> Report:
        return self.model_copy(update={"code": None if code is None else str(code)})

    def with_message(self, message: Any) -> Report:
        return self.model_copy(update={"message": (*self.message, *to_runs(message))})

    def with_view(self, view: SourceView) -> Report:
        return self.model_copy(update={"views": (*self.views, view)})

    def with_comment(self, kind: ReportKind | str, message: Any) -> Report:
        comment = Comment(kind=kind, message=message)
        return self.model_copy(update={"comments": (*self.comments, comment)})

    def render_title(self, config: RenderConfig) -> Element:
        """Render the ``kind[code]: message`` line."""
        parts: list[Element] = [self.kind.render()]
        if self.code is not None:
            code = _clean_line(self.code, config.tab_width)
            parts.append(Inline(text=f"[{code}]", style=self.kind.style))
        parts.append(Inline(text=": "))
        parts.append(_message(self.message, config))
        return HStack(children=tuple(parts))

    def render(self, cache: Cache, config: RenderConfig | None = None) -> Element:
        """Render this report to an element tree.

        Fetches each view's source from ``cache`` exactly once; a source
        the cache cannot provide raises SourceNotFound.
        """
        config = config or RenderConfig()
        rows: list[Element] = [self.render_title(config)]
        for view in self.views:
            rows.append(view.render(cache, config))
        for comment in self.comments:
            rows.append(comment.render(config))
        return VStack(children=tuple(rows))

    def write(
        self,
        formatter: Formatter,
        cache: Cache,
        stream: TextIO | None = None,
        config: RenderConfig | None = None,
    ) -> None:
        """Write this report through ``formatter`` (to stdout by default)."""
        formatter.write(self, cache, stream or sys.stdout, config)


# =============================================================================
# Report Factory
# =============================================================================

def parse_report(data: ReportData | dict[str, Any]) -> Report:
    """Parse a JSON dict into a Report.

    Raises pydantic.ValidationError when ``data`` is not a valid report.
    """
    return Report.model_validate(data)
