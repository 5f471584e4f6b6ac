"""Output formatters for rendering element trees to lines of text.

The Formatter base class holds the render pass: it walks an element tree,
places every node on a grid of rows sized by ``measure`` and asks two
hooks, ``begin_style`` and ``end_style``, for the markers that bracket each
styled run. PlainFormatter keeps the no-op hooks; ANSIFormatter emits SGR
escape sequences.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, TextIO

from .blocks import Box, Element, HStack, Inline, VStack
from .exc import BackendWriteError, LayoutError
from .layout import display_width, flow, measure
from .models import RenderConfig
from .style import Style

if TYPE_CHECKING:
    from .cache import Cache
    from .models import Report

logger = logging.getLogger(__name__)


class Canvas:
    """Rows of rendered fragments.

    Each row tracks its display width separately from its fragments, so
    style markers never count towards the width of a row.
    """

    def __init__(self, height: int) -> None:
        self.rows: list[list[str]] = [[] for _ in range(height)]
        self.widths: list[int] = [0] * height

    def max_width(self, start: int, stop: int) -> int:
        return max(self.widths[start:stop], default=0)

    def write(self, row: int, text: str, width: int) -> None:
        self.rows[row].append(text)
        self.widths[row] += width

    def mark(self, row: int, marker: str) -> None:
        if marker:
            self.rows[row].append(marker)

    def lines(self) -> list[str]:
        return ["".join(fragments) for fragments in self.rows]


class Formatter:
    """Base class for output formatters.

    Subclasses change how styles are marked in the output by overriding
    ``begin_style`` and ``end_style``; placement and wrapping never depend
    on the output encoding.
    """

    def begin_style(self, style: Style) -> str:
        """Marker written before a run of text in ``style``."""
        return ""

    def end_style(self, style: Style) -> str:
        """Marker written after a run of text in ``style``."""
        return ""

    def render(self, element: Element) -> list[str]:
        """Render ``element`` to exactly ``measure(element)`` rows and columns."""
        width, height = measure(element)
        canvas = Canvas(height)
        self.render_element(canvas, 0, height, element)
        self._pad(canvas, 0, height, width, element.style)
        return canvas.lines()

    def format(self, element: Element) -> str:
        """Render ``element`` into a single newline-joined string."""
        return "\n".join(self.render(element))

    def write(
        self,
        report: Report,
        cache: Cache,
        stream: TextIO,
        config: RenderConfig | None = None,
    ) -> None:
        """Render ``report`` and write it to ``stream``, one line at a time.

        The whole report is laid out before anything is written, so a
        missing source never leaves a partial report behind.
        """
        element = report.render(cache, config or RenderConfig())
        lines = self.render(element)
        logger.debug("writing %d lines for %s report", len(lines), report.kind.value)
        try:
            for line in lines:
                stream.write(line + "\n")
        except OSError as e:
            raise BackendWriteError(f"failed to write report: {e}") from e

    def render_element(self, canvas: Canvas, start: int, stop: int, element: Element) -> None:
        """Render ``element`` into rows ``start`` to ``stop`` of ``canvas``."""
        handler = self._element_handlers.get(type(element))
        if handler is None:
            msg = f"cannot render {type(element).__name__}"
            raise LayoutError(msg)
        handler(self, canvas, start, stop, element)

    def _emit(self, canvas: Canvas, row: int, text: str, style: Style) -> None:
        if not text:
            return
        canvas.mark(row, self.begin_style(style))
        canvas.write(row, text, display_width(text))
        canvas.mark(row, self.end_style(style))

    def _pad(self, canvas: Canvas, start: int, stop: int, column: int, style: Style) -> None:
        """Right-pad rows ``start`` to ``stop`` with spaces up to ``column``."""
        for row in range(start, stop):
            gap = column - canvas.widths[row]
            if gap > 0:
                self._emit(canvas, row, " " * gap, style)

    def _render_vstack(self, canvas: Canvas, start: int, stop: int, element: VStack) -> None:
        row = start
        for child in element.children:
            _, height = measure(child)
            self.render_element(canvas, row, row + height, child)
            row += height

    def _render_hstack(self, canvas: Canvas, start: int, stop: int, element: HStack) -> None:
        column = canvas.max_width(start, stop)
        for child in element.children:
            self._pad(canvas, start, stop, column, element.style)
            self.render_element(canvas, start, stop, child)
            column += measure(child)[0]

    def _render_box(self, canvas: Canvas, start: int, stop: int, element: Box) -> None:
        base = canvas.max_width(start, stop)
        self._pad(canvas, start, stop, base, element.style)
        for child, row, column in flow(element).placements:
            _, height = measure(child)
            first = start + row
            self._pad(canvas, first, first + height, base + column, element.style)
            self.render_element(canvas, first, first + height, child)

    def _render_inline(self, canvas: Canvas, start: int, stop: int, element: Inline) -> None:
        self._emit(canvas, start, element.text, element.style)

    _element_handlers: dict[type, Callable[..., Any]] = {
        VStack: _render_vstack,
        HStack: _render_hstack,
        Box: _render_box,
        Inline: _render_inline,
    }


class ANSIFormatter(Formatter):
    """Format output with ANSI terminal colors."""

    # ANSI codes
    RESET = "\033[0m"
    BOLD = "\033[1m"
    ITALIC = "\033[3m"

    def _color(self, layer: int, style_color: tuple[int, int, int]) -> str:
        r, g, b = style_color
        return f"\033[{layer};2;{r};{g};{b}m"

    def begin_style(self, style: Style) -> str:
        if style.is_plain:
            return ""
        codes = []
        if style.bold:
            codes.append(self.BOLD)
        if style.italic:
            codes.append(self.ITALIC)
        if style.foreground is not None:
            codes.append(self._color(38, style.foreground))
        if style.background is not None:
            codes.append(self._color(48, style.background))
        return "".join(codes)

    def end_style(self, style: Style) -> str:
        return "" if style.is_plain else self.RESET


class PlainFormatter(Formatter):
    """Format output as plain text (no styling)."""
