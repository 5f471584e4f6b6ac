"""Layout elements for rendering reports.

This module defines the element tree the renderer works on: vertical and
horizontal stacks, width-bounded boxes and inline text leaves. Every node
carries its own Style.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .exc import MalformedInline
from .style import Style

# Everything str.splitlines() treats as a line boundary
LINE_BREAKS = frozenset("\n\r\x0b\x0c\x1c\x1d\x1e\x85\u2028\u2029")


@dataclass(frozen=True)
class Element:
    """Base class for layout nodes."""

    style: Style = field(default_factory=Style)


@dataclass(frozen=True)
class VStack(Element):
    """Children laid out top to bottom."""

    children: tuple[Element, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "children", tuple(self.children))


@dataclass(frozen=True)
class HStack(Element):
    """Children laid out left to right."""

    children: tuple[Element, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "children", tuple(self.children))


@dataclass(frozen=True)
class Box(Element):
    """Flow container, optionally bounded to ``width`` display columns.

    Inline children wrap at the right edge; any other child is kept whole
    and moves to a new row when it does not fit.
    """

    children: tuple[Element, ...] = ()
    width: int | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "children", tuple(self.children))
        if self.width is not None and self.width <= 0:
            msg = f"box width must be positive, got {self.width}"
            raise ValueError(msg)


@dataclass(frozen=True)
class Inline(Element):
    """A single line of text."""

    text: str = ""

    def __post_init__(self) -> None:
        if any(char in LINE_BREAKS for char in self.text):
            raise MalformedInline(self.text)


# Type alias for any concrete element
AnyElement = VStack | HStack | Box | Inline


def vstack(*children: Element, style: Style | None = None) -> VStack:
    return VStack(children=children, style=style or Style())


def hstack(*children: Element, style: Style | None = None) -> HStack:
    return HStack(children=children, style=style or Style())


def box(*children: Element, width: int | None = None, style: Style | None = None) -> Box:
    return Box(children=children, width=width, style=style or Style())


def inline(text: str, style: Style | None = None) -> Inline:
    return Inline(text=text, style=style or Style())
