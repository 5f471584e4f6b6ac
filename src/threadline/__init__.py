"""
Render compiler-style diagnostic reports as text.

Architecture:
- Pydantic models describe reports, source views and labels
- Reports render to an element tree (stacks, boxes and inline text)
- The layout engine measures the tree in terminal display columns
- Formatters paint the tree line by line (ANSI, Plain)
"""

from __future__ import annotations

# Style model
from .style import (
    NAMED_COLORS,
    Color,
    Style,
    Styled,
    styled,
)

# Element tree
from .blocks import (
    AnyElement,
    Box,
    Element,
    HStack,
    Inline,
    VStack,
    box,
    hstack,
    inline,
    vstack,
)

# Layout
from .layout import (
    chunks,
    display_width,
    flow,
    measure,
)

# Exceptions
from .exc import (
    BackendWriteError,
    DisplayNameMissing,
    LayoutError,
    MalformedInline,
    SourceNotFound,
    ThreadlineException,
)

# Caches
from .cache import (
    Cache,
    FileCache,
    SourceCache,
)

# Models, TypedDicts, and parse_report
from .models import (
    # TypedDicts
    CommentData,
    LabelData,
    ReportData,
    RunData,
    StyleData,
    ViewData,
    # Models
    Comment,
    Label,
    Report,
    ReportKind,
    SourceView,
    # Config
    RenderConfig,
    # Helpers
    enclosing_window,
    locate,
    parse_report,
)

# Formatters
from .formatters import (
    ANSIFormatter,
    Formatter,
    PlainFormatter,
)

# Stream processing
from .stream import process_stream

__all__ = [
    # Style
    "NAMED_COLORS",
    "Color",
    "Style",
    "Styled",
    "styled",
    # Elements
    "AnyElement",
    "Box",
    "Element",
    "HStack",
    "Inline",
    "VStack",
    "box",
    "hstack",
    "inline",
    "vstack",
    # Layout
    "chunks",
    "display_width",
    "flow",
    "measure",
    # Exceptions
    "BackendWriteError",
    "DisplayNameMissing",
    "LayoutError",
    "MalformedInline",
    "SourceNotFound",
    "ThreadlineException",
    # Caches
    "Cache",
    "FileCache",
    "SourceCache",
    # TypedDicts
    "CommentData",
    "LabelData",
    "ReportData",
    "RunData",
    "StyleData",
    "ViewData",
    # Models
    "Comment",
    "Label",
    "Report",
    "ReportKind",
    "SourceView",
    "RenderConfig",
    "enclosing_window",
    "locate",
    "parse_report",
    # Formatters
    "ANSIFormatter",
    "Formatter",
    "PlainFormatter",
    # Stream processing
    "process_stream",
]
