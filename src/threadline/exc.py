"""Exceptions raised by threadline.

Everything derives from :exc:`ThreadlineException`. Layout errors signal a
malformed element tree (a bug in whoever built it); the remaining errors
surface problems with report sources or with the output stream.
"""

from __future__ import annotations


class ThreadlineException(Exception):
    """Base exception for all threadline errors."""


class LayoutError(ThreadlineException):
    """Raised when an element tree violates the layout contract."""


class MalformedInline(LayoutError):
    """Raised when inline text contains a line break."""

    def __init__(self, text: str) -> None:
        self.text = text
        super().__init__(f"inline text must not contain a line break: {text!r}")


class SourceNotFound(ThreadlineException):
    """Raised when a cache cannot provide the text of a source."""

    def __init__(self, source_id: str, reason: str | None = None) -> None:
        self.source_id = source_id
        self.reason = reason
        msg = f"source not found: {source_id}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)


class DisplayNameMissing(ThreadlineException):
    """Raised when a source has no display name and no placeholder is configured."""

    def __init__(self, source_id: str) -> None:
        self.source_id = source_id
        super().__init__(f"no display name for source: {source_id}")


class BackendWriteError(ThreadlineException):
    """Raised when writing rendered lines to the output stream fails."""
