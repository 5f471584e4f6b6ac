"""Source caches.

A cache hands the translator the text of a source and the name to show for
it. SourceCache serves sources held in memory; FileCache reads files from
disk on first use and keeps them.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Protocol, runtime_checkable

from .exc import SourceNotFound

logger = logging.getLogger(__name__)


@runtime_checkable
class Cache(Protocol):
    """Where report sources come from."""

    def fetch(self, source_id: str) -> str:
        """Return the full text of ``source_id``, raising SourceNotFound."""
        ...

    def display_name(self, source_id: str) -> str | None:
        """Return the name shown for ``source_id``, if it has one."""
        ...


class SourceCache:
    """In-memory cache of source texts keyed by id."""

    def __init__(self, sources: Mapping[str, str] | Iterable[tuple[str, str]] = ()) -> None:
        self.sources: dict[str, str] = dict(sources)

    def add(self, source_id: str, text: str) -> None:
        self.sources[source_id] = text

    def fetch(self, source_id: str) -> str:
        try:
            return self.sources[source_id]
        except KeyError:
            raise SourceNotFound(source_id) from None

    def display_name(self, source_id: str) -> str | None:
        return source_id if source_id in self.sources else None


class FileCache:
    """Cache that loads sources from files, relative to ``root`` if given."""

    def __init__(self, root: Path | str | None = None) -> None:
        self.root = Path(root) if root is not None else None
        self.sources: dict[str, str] = {}

    def path_for(self, source_id: str) -> Path:
        path = Path(source_id)
        if self.root is not None and not path.is_absolute():
            path = self.root / path
        return path

    def fetch(self, source_id: str) -> str:
        if source_id in self.sources:
            return self.sources[source_id]

        path = self.path_for(source_id)
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise SourceNotFound(source_id, str(e)) from e

        logger.debug("loaded %s (%d characters)", path, len(text))
        self.sources[source_id] = text
        return text

    def display_name(self, source_id: str) -> str | None:
        return source_id
