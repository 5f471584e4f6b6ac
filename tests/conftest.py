"""Shared fixtures for threadline tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from threadline import Label, Report, SourceCache, SourceView

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
def lib_source() -> str:
    """Rust source whose bytes 218..221 spell ``Lab`` on line 10."""
    return (FIXTURES / "lib.rs.txt").read_text(encoding="utf-8")


@pytest.fixture
def lib_cache(lib_source: str) -> SourceCache:
    return SourceCache({"src/lib.rs": lib_source})


@pytest.fixture
def e0412_report() -> Report:
    return (
        Report(kind="error")
        .with_code("E0412")
        .with_message("cannot find type `Lab`")
        .with_view(
            SourceView(source_id="src/lib.rs", anchor=218).with_label(
                Label(span=(218, 221)).with_message("not found in this scope")
            )
        )
    )
