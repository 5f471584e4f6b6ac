"""Tests for source caches."""

from __future__ import annotations

from pathlib import Path

import pytest

from threadline import Cache, FileCache, SourceCache, SourceNotFound


def test_source_cache_fetch_and_name() -> None:
    cache = SourceCache({"a.txt": "alpha\n"})
    cache.add("b.txt", "beta\n")

    assert cache.fetch("a.txt") == "alpha\n"
    assert cache.fetch("b.txt") == "beta\n"
    assert cache.display_name("b.txt") == "b.txt"
    assert cache.display_name("c.txt") is None


def test_source_cache_missing_source() -> None:
    with pytest.raises(SourceNotFound, match="source not found: c.txt") as excinfo:
        SourceCache().fetch("c.txt")
    assert excinfo.value.source_id == "c.txt"


def test_caches_satisfy_protocol(tmp_path: Path) -> None:
    assert isinstance(SourceCache(), Cache)
    assert isinstance(FileCache(tmp_path), Cache)


def test_file_cache_reads_relative_to_root(tmp_path: Path) -> None:
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "main.rs").write_text("fn main() {}\n", encoding="utf-8")
    cache = FileCache(tmp_path)

    assert cache.path_for("src/main.rs") == tmp_path / "src" / "main.rs"
    assert cache.fetch("src/main.rs") == "fn main() {}\n"
    assert cache.display_name("src/main.rs") == "src/main.rs"


def test_file_cache_keeps_loaded_text(tmp_path: Path) -> None:
    path = tmp_path / "a.txt"
    path.write_text("first\n", encoding="utf-8")
    cache = FileCache(tmp_path)

    assert cache.fetch("a.txt") == "first\n"
    path.write_text("second\n", encoding="utf-8")
    assert cache.fetch("a.txt") == "first\n"


def test_file_cache_absolute_ids_ignore_root(tmp_path: Path) -> None:
    path = tmp_path / "abs.txt"
    path.write_text("x\n", encoding="utf-8")

    assert FileCache(tmp_path / "elsewhere").fetch(str(path)) == "x\n"


def test_file_cache_missing_file(tmp_path: Path) -> None:
    with pytest.raises(SourceNotFound) as excinfo:
        FileCache(tmp_path).fetch("nope.txt")
    assert excinfo.value.source_id == "nope.txt"
    assert excinfo.value.reason


def test_file_cache_rejects_invalid_utf8(tmp_path: Path) -> None:
    (tmp_path / "bin.dat").write_bytes(b"\xff\xfe\x00")
    with pytest.raises(SourceNotFound):
        FileCache(tmp_path).fetch("bin.dat")
