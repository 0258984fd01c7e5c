"""Unit tests for the local and in-memory repository accessors."""

from __future__ import annotations

from pathlib import Path

import pytest

from templatecheck.accessor import InMemoryRepositoryAccessor, LocalRepositoryAccessor, RepositoryAccessor
from templatecheck.exceptions import AccessorError, EntryNotFoundError
from templatecheck.schema.models import EntryKind


@pytest.mark.asyncio
async def test_memory_accessor_implies_directories() -> None:
    accessor = InMemoryRepositoryAccessor({"content/posts/a.md": "# A", "README.md": "hi"}, directories=["public"])
    root = await accessor.list_entries()
    assert [(entry.name, entry.kind) for entry in root] == [
        ("README.md", EntryKind.FILE),
        ("content", EntryKind.DIRECTORY),
        ("public", EntryKind.DIRECTORY),
    ]
    nested = await accessor.list_entries("content")
    assert [entry.path for entry in nested] == ["content/posts"]
    assert await accessor.list_entries("public") == []
    assert root[0].size == 2


@pytest.mark.asyncio
async def test_memory_accessor_missing_paths() -> None:
    accessor = InMemoryRepositoryAccessor({"a.txt": "x"})
    with pytest.raises(EntryNotFoundError):
        await accessor.list_entries("nope")
    with pytest.raises(EntryNotFoundError):
        await accessor.read_file("b.txt", "main")
    assert await accessor.read_file("/a.txt") == "x"


def test_accessors_satisfy_protocol(tmp_path: Path) -> None:
    assert isinstance(InMemoryRepositoryAccessor({}), RepositoryAccessor)
    assert isinstance(LocalRepositoryAccessor(tmp_path), RepositoryAccessor)


@pytest.mark.asyncio
async def test_local_accessor_lists_and_reads(write_template) -> None:
    root = write_template({".nebula/config.json": "{}", "README.md": "# Hi", ".git/HEAD": "ref"})
    accessor = LocalRepositoryAccessor(root)
    entries = await accessor.list_entries("")
    assert [(entry.path, entry.kind) for entry in entries] == [
        (".nebula", EntryKind.DIRECTORY),
        ("README.md", EntryKind.FILE),
    ]
    assert [entry.path for entry in await accessor.list_entries(".nebula")] == [".nebula/config.json"]
    assert await accessor.read_file("README.md") == "# Hi"


@pytest.mark.asyncio
async def test_local_accessor_errors(tmp_path: Path) -> None:
    accessor = LocalRepositoryAccessor(tmp_path)
    with pytest.raises(EntryNotFoundError):
        await accessor.read_file("missing.json")
    with pytest.raises(EntryNotFoundError):
        await accessor.list_entries("missing")
    with pytest.raises(EntryNotFoundError):
        await accessor.read_file("../outside.txt")
    with pytest.raises(EntryNotFoundError):
        await accessor.list_entries("..")


def test_local_accessor_requires_directory(tmp_path: Path) -> None:
    target = tmp_path / "file.txt"
    target.write_text("x", encoding="utf-8")
    with pytest.raises(AccessorError):
        LocalRepositoryAccessor(target)
