"""Unit tests for content-path wildcard matching."""

from __future__ import annotations

import pytest

from templatecheck.schema.models import EntryKind, RepositoryEntry
from templatecheck.validation.patterns import (
    compile_segment,
    is_repository_path,
    is_wildcard,
    match_entries,
    split_wildcard,
)


def _file(path: str) -> RepositoryEntry:
    return RepositoryEntry(name=path.rsplit("/", 1)[-1], path=path, kind=EntryKind.FILE)


def _dir(path: str) -> RepositoryEntry:
    return RepositoryEntry(name=path.rsplit("/", 1)[-1], path=path, kind=EntryKind.DIRECTORY)


def test_split_wildcard_separates_prefix_and_segment() -> None:
    parsed = split_wildcard("content/posts/*.md")
    assert parsed is not None
    assert parsed.prefix == "content/posts"
    assert parsed.segment == "*.md"
    assert parsed.supported


def test_split_wildcard_returns_none_for_concrete_path() -> None:
    assert split_wildcard("data.json") is None
    assert not is_wildcard("data.json")


def test_wildcard_in_directory_segment_is_unsupported() -> None:
    parsed = split_wildcard("content/*/index.md")
    assert parsed is not None
    assert not parsed.supported
    assert match_entries(parsed, [_file("content/a/index.md")]) == ()


def test_match_entries_keeps_listing_order_and_files_only() -> None:
    listing = [_file("content/b.md"), _dir("content/drafts.md"), _file("content/a.md"), _file("content/c.txt")]
    matched = match_entries("content/*.md", listing)
    assert [entry.path for entry in matched] == ["content/b.md", "content/a.md"]


def test_star_does_not_cross_slash() -> None:
    predicate = compile_segment("*.md")
    assert predicate("post.md")
    assert not predicate("nested/post.md")


def test_literal_parts_are_escaped() -> None:
    predicate = compile_segment("post.*.md")
    assert predicate("post.1.md")
    assert not predicate("postX1.md")


def test_root_level_wildcard_has_empty_prefix() -> None:
    parsed = split_wildcard("*.json")
    assert parsed is not None
    assert parsed.prefix == ""
    assert [entry.path for entry in match_entries(parsed, [_file("data.json"), _file("README.md")])] == ["data.json"]


@pytest.mark.parametrize(
    ("path", "inside"),
    [
        ("data.json", True),
        ("content/*.md", True),
        ("/data.json", True),
        ("notes..md", True),
        ("../outside.json", False),
        ("content/../../x.md", False),
        ("content\\..\\x.md", False),
    ],
)
def test_is_repository_path(path: str, inside: bool) -> None:
    assert is_repository_path(path) is inside
