"""In-memory repository snapshot."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from pathlib import PurePosixPath

from templatecheck.exceptions import EntryNotFoundError
from templatecheck.schema.models import EntryKind, RepositoryEntry


def _normalize(path: str) -> str:
    return path.strip().strip("/")


def _parent(path: str) -> str:
    parent = str(PurePosixPath(path).parent)
    return "" if parent == "." else parent


class InMemoryRepositoryAccessor:
    """Serve a fixed ``path -> text`` mapping. Directories are implied by file paths.

    ``ref`` is accepted and ignored; the snapshot is the revision.
    """

    def __init__(self, files: Mapping[str, str], directories: Iterable[str] = ()) -> None:
        self._files = {_normalize(path): text for path, text in files.items()}
        self._directories: set[str] = set()
        for path in self._files:
            self._add_parents(path)
        for directory in directories:
            directory = _normalize(directory)
            if directory:
                self._directories.add(directory)
                self._add_parents(directory)

    def _add_parents(self, path: str) -> None:
        parent = _parent(path)
        while parent:
            self._directories.add(parent)
            parent = _parent(parent)

    async def list_entries(self, path: str = "", ref: str | None = None) -> list[RepositoryEntry]:
        target = _normalize(path)
        if target and target not in self._directories:
            raise EntryNotFoundError(target, ref)
        entries = [
            RepositoryEntry(name=PurePosixPath(d).name, path=d, kind=EntryKind.DIRECTORY)
            for d in self._directories
            if _parent(d) == target
        ]
        entries.extend(
            RepositoryEntry(
                name=PurePosixPath(f).name,
                path=f,
                kind=EntryKind.FILE,
                size=len(text.encode("utf-8")),
            )
            for f, text in self._files.items()
            if _parent(f) == target
        )
        return sorted(entries, key=lambda entry: entry.name)

    async def read_file(self, path: str, ref: str | None = None) -> str:
        target = _normalize(path)
        if target not in self._files:
            raise EntryNotFoundError(target, ref)
        return self._files[target]
