"""Repository accessor contract consumed by the validation pipeline."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from templatecheck.schema.models import RepositoryEntry


@runtime_checkable
class RepositoryAccessor(Protocol):
    """Read-only view of a repository tree at an optional revision.

    Implementations raise ``EntryNotFoundError`` when a path does not exist and
    ``AccessorError`` for every other failure. Caching and retry, when wanted,
    belong here rather than in the pipeline.
    """

    async def list_entries(self, path: str = "", ref: str | None = None) -> list[RepositoryEntry]:
        """List the direct children of ``path`` ("" is the repository root)."""
        ...

    async def read_file(self, path: str, ref: str | None = None) -> str:
        """Return the text content of the file at ``path``."""
        ...
