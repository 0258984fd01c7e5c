"""Accessor over a checked-out working tree."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from templatecheck.exceptions import AccessorError, EntryNotFoundError
from templatecheck.schema.models import EntryKind, RepositoryEntry

logger = logging.getLogger(__name__)

IGNORED_NAMES = frozenset({".git"})


class LocalRepositoryAccessor:
    """Read a template from the local filesystem. ``ref`` is ignored."""

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root).resolve()
        if not self.root.is_dir():
            raise AccessorError(f"repository root is not a directory: {self.root}", path=str(root))

    def _resolve(self, path: str) -> Path:
        relative = path.strip().strip("/")
        target = (self.root / relative).resolve() if relative else self.root
        if target != self.root and self.root not in target.parents:
            # nothing outside the checkout belongs to the template
            logger.debug("path escapes repository root: %s", path)
            raise EntryNotFoundError(path)
        return target

    def _relative(self, target: Path) -> str:
        return target.relative_to(self.root).as_posix()

    def _list_sync(self, path: str, ref: str | None) -> list[RepositoryEntry]:
        target = self._resolve(path)
        if not target.is_dir():
            raise EntryNotFoundError(path, ref)
        try:
            children = sorted(target.iterdir(), key=lambda child: child.name)
        except OSError as exc:
            raise AccessorError(f"cannot list {path or '.'}: {exc}", path=path) from exc
        entries: list[RepositoryEntry] = []
        for child in children:
            if child.name in IGNORED_NAMES:
                continue
            if child.is_dir():
                entries.append(RepositoryEntry(name=child.name, path=self._relative(child), kind=EntryKind.DIRECTORY))
            elif child.is_file():
                entries.append(
                    RepositoryEntry(
                        name=child.name,
                        path=self._relative(child),
                        kind=EntryKind.FILE,
                        size=child.stat().st_size,
                    )
                )
        return entries

    def _read_sync(self, path: str, ref: str | None) -> str:
        target = self._resolve(path)
        if not target.is_file():
            raise EntryNotFoundError(path, ref)
        try:
            return target.read_text(encoding="utf-8", errors="replace")
        except OSError as exc:
            raise AccessorError(f"cannot read {path}: {exc}", path=path) from exc

    async def list_entries(self, path: str = "", ref: str | None = None) -> list[RepositoryEntry]:
        return await asyncio.to_thread(self._list_sync, path, ref)

    async def read_file(self, path: str, ref: str | None = None) -> str:
        return await asyncio.to_thread(self._read_sync, path, ref)
