"""Wildcard resolution for content-file paths such as ``content/*.md``."""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from templatecheck.schema.models import RepositoryEntry

WILDCARD = "*"


@dataclass(frozen=True)
class WildcardPattern:
    """A wildcard path split into its fixed directory prefix and final segment."""

    pattern: str
    prefix: str
    segment: str
    supported: bool = True


def is_wildcard(path: str) -> bool:
    return WILDCARD in path


def split_wildcard(pattern: str) -> WildcardPattern | None:
    """Split ``pattern`` at its last ``/``. Return None when it has no wildcard.

    Only a wildcard in the final segment is resolvable; anything else is
    returned with ``supported=False``.
    """
    if not is_wildcard(pattern):
        return None
    prefix, _, segment = pattern.rpartition("/")
    supported = WILDCARD in segment and WILDCARD not in prefix
    return WildcardPattern(pattern=pattern, prefix=prefix, segment=segment, supported=supported)


def is_repository_path(path: str) -> bool:
    """False when any segment of ``path`` climbs out with ``..``."""
    return ".." not in re.split(r"[\\/]", path.strip())


def compile_segment(segment: str) -> Callable[[str], bool]:
    """Build a predicate matching one path segment; ``*`` never crosses ``/``."""
    parts = [re.escape(part) for part in segment.split(WILDCARD)]
    regex = re.compile("[^/]*".join(parts))
    return lambda name: regex.fullmatch(name) is not None


def match_entries(pattern: str | WildcardPattern, entries: Iterable[RepositoryEntry]) -> tuple[RepositoryEntry, ...]:
    """Return file entries whose name matches the pattern's last segment, in listing order."""
    parsed = split_wildcard(pattern) if isinstance(pattern, str) else pattern
    if parsed is None:
        target = pattern if isinstance(pattern, str) else pattern.pattern
        return tuple(entry for entry in entries if entry.is_file and entry.path == target)
    if not parsed.supported:
        return ()
    predicate = compile_segment(parsed.segment)
    return tuple(entry for entry in entries if entry.is_file and predicate(entry.name))
