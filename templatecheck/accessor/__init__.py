"""Repository accessors: the pipeline's only window onto template files."""

from templatecheck.accessor.base import RepositoryAccessor
from templatecheck.accessor.github import GitHubRepositoryAccessor
from templatecheck.accessor.local import LocalRepositoryAccessor
from templatecheck.accessor.memory import InMemoryRepositoryAccessor

__all__ = [
    "GitHubRepositoryAccessor",
    "InMemoryRepositoryAccessor",
    "LocalRepositoryAccessor",
    "RepositoryAccessor",
]
