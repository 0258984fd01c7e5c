"""Repository layout checks: manifest, preview image, readme and conventional directories."""

from __future__ import annotations

import asyncio
import logging
from collections import Counter
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import PurePosixPath

from templatecheck.accessor.base import RepositoryAccessor
from templatecheck.exceptions import EntryNotFoundError
from templatecheck.schema.models import (
    DeductionCode,
    RepositoryEntry,
    SectionName,
    SectionResult,
    Severity,
    ValidationIssue,
)
from templatecheck.validation.constants import (
    BONUS_FILES,
    KNOWN_CONTENT_DIRS,
    MANIFEST_DIR,
    MANIFEST_PATH,
    PREVIEW_PATHS,
    README_NAMES,
    STANDARD_LAYOUT_DIRS,
)
from templatecheck.validation.scoring import build_section

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StructureAnalysis:
    """Structure section plus the facts later stages reuse."""

    section: SectionResult
    has_required_files: bool
    has_manifest_dir: bool
    has_preview_image: bool
    has_readme: bool
    root_entries: tuple[RepositoryEntry, ...]
    listings: Mapping[str, tuple[RepositoryEntry, ...]] = field(default_factory=dict)
    file_types: Mapping[str, int] = field(default_factory=dict)
    bonus_files: tuple[str, ...] = ()

    def listing(self, directory: str) -> tuple[RepositoryEntry, ...]:
        return self.listings.get(directory, ())

    def all_entries(self) -> tuple[RepositoryEntry, ...]:
        nested = tuple(entry for directory in sorted(self.listings) for entry in self.listings[directory])
        return self.root_entries + nested


class StructureAnalyzer:
    """Inspect the root listing and the known content-holding directories."""

    async def collect(
        self,
        accessor: RepositoryAccessor,
        ref: str | None = None,
    ) -> tuple[list[RepositoryEntry], dict[str, list[RepositoryEntry]]]:
        """Fetch the root listing and every known directory present at the root."""
        root_entries = await accessor.list_entries("", ref)
        present = [
            entry.name for entry in root_entries if entry.is_directory and entry.name in KNOWN_CONTENT_DIRS
        ]

        async def _list(directory: str) -> list[RepositoryEntry]:
            try:
                return await accessor.list_entries(directory, ref)
            except EntryNotFoundError:
                logger.debug("known directory vanished during listing: %s", directory)
                return []

        results = await asyncio.gather(*(_list(directory) for directory in present))
        return root_entries, dict(zip(present, results))

    async def run(self, accessor: RepositoryAccessor, ref: str | None = None) -> StructureAnalysis:
        root_entries, listings = await self.collect(accessor, ref)
        return self.analyze(root_entries, listings)

    def analyze(
        self,
        root_entries: Sequence[RepositoryEntry],
        listings: Mapping[str, Sequence[RepositoryEntry]] | None = None,
    ) -> StructureAnalysis:
        listings = listings or {}
        frozen_listings = {directory: tuple(entries) for directory, entries in listings.items()}
        nebula_entries = frozen_listings.get(MANIFEST_DIR, ())
        all_paths = {entry.path for entry in root_entries} | {entry.path for entry in nebula_entries}
        root_dirs = {entry.name for entry in root_entries if entry.is_directory}
        root_files = {entry.name for entry in root_entries if entry.is_file}

        has_manifest = MANIFEST_PATH in all_paths
        has_manifest_dir = MANIFEST_DIR in root_dirs
        has_preview = any(path in all_paths for path in PREVIEW_PATHS)
        has_readme = any(name.lower() in README_NAMES for name in root_files)

        issues: list[ValidationIssue] = []
        if not has_manifest:
            issues.append(
                ValidationIssue(
                    severity=Severity.ERROR,
                    message=f"Missing required {MANIFEST_PATH} file",
                    suggestion=f"Create a {MANIFEST_PATH} file with template configuration",
                    path=MANIFEST_PATH,
                    code=DeductionCode.MISSING_MANIFEST,
                )
            )
        if not has_manifest_dir:
            issues.append(
                ValidationIssue(
                    severity=Severity.ERROR,
                    message=f"Missing {MANIFEST_DIR} directory",
                    suggestion=f"Create a {MANIFEST_DIR} directory for template configuration files",
                    path=MANIFEST_DIR,
                    code=DeductionCode.MISSING_MANIFEST_DIR,
                )
            )
        if not has_preview:
            issues.append(
                ValidationIssue(
                    severity=Severity.WARNING,
                    message="Missing template preview image",
                    suggestion=f"Add a preview.png file to {MANIFEST_DIR}/ directory (recommended size: 800x600px)",
                    code=DeductionCode.MISSING_PREVIEW,
                )
            )
        if not has_readme:
            issues.append(
                ValidationIssue(
                    severity=Severity.WARNING,
                    message="Missing README file",
                    suggestion="Add a README.md file with template documentation and usage instructions",
                    code=DeductionCode.MISSING_README,
                )
            )
        if "package.json" not in root_files:
            issues.append(
                ValidationIssue(
                    severity=Severity.SUGGESTION,
                    message="No package.json found",
                    suggestion="Consider adding package.json if template has JavaScript dependencies",
                    code=DeductionCode.NO_PACKAGE_JSON,
                )
            )
        if not any(directory in root_dirs for directory in STANDARD_LAYOUT_DIRS):
            issues.append(
                ValidationIssue(
                    severity=Severity.SUGGESTION,
                    message="Consider organizing files in standard directories",
                    suggestion='Use directories like "components/" for React components and "public/" for static assets',
                    code=DeductionCode.NONSTANDARD_LAYOUT,
                )
            )

        file_types = Counter(
            PurePosixPath(entry.name).suffix.lower() or "(none)"
            for entry in (*root_entries, *(e for entries in frozen_listings.values() for e in entries))
            if entry.is_file
        )
        return StructureAnalysis(
            section=build_section(SectionName.STRUCTURE, issues),
            has_required_files=has_manifest,
            has_manifest_dir=has_manifest_dir,
            has_preview_image=has_preview,
            has_readme=has_readme,
            root_entries=tuple(root_entries),
            listings=frozen_listings,
            file_types=dict(sorted(file_types.items())),
            bonus_files=tuple(name for name in BONUS_FILES if name in root_files),
        )
