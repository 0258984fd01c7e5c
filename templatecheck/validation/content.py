"""Content file existence and shape checks."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass, replace
from pathlib import PurePosixPath
from typing import TypeVar

from templatecheck.accessor.base import RepositoryAccessor
from templatecheck.exceptions import EntryNotFoundError
from templatecheck.schema.models import (
    ContentFileSpec,
    DeductionCode,
    DocumentType,
    EntryKind,
    RepositoryEntry,
    SectionName,
    SectionResult,
    Severity,
    TemplateManifest,
    ValidationIssue,
)
from templatecheck.validation.constants import MANIFEST_PATH
from templatecheck.validation.patterns import is_repository_path, match_entries, split_wildcard
from templatecheck.validation.scoring import build_section

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MAX_CONCURRENCY = 8


@dataclass(frozen=True)
class ContentValidation:
    """Content section plus the content files with their resolved entries."""

    section: SectionResult
    content_files: tuple[ContentFileSpec, ...] = ()


async def _gather_all(calls: Iterable[Awaitable[T]]) -> list[T]:
    """Gather in order. On the first failure cancel the rest and wait for them to settle."""
    tasks = [asyncio.ensure_future(call) for call in calls]
    try:
        return list(await asyncio.gather(*tasks))
    finally:
        for task in tasks:
            if not task.done():
                task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)


def _invalid_json(path: str, where: str) -> ValidationIssue:
    return ValidationIssue(
        severity=Severity.ERROR,
        message=f"Invalid JSON in {path}",
        suggestion=f"Fix JSON syntax errors in the content file ({where})",
        path=path,
        code=DeductionCode.INVALID_JSON_CONTENT,
    )


def check_document_shape(path: str, text: str, document_type: DocumentType | None) -> list[ValidationIssue]:
    """Shape-check one document. YAML and undeclared types are accepted as-is."""
    if document_type == DocumentType.JSON:
        try:
            json.loads(text)
        except json.JSONDecodeError as exc:
            return [_invalid_json(path, f"line {exc.lineno}, column {exc.colno}")]
        except RecursionError:
            return [_invalid_json(path, "nested too deeply")]
    elif document_type == DocumentType.MARKDOWN and not text.strip():
        return [
            ValidationIssue(
                severity=Severity.WARNING,
                message=f"Empty markdown file: {path}",
                suggestion="Add content to the markdown file",
                path=path,
                code=DeductionCode.EMPTY_MARKDOWN,
            )
        ]
    return []


class ContentValidator:
    """Resolve declared content files and check each one concurrently.

    Accessor calls are bounded by ``max_concurrency``; results are merged in
    declaration order whatever order they complete in.
    """

    def __init__(self, max_concurrency: int = DEFAULT_MAX_CONCURRENCY) -> None:
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be >= 1")
        self.max_concurrency = max_concurrency

    async def validate(
        self,
        accessor: RepositoryAccessor,
        manifest: TemplateManifest,
        ref: str | None = None,
    ) -> ContentValidation:
        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def guarded(call: Callable[[], Awaitable[T]]) -> T:
            async with semaphore:
                return await call()

        async def read_document(spec: ContentFileSpec, entry: RepositoryEntry) -> list[ValidationIssue]:
            try:
                text = await guarded(lambda: accessor.read_file(entry.path, ref))
            except EntryNotFoundError:
                return [self._not_found(entry.path)]
            return check_document_shape(entry.path, text, spec.document_type)

        async def check_file(spec: ContentFileSpec) -> tuple[ContentFileSpec, list[ValidationIssue]]:
            if not is_repository_path(spec.path):
                # reported by the config stage
                return spec, []
            wildcard = split_wildcard(spec.path)
            if wildcard is None:
                entry = RepositoryEntry(name=PurePosixPath(spec.path).name, path=spec.path, kind=EntryKind.FILE)
                issues = await read_document(spec, entry)
                found = not any(issue.code == DeductionCode.CONTENT_FILE_NOT_FOUND for issue in issues)
                return replace(spec, matches=(entry,) if found else ()), issues
            if not wildcard.supported:
                # reported by the config stage
                return spec, []
            try:
                listing = await guarded(lambda: accessor.list_entries(wildcard.prefix, ref))
            except EntryNotFoundError:
                listing = []
            matches = match_entries(wildcard, listing)
            logger.debug("pattern %s resolved to %d file(s)", spec.path, len(matches))
            if not matches:
                return replace(spec, matches=()), [
                    ValidationIssue(
                        severity=Severity.WARNING,
                        message=f"No files match content pattern {spec.path}",
                        suggestion=f"Add files matching {spec.path} or update the pattern in {MANIFEST_PATH}",
                        path=spec.path,
                        code=DeductionCode.WILDCARD_NO_MATCHES,
                    )
                ]
            per_match = await _gather_all(read_document(spec, entry) for entry in matches)
            return replace(spec, matches=matches), [issue for issues in per_match for issue in issues]

        async def check_asset_dir(path: str) -> list[ValidationIssue]:
            try:
                await guarded(lambda: accessor.list_entries(path, ref))
            except EntryNotFoundError:
                return [
                    ValidationIssue(
                        severity=Severity.SUGGESTION,
                        message=f"Asset directory not found: {path}",
                        suggestion=f"Create directory {path} or update asset paths in config",
                        path=path,
                        code=DeductionCode.ASSET_DIR_NOT_FOUND,
                    )
                ]
            return []

        issues: list[ValidationIssue] = []
        if not manifest.content_files:
            issues.append(
                ValidationIssue(
                    severity=Severity.WARNING,
                    message="No content files to validate",
                    suggestion="Define content files in the template configuration",
                    code=DeductionCode.NO_CONTENT_FILES,
                )
            )

        asset_paths = manifest.assets.paths if manifest.assets is not None else ()
        file_results, asset_results = await _gather_all(
            [
                _gather_all(check_file(spec) for spec in manifest.content_files),
                _gather_all(check_asset_dir(path) for path in asset_paths if is_repository_path(path)),
            ]
        )
        resolved: list[ContentFileSpec] = []
        for spec, spec_issues in file_results:
            resolved.append(spec)
            issues.extend(spec_issues)
        for asset_issues in asset_results:
            issues.extend(asset_issues)
        return ContentValidation(section=build_section(SectionName.CONTENT, issues), content_files=tuple(resolved))

    @staticmethod
    def _not_found(path: str) -> ValidationIssue:
        return ValidationIssue(
            severity=Severity.WARNING,
            message=f"Content file not found: {path}",
            suggestion=f"Create {path} or update the path in {MANIFEST_PATH}",
            path=path,
            code=DeductionCode.CONTENT_FILE_NOT_FOUND,
        )
