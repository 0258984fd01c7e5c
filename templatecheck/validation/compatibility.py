"""Platform compatibility checks that do not depend on content schemas."""

from __future__ import annotations

import re
from collections.abc import Sequence

from templatecheck.schema.models import (
    DeductionCode,
    RepositoryEntry,
    SectionName,
    SectionResult,
    Severity,
    TemplateManifest,
    ValidationIssue,
)
from templatecheck.validation.constants import UI_COMPONENT_EXTENSIONS
from templatecheck.validation.scoring import build_section

_FILE_NAME_RE = re.compile(r"^[A-Za-z0-9._-]+$")


def check_compatibility(
    root_entries: Sequence[RepositoryEntry],
    component_entries: Sequence[RepositoryEntry],
    manifest: TemplateManifest | None,
) -> SectionResult:
    issues: list[ValidationIssue] = []

    has_components = any(
        entry.is_file and entry.name.lower().endswith(UI_COMPONENT_EXTENSIONS)
        for entry in (*root_entries, *component_entries)
    )
    if not has_components:
        issues.append(
            ValidationIssue(
                severity=Severity.SUGGESTION,
                message="No React component files found",
                suggestion="Add React components to render your template",
                code=DeductionCode.NO_UI_COMPONENTS,
            )
        )

    bad_names = [entry.name for entry in root_entries if not _FILE_NAME_RE.fullmatch(entry.name)]
    if bad_names:
        issues.append(
            ValidationIssue(
                severity=Severity.WARNING,
                message=f"Some files have invalid names: {', '.join(bad_names[:5])}",
                suggestion="Use alphanumeric characters, dots, hyphens, and underscores in file names",
                code=DeductionCode.INVALID_FILE_NAMES,
            )
        )

    if manifest is not None:
        editable = manifest.editable_fields
        if editable is not None and not isinstance(editable, list):
            issues.append(
                ValidationIssue(
                    severity=Severity.WARNING,
                    message="editableFields must be an array",
                    suggestion="List the editable field paths as an array of strings",
                    path="editableFields",
                    code=DeductionCode.EDITABLE_FIELDS_INVALID,
                )
            )
        elif isinstance(editable, list) and not editable:
            issues.append(
                ValidationIssue(
                    severity=Severity.SUGGESTION,
                    message="No editable fields specified",
                    suggestion="Define which fields users can edit in the web interface",
                    path="editableFields",
                    code=DeductionCode.NO_EDITABLE_FIELDS,
                )
            )
        if not manifest.preview_component:
            issues.append(
                ValidationIssue(
                    severity=Severity.SUGGESTION,
                    message="No preview component specified",
                    suggestion="Specify a React component for template preview",
                    path="previewComponent",
                    code=DeductionCode.NO_PREVIEW_COMPONENT,
                )
            )

    return build_section(SectionName.COMPATIBILITY, issues)
