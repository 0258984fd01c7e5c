"""Parse and validate the template manifest (``.nebula/config.json``).

Parsing only turns text into a draft mapping. ``ManifestValidator`` is the
single place that decides which fields are required and which types are
acceptable, and it produces the typed ``TemplateManifest`` later stages use.
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Any

from templatecheck.schema.models import (
    AssetConfig,
    ContentFileSpec,
    DeductionCode,
    DocumentType,
    SectionName,
    SectionResult,
    Severity,
    TemplateManifest,
    TemplateType,
    ValidationIssue,
)
from templatecheck.validation.constants import (
    DOCUMENT_TYPE_BY_EXTENSION,
    MANIFEST_PATH,
    REQUIRED_MANIFEST_FIELDS,
    SUPPORTED_DOCUMENT_TYPES,
    SUPPORTED_TEMPLATE_TYPES,
)
from templatecheck.validation.patterns import is_repository_path, split_wildcard
from templatecheck.validation.schema_walker import count_fields, validate_schema
from templatecheck.validation.scoring import build_section

logger = logging.getLogger(__name__)

_VERSION_RE = re.compile(
    r"^(0|[1-9]\d*)\.(0|[1-9]\d*)(?:\.(0|[1-9]\d*))?"
    r"(?:-([0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?"
    r"(?:\+([0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?$"
)
_PASCAL_CASE_RE = re.compile(r"^[A-Z][A-Za-z0-9]*$")


@dataclass(frozen=True)
class ManifestDraft:
    """Successfully parsed manifest document, not yet validated."""

    data: Mapping[str, Any]


@dataclass(frozen=True)
class ManifestParseFailure:
    """Manifest text that could not be shaped into a JSON object."""

    reason: str


@dataclass(frozen=True)
class ManifestValidation:
    """Config section plus the typed manifest when one could be built."""

    section: SectionResult
    manifest: TemplateManifest | None
    nested_field_count: int = 0


def parse_manifest_document(text: str) -> ManifestDraft | ManifestParseFailure:
    """Parse manifest text. Never raises for malformed input."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        return ManifestParseFailure(reason=f"line {exc.lineno} column {exc.colno}: {exc.msg}")
    except RecursionError:
        return ManifestParseFailure(reason="document is nested too deeply")
    if not isinstance(data, dict):
        return ManifestParseFailure(reason=f"root must be an object, got {type(data).__name__}")
    return ManifestDraft(data=data)


def infer_document_type(path: str) -> DocumentType | None:
    suffix = PurePosixPath(path).suffix.lower()
    value = DOCUMENT_TYPE_BY_EXTENSION.get(suffix)
    return DocumentType(value) if value else None


def _is_missing(value: Any) -> bool:
    return value is None or value == ""


def _is_version(value: Any) -> bool:
    return isinstance(value, str) and _VERSION_RE.fullmatch(value.strip()) is not None


def _str_items(value: Any) -> tuple[str, ...]:
    if not isinstance(value, list):
        return ()
    return tuple(item for item in value if isinstance(item, str))


class ManifestValidator:
    """Validate a parsed manifest draft into a config section and typed manifest."""

    def validate(self, document: ManifestDraft | ManifestParseFailure) -> ManifestValidation:
        if isinstance(document, ManifestParseFailure):
            logger.debug("manifest parse failed: %s", document.reason)
            issue = ValidationIssue(
                severity=Severity.ERROR,
                message=f"Invalid JSON in {MANIFEST_PATH} ({document.reason})",
                suggestion="Fix JSON syntax errors in the configuration file",
                path=MANIFEST_PATH,
                code=DeductionCode.MANIFEST_PARSE_ERROR,
            )
            return ManifestValidation(section=build_section(SectionName.CONFIG, [issue]), manifest=None)

        data = document.data
        issues: list[ValidationIssue] = []
        issues.extend(self._check_required(data))
        issues.extend(self._check_version(data.get("version")))
        template_type, type_issues = self._check_template_type(data.get("templateType"))
        issues.extend(type_issues)
        content_files, file_issues = self._check_content_files(data.get("contentFiles"))
        issues.extend(file_issues)
        assets, asset_issues = self._check_assets(data.get("assets"))
        issues.extend(asset_issues)
        issues.extend(self._check_metadata(data))

        version = data.get("version")
        name = data.get("name")
        description = data.get("description")
        preview_component = data.get("previewComponent")
        manifest = TemplateManifest(
            version=version if isinstance(version, str) else None,
            template_type=template_type,
            content_files=content_files,
            name=name if isinstance(name, str) else None,
            description=description if isinstance(description, str) else None,
            assets=assets,
            editable_fields=data.get("editableFields"),
            preview_component=preview_component if isinstance(preview_component, str) else None,
        )
        nested = sum(count_fields(spec.schema) for spec in content_files)
        return ManifestValidation(
            section=build_section(SectionName.CONFIG, issues),
            manifest=manifest,
            nested_field_count=nested,
        )

    def validate_text(self, text: str) -> ManifestValidation:
        return self.validate(parse_manifest_document(text))

    def _check_required(self, data: Mapping[str, Any]) -> list[ValidationIssue]:
        return [
            ValidationIssue(
                severity=Severity.ERROR,
                message=f"Missing required config field: {field}",
                suggestion=f'Add the "{field}" field to your template configuration',
                path=field,
                code=DeductionCode.MISSING_REQUIRED_FIELD,
            )
            for field in REQUIRED_MANIFEST_FIELDS
            if _is_missing(data.get(field))
        ]

    def _check_version(self, version: Any) -> list[ValidationIssue]:
        if _is_missing(version) or _is_version(version):
            return []
        return [
            ValidationIssue(
                severity=Severity.WARNING,
                message='Version should follow semantic versioning (e.g., "1.0.0")',
                suggestion="Use semantic versioning format for the version field",
                path="version",
                code=DeductionCode.INVALID_VERSION,
            )
        ]

    def _check_template_type(self, value: Any) -> tuple[TemplateType | None, list[ValidationIssue]]:
        if _is_missing(value):
            return None, []
        if isinstance(value, str) and value in SUPPORTED_TEMPLATE_TYPES:
            return TemplateType(value), []
        return None, [
            ValidationIssue(
                severity=Severity.ERROR,
                message=f"Unsupported template type: {value}",
                suggestion=f"Use one of the supported types: {', '.join(SUPPORTED_TEMPLATE_TYPES)}",
                path="templateType",
                code=DeductionCode.UNSUPPORTED_TEMPLATE_TYPE,
            )
        ]

    def _check_content_files(self, value: Any) -> tuple[tuple[ContentFileSpec, ...], list[ValidationIssue]]:
        if _is_missing(value):
            return (), []
        if not isinstance(value, list):
            return (), [
                ValidationIssue(
                    severity=Severity.ERROR,
                    message="contentFiles must be an array",
                    suggestion="Change contentFiles to an array of content file definitions",
                    path="contentFiles",
                    code=DeductionCode.CONTENT_FILES_NOT_LIST,
                )
            ]
        if not value:
            return (), [
                ValidationIssue(
                    severity=Severity.ERROR,
                    message="contentFiles must list at least one content file",
                    suggestion="Add a content file definition with a path and schema",
                    path="contentFiles",
                    code=DeductionCode.CONTENT_FILES_EMPTY,
                )
            ]
        specs: list[ContentFileSpec] = []
        issues: list[ValidationIssue] = []
        for index, entry in enumerate(value):
            spec, entry_issues = self._check_content_file(index, entry)
            issues.extend(entry_issues)
            if spec is not None:
                specs.append(spec)
        return tuple(specs), issues

    def _check_content_file(self, index: int, entry: Any) -> tuple[ContentFileSpec | None, list[ValidationIssue]]:
        prefix = f"contentFiles[{index}]"
        if not isinstance(entry, Mapping):
            return None, [
                ValidationIssue(
                    severity=Severity.ERROR,
                    message=f"Content file {index} must be an object",
                    suggestion="Describe each content file as an object with path, type and schema",
                    path=prefix,
                    code=DeductionCode.CONTENT_FILE_NOT_OBJECT,
                )
            ]

        issues: list[ValidationIssue] = []
        path = entry.get("path")
        has_path = isinstance(path, str) and bool(path.strip())
        if not has_path:
            issues.append(
                ValidationIssue(
                    severity=Severity.ERROR,
                    message=f"Content file {index} missing required 'path' field",
                    suggestion="Add a path field specifying the file location",
                    path=f"{prefix}.path",
                    code=DeductionCode.CONTENT_FILE_MISSING_PATH,
                )
            )

        schema = entry.get("schema")
        if not isinstance(schema, Mapping):
            message = (
                f"Content file {index} missing required 'schema' field"
                if schema is None
                else f"Content file {index} 'schema' must be an object"
            )
            issues.append(
                ValidationIssue(
                    severity=Severity.ERROR,
                    message=message,
                    suggestion="Add a schema field defining the content structure",
                    path=f"{prefix}.schema",
                    code=DeductionCode.CONTENT_FILE_MISSING_SCHEMA,
                )
            )

        declared = entry.get("type", entry.get("documentType"))
        document_type: DocumentType | None = None
        if declared is None:
            document_type = infer_document_type(path) if has_path else None
        elif isinstance(declared, str) and declared in SUPPORTED_DOCUMENT_TYPES:
            document_type = DocumentType(declared)
        else:
            issues.append(
                ValidationIssue(
                    severity=Severity.WARNING,
                    message=f"Content file {index} has unsupported type: {declared}",
                    suggestion=f"Use supported types: {', '.join(SUPPORTED_DOCUMENT_TYPES)}",
                    path=f"{prefix}.type",
                    code=DeductionCode.UNSUPPORTED_DOCUMENT_TYPE,
                )
            )

        if has_path and not is_repository_path(path):
            issues.append(
                ValidationIssue(
                    severity=Severity.ERROR,
                    message=f"Content file {index} path {path} points outside the repository",
                    suggestion="Use a path relative to the template root without \"..\" segments",
                    path=f"{prefix}.path",
                    code=DeductionCode.PATH_OUTSIDE_REPOSITORY,
                )
            )
        if has_path:
            wildcard = split_wildcard(path)
            if wildcard is not None and not wildcard.supported:
                issues.append(
                    ValidationIssue(
                        severity=Severity.WARNING,
                        message=f"Content file {index} path {path} uses an unsupported wildcard",
                        suggestion="Use a single * in the last path segment, e.g. content/*.md",
                        path=f"{prefix}.path",
                        code=DeductionCode.UNSUPPORTED_WILDCARD,
                    )
                )

        nodes, schema_issues = validate_schema(schema)
        for issue in schema_issues:
            issues.append(
                ValidationIssue(
                    severity=issue.severity,
                    message=f"Content file {index} schema: {issue.message}",
                    suggestion=issue.suggestion,
                    path=f"{prefix}.schema.{issue.path}",
                    code=issue.code,
                )
            )

        if not has_path:
            return None, issues
        return ContentFileSpec(index=index, path=path.strip(), document_type=document_type, schema=nodes), issues

    def _check_assets(self, value: Any) -> tuple[AssetConfig | None, list[ValidationIssue]]:
        if value is None:
            return None, []
        if not isinstance(value, Mapping):
            return None, [
                ValidationIssue(
                    severity=Severity.WARNING,
                    message="assets must be an object",
                    suggestion="Describe assets with allowedTypes, maxSize and paths",
                    path="assets",
                    code=DeductionCode.ASSET_CONFIG_INVALID,
                )
            ]
        issues: list[ValidationIssue] = []
        allowed_types = value.get("allowedTypes")
        if allowed_types is not None and not isinstance(allowed_types, list):
            issues.append(
                ValidationIssue(
                    severity=Severity.WARNING,
                    message="assets.allowedTypes must be an array",
                    suggestion="Provide allowed MIME types as an array",
                    path="assets.allowedTypes",
                    code=DeductionCode.ASSET_CONFIG_INVALID,
                )
            )
        max_size = value.get("maxSize")
        if max_size is not None and not isinstance(max_size, str):
            issues.append(
                ValidationIssue(
                    severity=Severity.WARNING,
                    message='assets.maxSize must be a string (e.g., "5MB")',
                    suggestion="Specify maximum file size with units",
                    path="assets.maxSize",
                    code=DeductionCode.ASSET_CONFIG_INVALID,
                )
            )
        paths = value.get("paths")
        if paths is not None and not isinstance(paths, list):
            issues.append(
                ValidationIssue(
                    severity=Severity.WARNING,
                    message="assets.paths must be an array",
                    suggestion="Provide asset paths as an array of directory paths",
                    path="assets.paths",
                    code=DeductionCode.ASSET_CONFIG_INVALID,
                )
            )
        outside = [item for item in _str_items(paths) if not is_repository_path(item)]
        if outside:
            issues.append(
                ValidationIssue(
                    severity=Severity.WARNING,
                    message=f"Asset paths point outside the repository: {', '.join(outside)}",
                    suggestion="Use asset directories relative to the template root",
                    path="assets.paths",
                    code=DeductionCode.PATH_OUTSIDE_REPOSITORY,
                )
            )
        config = AssetConfig(
            allowed_types=_str_items(allowed_types),
            max_size=max_size if isinstance(max_size, str) else None,
            paths=tuple(item for item in _str_items(paths) if is_repository_path(item)),
        )
        return config, issues

    def _check_metadata(self, data: Mapping[str, Any]) -> list[ValidationIssue]:
        issues: list[ValidationIssue] = []
        name = data.get("name")
        if name is not None and not isinstance(name, str):
            issues.append(
                ValidationIssue(
                    severity=Severity.WARNING,
                    message="Template name should be a string",
                    suggestion="Provide a descriptive name for your template",
                    path="name",
                    code=DeductionCode.METADATA_NOT_STRING,
                )
            )
        description = data.get("description")
        if description is not None and not isinstance(description, str):
            issues.append(
                ValidationIssue(
                    severity=Severity.WARNING,
                    message="Template description should be a string",
                    suggestion="Provide a clear description of your template",
                    path="description",
                    code=DeductionCode.METADATA_NOT_STRING,
                )
            )
        preview_component = data.get("previewComponent")
        if preview_component is not None and not (
            isinstance(preview_component, str) and _PASCAL_CASE_RE.fullmatch(preview_component)
        ):
            issues.append(
                ValidationIssue(
                    severity=Severity.WARNING,
                    message="Preview component name should follow React naming conventions",
                    suggestion='Use PascalCase for component names (e.g., "MyPortfolioTemplate")',
                    path="previewComponent",
                    code=DeductionCode.PREVIEW_COMPONENT_NAMING,
                )
            )
        return issues
