"""Core data models for template validation and scoring."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any


class EntryKind(str, Enum):
    """Kind of a repository tree entry."""

    FILE = "file"
    DIRECTORY = "directory"


class Severity(str, Enum):
    """Severity of one validation issue."""

    ERROR = "error"
    WARNING = "warning"
    SUGGESTION = "suggestion"


class SectionName(str, Enum):
    """Weighted validation stages, in pipeline order."""

    STRUCTURE = "structure"
    CONFIG = "config"
    CONTENT = "content"
    COMPATIBILITY = "compatibility"


class FieldKind(str, Enum):
    """Editable-data kinds a schema field may declare."""

    STRING = "string"
    TEXT = "text"
    MARKDOWN = "markdown"
    NUMBER = "number"
    BOOLEAN = "boolean"
    SELECT = "select"
    ARRAY = "array"
    OBJECT = "object"
    IMAGE = "image"
    DATE = "date"
    URL = "url"
    EMAIL = "email"


class TemplateType(str, Enum):
    """Template flavours accepted by the platform."""

    JSON = "json"
    MARKDOWN = "markdown"
    HYBRID = "hybrid"


class DocumentType(str, Enum):
    """Shapes a declared content document may take."""

    JSON = "json"
    MARKDOWN = "markdown"
    YAML = "yaml"


class Complexity(str, Enum):
    SIMPLE = "simple"
    MODERATE = "moderate"
    COMPLEX = "complex"


class Grade(str, Enum):
    A = "A"
    B = "B"
    C = "C"
    D = "D"
    F = "F"


class DeductionCode(str, Enum):
    """Identifies which rule produced an issue; keys the deduction table."""

    # structure
    MISSING_MANIFEST = "missing_manifest"
    MISSING_MANIFEST_DIR = "missing_manifest_dir"
    MISSING_PREVIEW = "missing_preview"
    MISSING_README = "missing_readme"
    NO_PACKAGE_JSON = "no_package_json"
    NONSTANDARD_LAYOUT = "nonstandard_layout"
    # config
    MANIFEST_PARSE_ERROR = "manifest_parse_error"
    MISSING_REQUIRED_FIELD = "missing_required_field"
    UNSUPPORTED_TEMPLATE_TYPE = "unsupported_template_type"
    INVALID_VERSION = "invalid_version"
    CONTENT_FILES_NOT_LIST = "content_files_not_list"
    CONTENT_FILES_EMPTY = "content_files_empty"
    CONTENT_FILE_NOT_OBJECT = "content_file_not_object"
    CONTENT_FILE_MISSING_PATH = "content_file_missing_path"
    CONTENT_FILE_MISSING_SCHEMA = "content_file_missing_schema"
    UNSUPPORTED_DOCUMENT_TYPE = "unsupported_document_type"
    UNSUPPORTED_WILDCARD = "unsupported_wildcard"
    SCHEMA_ERROR = "schema_error"
    SCHEMA_WARNING = "schema_warning"
    SCHEMA_SUGGESTION = "schema_suggestion"
    ASSET_CONFIG_INVALID = "asset_config_invalid"
    METADATA_NOT_STRING = "metadata_not_string"
    PREVIEW_COMPONENT_NAMING = "preview_component_naming"
    PATH_OUTSIDE_REPOSITORY = "path_outside_repository"
    # content
    NO_CONTENT_FILES = "no_content_files"
    WILDCARD_NO_MATCHES = "wildcard_no_matches"
    CONTENT_FILE_NOT_FOUND = "content_file_not_found"
    INVALID_JSON_CONTENT = "invalid_json_content"
    EMPTY_MARKDOWN = "empty_markdown"
    ASSET_DIR_NOT_FOUND = "asset_dir_not_found"
    # compatibility
    NO_UI_COMPONENTS = "no_ui_components"
    INVALID_FILE_NAMES = "invalid_file_names"
    EDITABLE_FIELDS_INVALID = "editable_fields_invalid"
    NO_EDITABLE_FIELDS = "no_editable_fields"
    NO_PREVIEW_COMPONENT = "no_preview_component"


@dataclass(frozen=True)
class RepositoryEntry:
    """One file or directory reported by a repository accessor."""

    name: str
    path: str
    kind: EntryKind
    size: int | None = None
    revision_id: str | None = None

    @property
    def is_file(self) -> bool:
        return self.kind == EntryKind.FILE

    @property
    def is_directory(self) -> bool:
        return self.kind == EntryKind.DIRECTORY


@dataclass(frozen=True)
class ValidationIssue:
    """One finding. Severity is fixed at creation."""

    severity: Severity
    message: str
    suggestion: str
    path: str | None = None
    code: DeductionCode | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "severity": self.severity.value,
            "message": self.message,
            "suggestion": self.suggestion,
        }
        if self.path is not None:
            data["path"] = self.path
        if self.code is not None:
            data["code"] = self.code.value
        return data


@dataclass(frozen=True)
class SectionResult:
    """Outcome of one pipeline stage."""

    name: SectionName
    valid: bool
    score: int
    max_score: int
    issues: tuple[ValidationIssue, ...] = ()

    def by_severity(self, severity: Severity) -> tuple[ValidationIssue, ...]:
        return tuple(issue for issue in self.issues if issue.severity == severity)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name.value,
            "valid": self.valid,
            "score": self.score,
            "max_score": self.max_score,
            "issues": [issue.to_dict() for issue in self.issues],
        }


# Field schema sum type. Every node knows its qualified path and depth;
# object and array variants own their children, so the tree has no back-references.


@dataclass(frozen=True)
class FieldSchema:
    """Common part of every schema node."""

    name: str
    path: str
    depth: int
    label: Any = None
    required: Any = None
    constraints: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))
    is_item: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.constraints, MappingProxyType):
            object.__setattr__(self, "constraints", MappingProxyType(dict(self.constraints)))


@dataclass(frozen=True)
class ScalarField(FieldSchema):
    """Leaf field of any non-container kind other than select."""

    field_kind: FieldKind = FieldKind.STRING
    implicit_kind: bool = False

    @property
    def kind(self) -> FieldKind:
        return self.field_kind


@dataclass(frozen=True)
class SelectField(FieldSchema):
    """Field whose value is picked from a list of options."""

    options: Any = None

    @property
    def kind(self) -> FieldKind:
        return FieldKind.SELECT


@dataclass(frozen=True)
class ObjectField(FieldSchema):
    """Field grouping named child fields."""

    children: tuple[FieldSchema, ...] = ()
    implicit_group: bool = False

    @property
    def kind(self) -> FieldKind:
        return FieldKind.OBJECT


@dataclass(frozen=True)
class ArrayField(FieldSchema):
    """Repeated field; ``item`` describes one element, or is None when undeclared."""

    item: FieldSchema | None = None

    @property
    def kind(self) -> FieldKind:
        return FieldKind.ARRAY


@dataclass(frozen=True)
class UnsupportedField(FieldSchema):
    """Node declaring a kind outside the supported vocabulary."""

    declared_kind: Any = None

    @property
    def kind(self) -> None:
        return None


@dataclass(frozen=True)
class MalformedField(FieldSchema):
    """Node whose definition could not be shaped into a field."""

    reason: str = ""

    @property
    def kind(self) -> None:
        return None


@dataclass(frozen=True)
class AssetConfig:
    """Usable parts of the manifest's asset configuration."""

    allowed_types: tuple[str, ...] = ()
    max_size: str | None = None
    paths: tuple[str, ...] = ()


@dataclass(frozen=True)
class ContentFileSpec:
    """One declared content file and the repository entries it resolved to."""

    index: int
    path: str
    document_type: DocumentType | None
    schema: tuple[FieldSchema, ...] = ()
    matches: tuple[RepositoryEntry, ...] = ()

    @property
    def is_wildcard(self) -> bool:
        return "*" in self.path

    @property
    def resolved_paths(self) -> tuple[str, ...]:
        return tuple(entry.path for entry in self.matches)


@dataclass(frozen=True)
class TemplateManifest:
    """Typed view over a parsed `.nebula/config.json`."""

    version: str | None
    template_type: TemplateType | None
    content_files: tuple[ContentFileSpec, ...] = ()
    name: str | None = None
    description: str | None = None
    assets: AssetConfig | None = None
    editable_fields: Any = None
    preview_component: str | None = None


@dataclass(frozen=True)
class Recommendation:
    """Prioritized improvement derived from a finished report."""

    priority: str
    category: str
    message: str
    actions: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "priority": self.priority,
            "category": self.category,
            "message": self.message,
            "actions": list(self.actions),
        }


@dataclass(frozen=True)
class CompatibilityReport:
    """Aggregate result of one validation run. Never mutated after creation."""

    sections: tuple[SectionResult, ...]
    score: int
    max_score: int
    grade: Grade
    overall_valid: bool
    has_required_files: bool
    halted: bool
    complexity: Complexity
    template_type: TemplateType | None = None
    content_file_count: int = 0
    recommendations: tuple[Recommendation, ...] = ()
    supported_features: tuple[str, ...] = ()
    limitations: tuple[str, ...] = ()
    platform_compatible: bool = False

    def section(self, name: SectionName) -> SectionResult | None:
        for result in self.sections:
            if result.name == name:
                return result
        return None

    def _collect(self, severity: Severity) -> tuple[ValidationIssue, ...]:
        return tuple(issue for result in self.sections for issue in result.by_severity(severity))

    @property
    def errors(self) -> tuple[ValidationIssue, ...]:
        return self._collect(Severity.ERROR)

    @property
    def warnings(self) -> tuple[ValidationIssue, ...]:
        return self._collect(Severity.WARNING)

    @property
    def suggestions(self) -> tuple[ValidationIssue, ...]:
        return self._collect(Severity.SUGGESTION)

    def to_dict(self) -> dict[str, Any]:
        """Return plain JSON-serialisable data with a stable layout."""
        return {
            "score": self.score,
            "max_score": self.max_score,
            "grade": self.grade.value,
            "overall_valid": self.overall_valid,
            "has_required_files": self.has_required_files,
            "halted": self.halted,
            "complexity": self.complexity.value,
            "template_type": self.template_type.value if self.template_type else None,
            "content_file_count": self.content_file_count,
            "sections": {result.name.value: result.to_dict() for result in self.sections},
            "errors": [issue.to_dict() for issue in self.errors],
            "warnings": [issue.to_dict() for issue in self.warnings],
            "suggestions": [issue.to_dict() for issue in self.suggestions],
            "recommendations": [rec.to_dict() for rec in self.recommendations],
            "compatibility": {
                "platform_compatible": self.platform_compatible,
                "supported_features": list(self.supported_features),
                "limitations": list(self.limitations),
            },
        }
