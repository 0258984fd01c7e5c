"""Data models shared by the validation pipeline."""

from templatecheck.schema.models import (
    ArrayField,
    AssetConfig,
    CompatibilityReport,
    Complexity,
    ContentFileSpec,
    DeductionCode,
    DocumentType,
    EntryKind,
    FieldKind,
    FieldSchema,
    Grade,
    MalformedField,
    ObjectField,
    Recommendation,
    RepositoryEntry,
    ScalarField,
    SectionName,
    SectionResult,
    SelectField,
    Severity,
    TemplateManifest,
    TemplateType,
    UnsupportedField,
    ValidationIssue,
)

__all__ = [
    "ArrayField",
    "AssetConfig",
    "CompatibilityReport",
    "Complexity",
    "ContentFileSpec",
    "DeductionCode",
    "DocumentType",
    "EntryKind",
    "FieldKind",
    "FieldSchema",
    "Grade",
    "MalformedField",
    "ObjectField",
    "Recommendation",
    "RepositoryEntry",
    "ScalarField",
    "SectionName",
    "SectionResult",
    "SelectField",
    "Severity",
    "TemplateManifest",
    "TemplateType",
    "UnsupportedField",
    "ValidationIssue",
]
