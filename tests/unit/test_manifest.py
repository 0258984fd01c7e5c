"""Unit tests for manifest parsing and validation."""

from __future__ import annotations

import json
from typing import Any

from templatecheck.schema.models import DeductionCode, DocumentType, Severity, TemplateType
from templatecheck.validation.manifest import (
    ManifestDraft,
    ManifestParseFailure,
    ManifestValidator,
    infer_document_type,
    parse_manifest_document,
)


def _validate(data: Any):
    return ManifestValidator().validate_text(json.dumps(data))


def _base(**changes: Any) -> dict[str, Any]:
    data: dict[str, Any] = {
        "version": "1.0.0",
        "templateType": "json",
        "contentFiles": [{"path": "data.json", "type": "json", "schema": {"title": {"type": "string"}}}],
    }
    data.update(changes)
    return data


def test_parse_rejects_non_object_root() -> None:
    assert isinstance(parse_manifest_document("[]"), ManifestParseFailure)
    assert isinstance(parse_manifest_document("{"), ManifestParseFailure)
    assert isinstance(parse_manifest_document('{"version": "1.0.0"}'), ManifestDraft)


def test_invalid_json_is_one_error_without_manifest() -> None:
    result = ManifestValidator().validate_text("{ not json")
    assert result.manifest is None
    assert [issue.code for issue in result.section.issues] == [DeductionCode.MANIFEST_PARSE_ERROR]
    assert result.section.score == 10


def test_minimal_manifest_is_clean() -> None:
    result = _validate(_base())
    assert result.section.issues == ()
    assert result.section.score == 25
    manifest = result.manifest
    assert manifest is not None
    assert manifest.template_type == TemplateType.JSON
    assert manifest.content_files[0].document_type == DocumentType.JSON
    assert result.nested_field_count == 1


def test_three_missing_required_fields() -> None:
    result = _validate({"name": "Only a name"})
    errors = result.section.by_severity(Severity.ERROR)
    assert [issue.path for issue in errors] == ["version", "templateType", "contentFiles"]
    assert {issue.code for issue in errors} == {DeductionCode.MISSING_REQUIRED_FIELD}
    assert result.section.score == 10


def test_unsupported_template_type_is_one_error() -> None:
    result = _validate(_base(templateType="react"))
    assert [issue.code for issue in result.section.issues] == [DeductionCode.UNSUPPORTED_TEMPLATE_TYPE]
    assert result.manifest is not None
    assert result.manifest.template_type is None


def test_version_format_is_a_warning() -> None:
    result = _validate(_base(version="v1"))
    assert [(issue.severity, issue.code) for issue in result.section.issues] == [
        (Severity.WARNING, DeductionCode.INVALID_VERSION)
    ]
    assert _validate(_base(version="2.1")).section.issues == ()


def test_content_files_shape_errors() -> None:
    assert [issue.code for issue in _validate(_base(contentFiles="data.json")).section.issues] == [
        DeductionCode.CONTENT_FILES_NOT_LIST
    ]
    assert [issue.code for issue in _validate(_base(contentFiles=[])).section.issues] == [
        DeductionCode.CONTENT_FILES_EMPTY
    ]
    result = _validate(_base(contentFiles=["data.json", {"type": "json"}]))
    assert [issue.code for issue in result.section.issues] == [
        DeductionCode.CONTENT_FILE_NOT_OBJECT,
        DeductionCode.CONTENT_FILE_MISSING_PATH,
        DeductionCode.CONTENT_FILE_MISSING_SCHEMA,
    ]
    assert result.manifest is not None
    assert result.manifest.content_files == ()


def test_document_type_accepts_either_key_and_infers_from_extension() -> None:
    files = [
        {"path": "about.md", "documentType": "markdown", "schema": {}},
        {"path": "site.yml", "schema": {}},
        {"path": "notes.txt", "type": "csv", "schema": {}},
    ]
    result = _validate(_base(contentFiles=files))
    manifest = result.manifest
    assert manifest is not None
    assert [spec.document_type for spec in manifest.content_files] == [DocumentType.MARKDOWN, DocumentType.YAML, None]
    assert [issue.code for issue in result.section.issues] == [DeductionCode.UNSUPPORTED_DOCUMENT_TYPE]


def test_unsupported_wildcard_is_reported() -> None:
    files = [{"path": "content/*/index.md", "type": "markdown", "schema": {}}]
    result = _validate(_base(contentFiles=files))
    assert [issue.code for issue in result.section.issues] == [DeductionCode.UNSUPPORTED_WILDCARD]


def test_schema_issues_are_requalified() -> None:
    files = [{"path": "data.json", "type": "json", "schema": {"title": {"type": "nope"}}}]
    issue = _validate(_base(contentFiles=files)).section.issues[0]
    assert issue.path == "contentFiles[0].schema.title"
    assert issue.message == "Content file 0 schema: title has unsupported type: nope"
    assert issue.code == DeductionCode.SCHEMA_ERROR


def test_assets_and_metadata_checks() -> None:
    result = _validate(
        _base(
            assets={"allowedTypes": "image/png", "maxSize": 5, "paths": ["public"]},
            name=42,
            description=["x"],
            previewComponent="my-template",
        )
    )
    assert [issue.path for issue in result.section.issues] == [
        "assets.allowedTypes",
        "assets.maxSize",
        "name",
        "description",
        "previewComponent",
    ]
    assert all(issue.severity == Severity.WARNING for issue in result.section.issues)
    manifest = result.manifest
    assert manifest is not None
    assert manifest.assets is not None
    assert manifest.assets.paths == ("public",)
    assert manifest.name is None
    assert manifest.preview_component == "my-template"


def test_infer_document_type() -> None:
    assert infer_document_type("content/post.MD") == DocumentType.MARKDOWN
    assert infer_document_type("data.json") == DocumentType.JSON
    assert infer_document_type("Makefile") is None


def test_deeply_nested_manifest_is_a_parse_error() -> None:
    text = "[" * 100_000 + "]" * 100_000
    assert isinstance(parse_manifest_document(text), ManifestParseFailure)
    result = ManifestValidator().validate_text('{"version": ' + text + "}")
    assert result.manifest is None
    assert [issue.code for issue in result.section.issues] == [DeductionCode.MANIFEST_PARSE_ERROR]


def test_paths_outside_repository_are_config_issues() -> None:
    files = [{"path": "../outside.json", "type": "json", "schema": {"title": {"type": "string"}}}]
    result = _validate(_base(contentFiles=files, assets={"paths": ["public", "../../etc"]}))
    assert [(issue.severity, issue.code, issue.path) for issue in result.section.issues] == [
        (Severity.ERROR, DeductionCode.PATH_OUTSIDE_REPOSITORY, "contentFiles[0].path"),
        (Severity.WARNING, DeductionCode.PATH_OUTSIDE_REPOSITORY, "assets.paths"),
    ]
    assert result.section.score == 19
    manifest = result.manifest
    assert manifest is not None
    assert manifest.assets is not None
    assert manifest.assets.paths == ("public",)
