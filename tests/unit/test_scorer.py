"""End-to-end scoring scenarios over in-memory repositories."""

from __future__ import annotations

import json
from typing import Any

import pytest
from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st

from templatecheck.accessor import InMemoryRepositoryAccessor
from templatecheck.exceptions import AccessorError, EntryNotFoundError, ValidationRunError
from templatecheck.schema.models import Complexity, DeductionCode, Grade, SectionName, Severity, TemplateType
from templatecheck.validation import CompatibilityScorer


def test_clean_template_scores_one_hundred(score, valid_files) -> None:
    report = score(valid_files)
    assert report.score == 100
    assert report.grade == Grade.A
    assert report.overall_valid
    assert report.platform_compatible
    assert not report.halted
    assert report.errors == ()
    assert report.warnings == ()
    assert [section.name for section in report.sections] == list(SectionName)
    assert report.template_type == TemplateType.JSON
    assert report.content_file_count == 1
    assert report.complexity == Complexity.SIMPLE
    assert "json template type" in report.supported_features


def test_three_missing_required_fields(score, make_files) -> None:
    report = score(make_files({"name": "Half done"}))
    config = report.section(SectionName.CONFIG)
    assert config is not None
    assert [issue.path for issue in config.issues] == ["version", "templateType", "contentFiles"]
    assert len(report.errors) == 3
    assert not report.overall_valid
    assert report.grade == Grade.C
    assert report.score == 75


def test_unsupported_template_type_fails_validation(score, make_files, valid_files) -> None:
    manifest = json.loads(valid_files[".nebula/config.json"])
    manifest["templateType"] = "react"
    report = score(make_files(manifest))
    assert [issue.code for issue in report.errors] == [DeductionCode.UNSUPPORTED_TEMPLATE_TYPE]
    assert report.score == 90
    assert not report.overall_valid


def test_wildcard_without_matches_still_passes(score, make_files, valid_files) -> None:
    manifest = json.loads(valid_files[".nebula/config.json"])
    manifest["contentFiles"].append(
        {"path": "content/*.md", "type": "markdown", "schema": {"body": {"type": "markdown", "label": "Body"}}}
    )
    report = score(make_files(manifest))
    assert [issue.code for issue in report.warnings] == [DeductionCode.WILDCARD_NO_MATCHES]
    assert report.score == 98
    assert report.overall_valid


def test_template_without_components_loses_layout_and_ui_points(score, valid_files) -> None:
    files = dict(valid_files)
    files.pop("components/Portfolio.jsx")
    report = score(files)
    assert report.section(SectionName.STRUCTURE).score == 28
    assert report.section(SectionName.COMPATIBILITY).score == 18
    assert report.score == 96
    assert report.overall_valid


def test_deeply_nested_content_is_a_validation_error(score, make_files) -> None:
    files = make_files()
    files["data.json"] = "[" * 100_000 + "]" * 100_000
    report = score(files)
    assert [issue.code for issue in report.errors] == [DeductionCode.INVALID_JSON_CONTENT]
    assert report.score == 97
    assert not report.overall_valid


def test_missing_manifest_halts_after_structure(score) -> None:
    report = score({"README.md": "# Draft", "index.html": "<html></html>"})
    assert report.halted
    assert [section.name for section in report.sections] == [SectionName.STRUCTURE]
    assert not report.overall_valid
    assert not report.has_required_files
    assert report.score == 0
    assert report.grade == Grade.F
    assert report.to_dict()["sections"].keys() == {"structure"}


def test_invalid_manifest_json_continues_with_empty_manifest(score, make_files) -> None:
    report = score(make_files("{ not json"))
    assert [issue.code for issue in report.errors] == [DeductionCode.MANIFEST_PARSE_ERROR]
    content = report.section(SectionName.CONTENT)
    assert content is not None
    assert [issue.code for issue in content.issues] == [DeductionCode.NO_CONTENT_FILES]
    assert not report.halted


def test_repeated_runs_are_identical(score, valid_files) -> None:
    first = json.dumps(score(valid_files).to_dict(), sort_keys=True)
    second = json.dumps(score(valid_files).to_dict(), sort_keys=True)
    assert first == second


@pytest.mark.asyncio
async def test_listing_failure_raises_run_error() -> None:
    class Unreachable(InMemoryRepositoryAccessor):
        async def list_entries(self, path: str = "", ref: str | None = None):
            raise AccessorError("connection reset", path=path, retryable=True)

    with pytest.raises(ValidationRunError) as exc_info:
        await CompatibilityScorer(Unreachable({})).validate()
    assert exc_info.value.stage == "structure"
    assert exc_info.value.retryable


@pytest.mark.asyncio
async def test_manifest_vanishing_between_stages_raises_run_error(valid_files) -> None:
    class Racy(InMemoryRepositoryAccessor):
        async def read_file(self, path: str, ref: str | None = None) -> str:
            raise EntryNotFoundError(path, ref)

    with pytest.raises(ValidationRunError) as exc_info:
        await CompatibilityScorer(Racy(valid_files)).validate("main")
    assert exc_info.value.stage == "config"
    assert not exc_info.value.retryable


_json_values = st.recursive(
    st.none() | st.booleans() | st.integers(-5, 5) | st.text(max_size=8),
    lambda children: st.lists(children, max_size=3) | st.dictionaries(st.text(max_size=6), children, max_size=3),
    max_leaves=10,
)
_content_file = st.fixed_dictionaries(
    {},
    optional={
        "path": st.sampled_from(["data.json", "content/*.md", "missing.md", "a/*/b.md", ""]),
        "type": st.sampled_from(["json", "markdown", "yaml", "csv"]),
        "schema": _json_values,
    },
)
_manifests = st.fixed_dictionaries(
    {},
    optional={
        "version": st.sampled_from(["1.0.0", "1.0", "one"]) | _json_values,
        "templateType": st.sampled_from(["json", "markdown", "hybrid", "react"]),
        "contentFiles": st.lists(_content_file | _json_values, max_size=3) | _json_values,
        "name": _json_values,
        "description": _json_values,
        "assets": _json_values,
        "editableFields": _json_values,
        "previewComponent": st.sampled_from(["Portfolio", "portfolio"]) | _json_values,
    },
)


@given(manifest=_manifests)
@settings(deadline=None, max_examples=60, suppress_health_check=[HealthCheck.function_scoped_fixture])
def test_property_score_bounds_and_validity(score, make_files, manifest: dict[str, Any]) -> None:
    """Property: scores stay in range and validity is exactly threshold plus no errors."""
    report = score(make_files(manifest))
    assert 0 <= report.score <= report.max_score == 100
    for section in report.sections:
        assert 0 <= section.score <= section.max_score
        assert section.valid == (not section.by_severity(Severity.ERROR))
    assert report.score == sum(section.score for section in report.sections)
    assert report.overall_valid == (report.score >= 70 and not report.errors)
