"""Unit tests for deductions, grading and complexity."""

from __future__ import annotations

import pytest

from templatecheck.schema.models import (
    Complexity,
    DeductionCode,
    Grade,
    SectionName,
    Severity,
    TemplateType,
    ValidationIssue,
)
from templatecheck.validation.scoring import (
    DEDUCTIONS,
    SECTION_MAX_SCORES,
    TOTAL_MAX_SCORE,
    build_recommendations,
    build_section,
    complexity_for,
    deduction_for,
    grade_for,
    is_overall_valid,
    percentage_for,
)


def _issue(severity: Severity, code: DeductionCode | None) -> ValidationIssue:
    return ValidationIssue(severity=severity, message="m", suggestion="s", code=code)


def test_every_code_has_a_non_negative_deduction() -> None:
    assert set(DEDUCTIONS) == set(DeductionCode)
    assert all(points >= 0 for points in DEDUCTIONS.values())


def test_section_maxima_total_one_hundred() -> None:
    assert dict(SECTION_MAX_SCORES) == {
        SectionName.STRUCTURE: 30,
        SectionName.CONFIG: 25,
        SectionName.CONTENT: 25,
        SectionName.COMPATIBILITY: 20,
    }
    assert TOTAL_MAX_SCORE == 100


def test_deduction_table_decides_cost_for_every_severity() -> None:
    assert deduction_for(_issue(Severity.SUGGESTION, DeductionCode.NO_PACKAGE_JSON)) == 0
    assert deduction_for(_issue(Severity.SUGGESTION, DeductionCode.NONSTANDARD_LAYOUT)) == 2
    assert deduction_for(_issue(Severity.SUGGESTION, DeductionCode.NO_UI_COMPONENTS)) == 2
    assert deduction_for(_issue(Severity.ERROR, None)) == 0
    assert deduction_for(_issue(Severity.ERROR, DeductionCode.MISSING_MANIFEST)) == 15


def test_build_section_floors_at_zero() -> None:
    issues = [_issue(Severity.ERROR, DeductionCode.MANIFEST_PARSE_ERROR)] * 3
    section = build_section(SectionName.CONFIG, issues)
    assert section.score == 0
    assert not section.valid
    assert section.max_score == 25


def test_warnings_do_not_invalidate_a_section() -> None:
    section = build_section(SectionName.CONTENT, [_issue(Severity.WARNING, DeductionCode.EMPTY_MARKDOWN)])
    assert section.valid
    assert section.score == 24


@pytest.mark.parametrize(
    ("score", "grade"),
    [(100, Grade.A), (90, Grade.A), (89, Grade.B), (80, Grade.B), (70, Grade.C), (69, Grade.D), (60, Grade.D), (59, Grade.F), (0, Grade.F)],
)
def test_grade_thresholds(score: int, grade: Grade) -> None:
    assert grade_for(score) == grade


def test_percentage_rounds_half_up() -> None:
    assert percentage_for(75) == 75
    assert percentage_for(1, 8) == 13
    assert percentage_for(5, 0) == 0


@pytest.mark.parametrize(
    ("content", "entries", "fields", "expected"),
    [
        (0, 9, 0, Complexity.SIMPLE),
        (0, 10, 0, Complexity.MODERATE),
        (2, 10, 10, Complexity.MODERATE),
        (5, 15, 0, Complexity.COMPLEX),
    ],
)
def test_complexity_buckets(content: int, entries: int, fields: int, expected: Complexity) -> None:
    assert complexity_for(content, entries, fields) == expected


def test_overall_validity_needs_threshold_and_no_errors() -> None:
    assert is_overall_valid(70, [_issue(Severity.WARNING, DeductionCode.MISSING_README)])
    assert not is_overall_valid(69, [])
    assert not is_overall_valid(95, [_issue(Severity.ERROR, DeductionCode.SCHEMA_ERROR)])


def test_recommendations_for_low_score_with_errors() -> None:
    errors = [_issue(Severity.ERROR, DeductionCode.MISSING_MANIFEST)]
    recommendations = build_recommendations(40, errors, [], TemplateType.JSON, None)
    assert [(rec.priority, rec.category) for rec in recommendations] == [("high", "structure"), ("high", "errors")]
    assert recommendations[1].message == "Fix 1 critical error"


def test_recommendations_for_json_template_with_invalid_content() -> None:
    content = build_section(SectionName.CONTENT, [_issue(Severity.ERROR, DeductionCode.INVALID_JSON_CONTENT)])
    warnings = [_issue(Severity.WARNING, DeductionCode.MISSING_README)] * 4
    recommendations = build_recommendations(85, [], warnings, TemplateType.JSON, content)
    assert [rec.category for rec in recommendations] == ["warnings", "content"]
    assert len(recommendations[0].actions) == 3
