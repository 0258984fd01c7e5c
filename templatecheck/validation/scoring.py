"""Score deductions, grading and report-level derivations.

Every point a template can lose is listed in ``DEDUCTIONS``; no other module
hardcodes a deduction. Section maxima and the pass threshold are fixed so that
scores remain comparable between deployments.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from types import MappingProxyType

from templatecheck.schema.models import (
    Complexity,
    DeductionCode,
    Grade,
    Recommendation,
    SectionName,
    SectionResult,
    Severity,
    TemplateManifest,
    TemplateType,
    ValidationIssue,
)

SECTION_MAX_SCORES: Mapping[SectionName, int] = MappingProxyType(
    {
        SectionName.STRUCTURE: 30,
        SectionName.CONFIG: 25,
        SectionName.CONTENT: 25,
        SectionName.COMPATIBILITY: 20,
    }
)
TOTAL_MAX_SCORE = sum(SECTION_MAX_SCORES.values())
PASS_THRESHOLD = 70
GRADE_THRESHOLDS: tuple[tuple[int, Grade], ...] = (
    (90, Grade.A),
    (80, Grade.B),
    (70, Grade.C),
    (60, Grade.D),
)
SIMPLE_COMPLEXITY_LIMIT = 10
MODERATE_COMPLEXITY_LIMIT = 25

_D = DeductionCode
DEDUCTIONS: Mapping[DeductionCode, int] = MappingProxyType(
    {
        # structure
        _D.MISSING_MANIFEST: 15,
        _D.MISSING_MANIFEST_DIR: 10,
        _D.MISSING_PREVIEW: 5,
        _D.MISSING_README: 3,
        _D.NO_PACKAGE_JSON: 0,
        _D.NONSTANDARD_LAYOUT: 2,
        # config
        _D.MANIFEST_PARSE_ERROR: 15,
        _D.MISSING_REQUIRED_FIELD: 5,
        _D.UNSUPPORTED_TEMPLATE_TYPE: 10,
        _D.INVALID_VERSION: 2,
        _D.CONTENT_FILES_NOT_LIST: 8,
        _D.CONTENT_FILES_EMPTY: 5,
        _D.CONTENT_FILE_NOT_OBJECT: 3,
        _D.CONTENT_FILE_MISSING_PATH: 3,
        _D.CONTENT_FILE_MISSING_SCHEMA: 3,
        _D.UNSUPPORTED_DOCUMENT_TYPE: 2,
        _D.UNSUPPORTED_WILDCARD: 1,
        _D.SCHEMA_ERROR: 2,
        _D.SCHEMA_WARNING: 1,
        _D.SCHEMA_SUGGESTION: 0,
        _D.ASSET_CONFIG_INVALID: 1,
        _D.METADATA_NOT_STRING: 1,
        _D.PREVIEW_COMPONENT_NAMING: 2,
        _D.PATH_OUTSIDE_REPOSITORY: 3,
        # content
        _D.NO_CONTENT_FILES: 10,
        _D.WILDCARD_NO_MATCHES: 2,
        _D.CONTENT_FILE_NOT_FOUND: 3,
        _D.INVALID_JSON_CONTENT: 3,
        _D.EMPTY_MARKDOWN: 1,
        _D.ASSET_DIR_NOT_FOUND: 0,
        # compatibility
        _D.NO_UI_COMPONENTS: 2,
        _D.INVALID_FILE_NAMES: 3,
        _D.EDITABLE_FIELDS_INVALID: 1,
        _D.NO_EDITABLE_FIELDS: 0,
        _D.NO_PREVIEW_COMPONENT: 0,
    }
)


def deduction_for(issue: ValidationIssue) -> int:
    """Points an issue costs. Uncoded issues cost nothing; the table decides the rest."""
    if issue.code is None:
        return 0
    return DEDUCTIONS[issue.code]


def build_section(name: SectionName, issues: Iterable[ValidationIssue]) -> SectionResult:
    """Score a stage's issues against its maximum; the score floors at zero."""
    collected = tuple(issues)
    max_score = SECTION_MAX_SCORES[name]
    lost = sum(deduction_for(issue) for issue in collected)
    return SectionResult(
        name=name,
        valid=not any(issue.severity == Severity.ERROR for issue in collected),
        score=max(0, max_score - lost),
        max_score=max_score,
        issues=collected,
    )


def grade_for(score: int, max_score: int = TOTAL_MAX_SCORE) -> Grade:
    percentage = (score / max_score) * 100 if max_score else 0
    for threshold, grade in GRADE_THRESHOLDS:
        if percentage >= threshold:
            return grade
    return Grade.F


def percentage_for(score: int, max_score: int = TOTAL_MAX_SCORE) -> int:
    if not max_score:
        return 0
    return int((score / max_score) * 100 + 0.5)


def complexity_for(content_file_count: int, total_file_count: int, nested_field_count: int) -> Complexity:
    """Weighted heuristic: two points per content file, one per repository entry and schema field."""
    weight = 2 * content_file_count + total_file_count + nested_field_count
    if weight < SIMPLE_COMPLEXITY_LIMIT:
        return Complexity.SIMPLE
    if weight < MODERATE_COMPLEXITY_LIMIT:
        return Complexity.MODERATE
    return Complexity.COMPLEX


def is_overall_valid(score: int, issues: Iterable[ValidationIssue]) -> bool:
    return score >= PASS_THRESHOLD and not any(issue.severity == Severity.ERROR for issue in issues)


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'s' if count != 1 else ''}"


def build_recommendations(
    score: int,
    errors: Sequence[ValidationIssue],
    warnings: Sequence[ValidationIssue],
    template_type: TemplateType | None,
    content_section: SectionResult | None,
) -> tuple[Recommendation, ...]:
    recommendations: list[Recommendation] = []
    if score < 50:
        recommendations.append(
            Recommendation(
                priority="high",
                category="structure",
                message="Template needs significant improvements to be platform-compatible",
                actions=(
                    "Fix all error-level issues",
                    "Add required configuration files",
                    "Improve template documentation",
                ),
            )
        )
    elif score < 80:
        recommendations.append(
            Recommendation(
                priority="medium",
                category="quality",
                message="Template is functional but could be improved",
                actions=("Address warning-level issues", "Add preview image", "Improve schema definitions"),
            )
        )
    if errors:
        recommendations.append(
            Recommendation(
                priority="high",
                category="errors",
                message=f"Fix {_plural(len(errors), 'critical error')}",
                actions=tuple(issue.suggestion for issue in errors[:3]),
            )
        )
    if len(warnings) > 3:
        recommendations.append(
            Recommendation(
                priority="medium",
                category="warnings",
                message=f"Address {_plural(len(warnings), 'warning')} to improve quality",
                actions=tuple(issue.suggestion for issue in warnings[:3]),
            )
        )
    if template_type == TemplateType.JSON and content_section is not None and not content_section.valid:
        recommendations.append(
            Recommendation(
                priority="medium",
                category="content",
                message="JSON template needs valid data files",
                actions=(
                    "Create or fix data.json file",
                    "Ensure JSON syntax is valid",
                    "Match schema definitions with actual content",
                ),
            )
        )
    return tuple(recommendations)


def supported_features(manifest: TemplateManifest | None) -> tuple[str, ...]:
    if manifest is None:
        return ()
    features: list[str] = []
    if manifest.template_type is not None:
        features.append(f"{manifest.template_type.value} template type")
    if manifest.content_files:
        features.append(_plural(len(manifest.content_files), "content file"))
    if manifest.assets is not None:
        features.append("Asset management")
    if manifest.preview_component:
        features.append("Custom preview component")
    return tuple(features)


def limitations(score: int, errors: Sequence[ValidationIssue], warnings: Sequence[ValidationIssue]) -> tuple[str, ...]:
    found: list[str] = []
    if errors:
        found.append(_plural(len(errors), "critical error"))
    if len(warnings) > 3:
        found.append("Multiple warning-level issues")
    if score < 80:
        found.append("Below recommended quality threshold")
    return tuple(found)
