"""Turn a compatibility report into author-facing feedback."""

from __future__ import annotations

import json
from collections.abc import Sequence

from templatecheck.feedback.guides import (
    ACTION_GUIDE_TRIGGERS,
    ACTION_GUIDES,
    CATEGORY_KEYWORDS,
    CONFIG_EXAMPLE,
    DEFAULT_CATEGORY,
    RESOURCES,
    SCHEMA_EXAMPLE,
    STATUS_TEMPLATES,
)
from templatecheck.feedback.models import (
    ActionGuide,
    ChecklistItem,
    CodeExample,
    FeedbackIssue,
    FeedbackReport,
    FeedbackSummary,
    Improvement,
    InteractiveFeedback,
    IssueBucket,
    IssueCounts,
    Milestone,
    NextStep,
    NextStepPlan,
    Overview,
    ProgressTracker,
    RecommendationPlan,
    SectionStatus,
)
from templatecheck.scaffold import generate_config_template
from templatecheck.schema.models import (
    CompatibilityReport,
    Complexity,
    Recommendation,
    SectionName,
    ValidationIssue,
)
from templatecheck.validation.constants import MANIFEST_PATH
from templatecheck.validation.scoring import SECTION_MAX_SCORES, percentage_for

MINUTES_PER_ERROR = 15
MINUTES_PER_WARNING = 10
MINUTES_PER_SUGGESTION = 5
REVALIDATE_MINUTES = 10


def categorize_issue(message: str) -> str:
    lowered = message.lower()
    for category, keywords in CATEGORY_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return category
    return DEFAULT_CATEGORY


def find_action_guide(message: str) -> ActionGuide | None:
    lowered = message.lower()
    for needle, key in ACTION_GUIDE_TRIGGERS:
        if needle in lowered:
            return ACTION_GUIDES[key]
    return None


def code_example_for(message: str) -> CodeExample | None:
    lowered = message.lower()
    if "config" in lowered:
        return CONFIG_EXAMPLE
    if "schema" in lowered:
        return SCHEMA_EXAMPLE
    return None


def format_minutes(total: int) -> str:
    """``45 minutes``, ``1h 30m`` or ``2h``."""
    if total < 60:
        return f"{total} minutes"
    hours, minutes = divmod(total, 60)
    return f"{hours}h {minutes}m" if minutes else f"{hours}h"


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'s' if count != 1 else ''}"


class FeedbackGenerator:
    """Build a ``FeedbackReport`` from a finished report. Holds no state."""

    def generate(self, report: CompatibilityReport, interactive: bool = False) -> FeedbackReport:
        return FeedbackReport(
            summary=self.summarize(report),
            overview=self.overview(report),
            critical=self._bucket(
                "Critical Issues (Must Fix)",
                "These issues prevent your template from working properly.",
                report.errors,
                "critical",
            ),
            warnings=self._bucket(
                "Warnings (Should Fix)",
                "These issues may cause problems or reduce template quality.",
                report.warnings,
                "warning",
            ),
            suggestions=self._bucket(
                "Suggestions (Nice to Have)",
                "These improvements can enhance your template.",
                report.suggestions,
                "suggestion",
            ),
            recommendations=self.recommendations(report),
            next_steps=self.next_steps(report),
            resources=RESOURCES,
            interactive=self.interactive(report) if interactive else None,
        )

    def summarize(self, report: CompatibilityReport) -> FeedbackSummary:
        errors, warnings, suggestions = len(report.errors), len(report.warnings), len(report.suggestions)
        if report.overall_valid and report.score >= 90:
            status = "excellent"
        elif report.overall_valid and report.score >= 70:
            status = "good"
        elif errors:
            status = "needs-work"
        else:
            status = "improvements-needed"
        title, message, tone = STATUS_TEMPLATES[status]
        return FeedbackSummary(
            status=status,
            title=title,
            message=message,
            tone=tone,
            score=report.score,
            max_score=report.max_score,
            percentage=percentage_for(report.score, report.max_score),
            grade=report.grade.value,
            issue_count=IssueCounts(
                errors=errors,
                warnings=warnings,
                suggestions=suggestions,
                total=errors + warnings + suggestions,
            ),
        )

    def overview(self, report: CompatibilityReport) -> Overview:
        statuses: list[SectionStatus] = []
        for name in SectionName:
            section = report.section(name)
            if section is None:
                statuses.append(SectionStatus(name.value, 0, SECTION_MAX_SCORES[name], "skipped"))
            else:
                statuses.append(
                    SectionStatus(name.value, section.score, section.max_score, "pass" if section.valid else "fail")
                )
        return Overview(
            template_type=report.template_type.value if report.template_type else "unknown",
            complexity=report.complexity.value,
            sections=tuple(statuses),
            strengths=self._strengths(report),
            weaknesses=self._weaknesses(report),
        )

    @staticmethod
    def _strengths(report: CompatibilityReport) -> tuple[str, ...]:
        strengths: list[str] = []
        structure = report.section(SectionName.STRUCTURE)
        config = report.section(SectionName.CONFIG)
        if structure is not None and structure.valid:
            strengths.append("Well-organized file structure")
        if config is not None and config.valid:
            strengths.append("Valid configuration")
        if report.score >= 80:
            strengths.append("High quality template")
        if not report.warnings:
            strengths.append("No warning-level issues")
        return tuple(strengths)

    @staticmethod
    def _weaknesses(report: CompatibilityReport) -> tuple[str, ...]:
        weaknesses: list[str] = []
        if report.errors:
            weaknesses.append(_plural(len(report.errors), "critical error"))
        if len(report.warnings) > 3:
            weaknesses.append("Multiple warning-level issues")
        if report.score < 50:
            weaknesses.append("Low overall quality score")
        content = report.section(SectionName.CONTENT)
        if content is not None and not content.valid:
            weaknesses.append("Content validation issues")
        return tuple(weaknesses)

    @staticmethod
    def format_issue(issue: ValidationIssue, severity: str) -> FeedbackIssue:
        return FeedbackIssue(
            message=issue.message,
            suggestion=issue.suggestion,
            severity=severity,
            category=categorize_issue(issue.message),
            path=issue.path,
            action_guide=find_action_guide(issue.message),
            code_example=code_example_for(issue.message),
        )

    def _bucket(
        self,
        title: str,
        description: str,
        issues: Sequence[ValidationIssue],
        severity: str,
    ) -> IssueBucket:
        return IssueBucket(
            title=title,
            description=description,
            count=len(issues),
            items=tuple(self.format_issue(issue, severity) for issue in issues),
        )

    def recommendations(self, report: CompatibilityReport) -> RecommendationPlan:
        by_category: dict[str, list[Recommendation]] = {}
        for rec in report.recommendations:
            by_category.setdefault(rec.category, []).append(rec)
        return RecommendationPlan(
            high=tuple(rec for rec in report.recommendations if rec.priority == "high"),
            medium=tuple(rec for rec in report.recommendations if rec.priority == "medium"),
            low=tuple(rec for rec in report.recommendations if rec.priority == "low"),
            by_category={category: tuple(recs) for category, recs in by_category.items()},
            quick_wins=self._quick_wins(report),
            long_term=self._long_term(report),
        )

    @staticmethod
    def _quick_wins(report: CompatibilityReport) -> tuple[Improvement, ...]:
        wins: list[Improvement] = []
        if any("preview" in issue.message.lower() for issue in report.warnings):
            wins.append(
                Improvement(
                    title="Add Preview Image",
                    effort="low",
                    impact="medium",
                    time_estimate="15 minutes",
                    description="Take a screenshot of your template and save it as .nebula/preview.png",
                )
            )
        if any("README" in issue.message for issue in report.warnings):
            wins.append(
                Improvement(
                    title="Create README",
                    effort="low",
                    impact="high",
                    time_estimate="30 minutes",
                    description="Document your template with usage instructions and examples",
                )
            )
        if any("description" in issue.message.lower() for issue in (*report.warnings, *report.suggestions)):
            wins.append(
                Improvement(
                    title="Add Template Description",
                    effort="low",
                    impact="low",
                    time_estimate="5 minutes",
                    description="Add a description field to your config.json",
                )
            )
        return tuple(wins)

    @staticmethod
    def _long_term(report: CompatibilityReport) -> tuple[Improvement, ...]:
        improvements: list[Improvement] = []
        if report.complexity == Complexity.SIMPLE:
            improvements.append(
                Improvement(
                    title="Add More Content Types",
                    effort="high",
                    impact="high",
                    time_estimate="2-4 hours",
                    description="Expand your template with additional content types like projects, blog posts, or testimonials",
                )
            )
        if report.score < 80:
            improvements.append(
                Improvement(
                    title="Comprehensive Schema Review",
                    effort="medium",
                    impact="high",
                    time_estimate="1-2 hours",
                    description="Review and improve all schema definitions for better user experience",
                )
            )
        return tuple(improvements)

    def next_steps(self, report: CompatibilityReport) -> NextStepPlan:
        steps: list[NextStep] = []
        plan = (
            (report.errors, "Fix Critical Issues", "Address", "critical error", MINUTES_PER_ERROR),
            (report.warnings, "Address Warnings", "Fix", "warning", MINUTES_PER_WARNING),
            (report.suggestions, "Implement Improvements", "Consider", "suggestion", MINUTES_PER_SUGGESTION),
        )
        for issues, title, verb, noun, per_issue in plan:
            if not issues:
                continue
            minutes = len(issues) * per_issue
            steps.append(
                NextStep(
                    priority=len(steps) + 1,
                    title=title,
                    description=f"{verb} {_plural(len(issues), noun)}",
                    minutes=minutes,
                    estimated_time=f"{minutes} minutes",
                    actions=tuple(issue.suggestion for issue in issues[:3]),
                )
            )
        steps.append(
            NextStep(
                priority=len(steps) + 1,
                title="Re-validate Your Template",
                description="Validate your changes and test the template",
                minutes=REVALIDATE_MINUTES,
                estimated_time=f"{REVALIDATE_MINUTES} minutes",
                actions=(
                    "Re-run template validation",
                    "Test content editing functionality",
                    "Preview template rendering",
                ),
            )
        )
        total = sum(step.minutes for step in steps)
        return NextStepPlan(steps=tuple(steps), total_minutes=total, total_estimated_time=format_minutes(total))

    def interactive(self, report: CompatibilityReport) -> InteractiveFeedback:
        checklist: list[ChecklistItem] = []
        for kind, priority, issues in (("error", "high", report.errors), ("warning", "medium", report.warnings)):
            for issue in issues:
                checklist.append(
                    ChecklistItem(
                        id=f"{kind}-{len(checklist)}",
                        type=kind,
                        title=issue.message,
                        description=issue.suggestion,
                        priority=priority,
                    )
                )
        progress = ProgressTracker(
            total_issues=len(report.errors) + len(report.warnings),
            milestones=(
                Milestone("Fix Critical Errors", len(report.errors), "Resolve all critical issues"),
                Milestone("Address Warnings", len(report.warnings), "Fix warning-level issues"),
                Milestone("Template Ready", 1, "Template passes validation"),
            ),
        )
        snippets: tuple[CodeExample, ...] = ()
        if any("config" in issue.message.lower() for issue in report.errors):
            snippets = (
                CodeExample(
                    language="json",
                    title="Basic Template Configuration",
                    filename=MANIFEST_PATH,
                    code=json.dumps(generate_config_template("json"), indent=2),
                ),
            )
        return InteractiveFeedback(checklist=tuple(checklist), progress=progress, snippets=snippets)


def generate_feedback(report: CompatibilityReport, interactive: bool = False) -> FeedbackReport:
    return FeedbackGenerator().generate(report, interactive=interactive)
