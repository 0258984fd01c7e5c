"""Feedback report models.

A feedback report is a read-only view derived from a ``CompatibilityReport``;
it copies what it needs and never refers back to the report.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any

from templatecheck.schema.models import Recommendation


@dataclass(frozen=True)
class ActionGuide:
    """Step-by-step remediation for a known class of issue."""

    key: str
    title: str
    steps: tuple[str, ...]
    example: str | None = None


@dataclass(frozen=True)
class CodeExample:
    language: str
    title: str
    code: str
    filename: str | None = None


@dataclass(frozen=True)
class FeedbackIssue:
    """One issue annotated for the template author."""

    message: str
    suggestion: str
    severity: str
    category: str
    path: str | None = None
    action_guide: ActionGuide | None = None
    code_example: CodeExample | None = None


@dataclass(frozen=True)
class IssueBucket:
    title: str
    description: str
    count: int
    items: tuple[FeedbackIssue, ...] = ()


@dataclass(frozen=True)
class IssueCounts:
    errors: int
    warnings: int
    suggestions: int
    total: int


@dataclass(frozen=True)
class FeedbackSummary:
    status: str
    title: str
    message: str
    tone: str
    score: int
    max_score: int
    percentage: int
    grade: str
    issue_count: IssueCounts


@dataclass(frozen=True)
class SectionStatus:
    name: str
    score: int
    max_score: int
    status: str


@dataclass(frozen=True)
class Overview:
    template_type: str
    complexity: str
    sections: tuple[SectionStatus, ...]
    strengths: tuple[str, ...] = ()
    weaknesses: tuple[str, ...] = ()


@dataclass(frozen=True)
class Improvement:
    """Quick win or long-term improvement with effort and impact estimates."""

    title: str
    effort: str
    impact: str
    time_estimate: str
    description: str


@dataclass(frozen=True)
class RecommendationPlan:
    high: tuple[Recommendation, ...] = ()
    medium: tuple[Recommendation, ...] = ()
    low: tuple[Recommendation, ...] = ()
    by_category: dict[str, tuple[Recommendation, ...]] = field(default_factory=dict)
    quick_wins: tuple[Improvement, ...] = ()
    long_term: tuple[Improvement, ...] = ()


@dataclass(frozen=True)
class NextStep:
    priority: int
    title: str
    description: str
    minutes: int
    estimated_time: str
    actions: tuple[str, ...] = ()


@dataclass(frozen=True)
class NextStepPlan:
    steps: tuple[NextStep, ...]
    total_minutes: int
    total_estimated_time: str


@dataclass(frozen=True)
class ResourceLink:
    title: str
    url: str
    description: str


@dataclass(frozen=True)
class Resources:
    documentation: tuple[ResourceLink, ...] = ()
    tools: tuple[ResourceLink, ...] = ()
    community: tuple[ResourceLink, ...] = ()


@dataclass(frozen=True)
class ChecklistItem:
    id: str
    type: str
    title: str
    description: str
    priority: str
    completed: bool = False


@dataclass(frozen=True)
class Milestone:
    name: str
    target: int
    description: str
    current: int = 0


@dataclass(frozen=True)
class ProgressTracker:
    total_issues: int
    milestones: tuple[Milestone, ...]
    resolved_issues: int = 0
    progress: int = 0


@dataclass(frozen=True)
class InteractiveFeedback:
    checklist: tuple[ChecklistItem, ...]
    progress: ProgressTracker
    snippets: tuple[CodeExample, ...] = ()


def _plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {str(key): _plain(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(item) for item in value]
    return value


@dataclass(frozen=True)
class FeedbackReport:
    """Author-facing feedback for one validation run."""

    summary: FeedbackSummary
    overview: Overview
    critical: IssueBucket
    warnings: IssueBucket
    suggestions: IssueBucket
    recommendations: RecommendationPlan
    next_steps: NextStepPlan
    resources: Resources
    interactive: InteractiveFeedback | None = None

    def to_dict(self) -> dict[str, Any]:
        data = _plain(asdict(self))
        if self.interactive is None:
            data.pop("interactive")
        return data
