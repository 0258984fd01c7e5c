"""Author-facing feedback built from compatibility reports."""

from templatecheck.feedback.generator import (
    FeedbackGenerator,
    categorize_issue,
    find_action_guide,
    format_minutes,
    generate_feedback,
)
from templatecheck.feedback.models import FeedbackReport

__all__ = [
    "FeedbackGenerator",
    "FeedbackReport",
    "categorize_issue",
    "find_action_guide",
    "format_minutes",
    "generate_feedback",
]
