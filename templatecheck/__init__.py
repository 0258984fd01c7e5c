"""templatecheck: validate and score portfolio template repositories."""

from templatecheck.exceptions import AccessorError, EntryNotFoundError, TemplateCheckError, ValidationRunError
from templatecheck.feedback import FeedbackGenerator, FeedbackReport, generate_feedback
from templatecheck.schema import CompatibilityReport, RepositoryEntry, SectionResult, Severity, ValidationIssue
from templatecheck.service import ValidationOutcome, check_template, check_template_sync
from templatecheck.validation import CompatibilityScorer

__all__ = [
    "AccessorError",
    "CompatibilityReport",
    "CompatibilityScorer",
    "EntryNotFoundError",
    "FeedbackGenerator",
    "FeedbackReport",
    "RepositoryEntry",
    "SectionResult",
    "Severity",
    "TemplateCheckError",
    "ValidationIssue",
    "ValidationOutcome",
    "ValidationRunError",
    "check_template",
    "check_template_sync",
    "generate_feedback",
]
