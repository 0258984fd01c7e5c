"""Entry points that run a validation and separate broken templates from failed runs."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any

from templatecheck.accessor.base import RepositoryAccessor
from templatecheck.config.models import TemplateCheckConfig
from templatecheck.exceptions import ValidationRunError
from templatecheck.feedback.generator import generate_feedback
from templatecheck.feedback.models import FeedbackReport
from templatecheck.schema.models import CompatibilityReport
from templatecheck.validation.scorer import CompatibilityScorer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidationOutcome:
    """Either a report (``success=True``) or an operational failure description."""

    success: bool
    report: CompatibilityReport | None = None
    feedback: FeedbackReport | None = None
    error: str | None = None
    stage: str | None = None
    retryable: bool = False

    def to_dict(self) -> dict[str, Any]:
        if not self.success:
            return {"success": False, "error": self.error, "stage": self.stage, "retryable": self.retryable}
        data: dict[str, Any] = {"success": True}
        if self.report is not None:
            data["validation"] = self.report.to_dict()
        if self.feedback is not None:
            data["feedback"] = self.feedback.to_dict()
        return data


async def check_template(
    accessor: RepositoryAccessor,
    ref: str | None = None,
    *,
    feedback: bool = False,
    interactive: bool | None = None,
    config: TemplateCheckConfig | None = None,
) -> ValidationOutcome:
    """Validate the repository behind ``accessor`` and optionally build feedback."""
    settings = config or TemplateCheckConfig()
    scorer = CompatibilityScorer(accessor, max_concurrency=settings.validation.max_concurrency)
    try:
        report = await scorer.validate(ref)
    except ValidationRunError as exc:
        logger.warning("validation run failed at %s: %s", exc.stage, exc)
        return ValidationOutcome(
            success=False,
            error=f"Template validation failed: {exc}",
            stage=exc.stage,
            retryable=exc.retryable,
        )
    report_feedback = None
    if feedback:
        wants_interactive = settings.feedback.interactive if interactive is None else interactive
        report_feedback = generate_feedback(report, interactive=wants_interactive)
    return ValidationOutcome(success=True, report=report, feedback=report_feedback)


def check_template_sync(
    accessor: RepositoryAccessor,
    ref: str | None = None,
    *,
    feedback: bool = False,
    interactive: bool | None = None,
    config: TemplateCheckConfig | None = None,
) -> ValidationOutcome:
    """Blocking wrapper around ``check_template`` for callers without an event loop."""
    return asyncio.run(
        check_template(accessor, ref, feedback=feedback, interactive=interactive, config=config)
    )
