"""Run the validation stages in order and fold them into a compatibility report.

Stages: structure, then (halting when the manifest is absent) config, content
and compatibility. Each stage returns an immutable section; ``aggregate``
combines them without touching earlier results.
"""

from __future__ import annotations

import logging

from templatecheck.accessor.base import RepositoryAccessor
from templatecheck.exceptions import AccessorError, EntryNotFoundError, ValidationRunError
from templatecheck.schema.models import (
    CompatibilityReport,
    SectionName,
    SectionResult,
    Severity,
    TemplateManifest,
)
from templatecheck.validation.compatibility import check_compatibility
from templatecheck.validation.constants import MANIFEST_PATH
from templatecheck.validation.content import DEFAULT_MAX_CONCURRENCY, ContentValidation, ContentValidator
from templatecheck.validation.manifest import ManifestValidation, ManifestValidator
from templatecheck.validation.scoring import (
    PASS_THRESHOLD,
    TOTAL_MAX_SCORE,
    build_recommendations,
    complexity_for,
    grade_for,
    is_overall_valid,
    limitations,
    supported_features,
)
from templatecheck.validation.structure import StructureAnalysis, StructureAnalyzer

logger = logging.getLogger(__name__)

_EMPTY_MANIFEST = TemplateManifest(version=None, template_type=None)


def aggregate(
    structure: StructureAnalysis,
    config: ManifestValidation | None = None,
    content: ContentValidation | None = None,
    compatibility: SectionResult | None = None,
) -> CompatibilityReport:
    """Fold stage results into a new report. ``config=None`` means the run halted."""
    sections: list[SectionResult] = [structure.section]
    for stage in (config.section if config else None, content.section if content else None, compatibility):
        if stage is not None:
            sections.append(stage)

    score = max(0, sum(section.score for section in sections))
    issues = [issue for section in sections for issue in section.issues]
    errors = [issue for issue in issues if issue.severity == Severity.ERROR]
    warnings = [issue for issue in issues if issue.severity == Severity.WARNING]
    halted = config is None
    overall_valid = not halted and is_overall_valid(score, issues)

    manifest = config.manifest if config is not None else None
    template_type = manifest.template_type if manifest is not None else None
    content_files = content.content_files if content is not None else ()
    nested_fields = config.nested_field_count if config is not None else 0

    return CompatibilityReport(
        sections=tuple(sections),
        score=score,
        max_score=TOTAL_MAX_SCORE,
        grade=grade_for(score, TOTAL_MAX_SCORE),
        overall_valid=overall_valid,
        has_required_files=structure.has_required_files,
        halted=halted,
        complexity=complexity_for(len(content_files), len(structure.root_entries), nested_fields),
        template_type=template_type,
        content_file_count=len(content_files),
        recommendations=build_recommendations(
            score,
            errors,
            warnings,
            template_type,
            content.section if content is not None else None,
        ),
        supported_features=supported_features(manifest),
        limitations=limitations(score, errors, warnings),
        platform_compatible=overall_valid and score >= PASS_THRESHOLD,
    )


class CompatibilityScorer:
    """Validate one repository snapshot through an accessor.

    Instances hold no per-run state; ``validate`` may be awaited concurrently.
    Accessor failures surface as ``ValidationRunError`` and never as issues.
    """

    def __init__(
        self,
        accessor: RepositoryAccessor,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
    ) -> None:
        self.accessor = accessor
        self.structure_analyzer = StructureAnalyzer()
        self.manifest_validator = ManifestValidator()
        self.content_validator = ContentValidator(max_concurrency=max_concurrency)

    async def validate(self, ref: str | None = None) -> CompatibilityReport:
        logger.debug("stage %s ref=%s", SectionName.STRUCTURE.value, ref)
        try:
            structure = await self.structure_analyzer.run(self.accessor, ref)
        except (AccessorError, EntryNotFoundError) as exc:
            logger.warning("cannot list repository contents: %s", exc)
            raise ValidationRunError(
                "cannot list repository contents", stage=SectionName.STRUCTURE.value, cause=exc
            ) from exc
        if not structure.has_required_files:
            logger.warning("%s not found; skipping remaining stages", MANIFEST_PATH)
            return aggregate(structure)

        logger.debug("stage %s", SectionName.CONFIG.value)
        try:
            manifest_text = await self.accessor.read_file(MANIFEST_PATH, ref)
        except (AccessorError, EntryNotFoundError) as exc:
            logger.warning("cannot read manifest: %s", exc)
            raise ValidationRunError("cannot read manifest", stage=SectionName.CONFIG.value, cause=exc) from exc
        config = self.manifest_validator.validate_text(manifest_text)
        manifest = config.manifest or _EMPTY_MANIFEST

        logger.debug("stage %s (%d content file(s))", SectionName.CONTENT.value, len(manifest.content_files))
        try:
            content = await self.content_validator.validate(self.accessor, manifest, ref)
        except AccessorError as exc:
            logger.warning("cannot read content files: %s", exc)
            raise ValidationRunError("cannot read content files", stage=SectionName.CONTENT.value, cause=exc) from exc

        logger.debug("stage %s", SectionName.COMPATIBILITY.value)
        compatibility = check_compatibility(
            structure.root_entries,
            structure.listing("components"),
            config.manifest,
        )
        report = aggregate(structure, config, content, compatibility)
        logger.info(
            "validation finished: score=%d grade=%s valid=%s",
            report.score,
            report.grade.value,
            report.overall_valid,
        )
        return report
