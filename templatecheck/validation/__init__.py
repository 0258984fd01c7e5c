"""Template validation pipeline."""

from templatecheck.validation.compatibility import check_compatibility
from templatecheck.validation.content import ContentValidation, ContentValidator, check_document_shape
from templatecheck.validation.manifest import (
    ManifestDraft,
    ManifestParseFailure,
    ManifestValidation,
    ManifestValidator,
    parse_manifest_document,
)
from templatecheck.validation.patterns import WildcardPattern, compile_segment, match_entries, split_wildcard
from templatecheck.validation.schema_walker import count_fields, parse_schema, path_depth, walk_schema
from templatecheck.validation.scorer import CompatibilityScorer, aggregate
from templatecheck.validation.scoring import DEDUCTIONS, SECTION_MAX_SCORES, build_section, grade_for
from templatecheck.validation.structure import StructureAnalysis, StructureAnalyzer

__all__ = [
    "CompatibilityScorer",
    "ContentValidation",
    "ContentValidator",
    "DEDUCTIONS",
    "ManifestDraft",
    "ManifestParseFailure",
    "ManifestValidation",
    "ManifestValidator",
    "SECTION_MAX_SCORES",
    "StructureAnalysis",
    "StructureAnalyzer",
    "WildcardPattern",
    "aggregate",
    "build_section",
    "check_compatibility",
    "check_document_shape",
    "compile_segment",
    "count_fields",
    "grade_for",
    "match_entries",
    "parse_manifest_document",
    "parse_schema",
    "path_depth",
    "split_wildcard",
    "walk_schema",
]
