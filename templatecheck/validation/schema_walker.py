"""Parse and validate field-schema declarations.

A content file's ``schema`` is a mapping of field name to definition. Parsing
shapes the raw mapping into a tree of typed ``FieldSchema`` nodes and never
fails: anything it cannot shape becomes a ``MalformedField`` or an
``UnsupportedField``. Walking visits every node once and returns a flat list
of path-qualified issues.

Paths use ``parent.child`` for object members and ``parent[]`` for array items.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator, Mapping, Sequence
from typing import Any

from templatecheck.schema.models import (
    ArrayField,
    DeductionCode,
    FieldKind,
    FieldSchema,
    MalformedField,
    ObjectField,
    ScalarField,
    SelectField,
    Severity,
    UnsupportedField,
    ValidationIssue,
)

logger = logging.getLogger(__name__)

MAX_SCHEMA_DEPTH = 32
FIELD_NAME_RE = re.compile(r"[A-Za-z][A-Za-z0-9_]*")
FILE_SIZE_RE = re.compile(r"^\d+(\.\d+)?\s*(B|KB|MB|GB)$", re.IGNORECASE)
CONSTRAINT_KEYS = (
    "minLength",
    "maxLength",
    "min",
    "max",
    "pattern",
    "minItems",
    "maxItems",
    "options",
    "fileSize",
    "fileType",
)
_COUNT_KEYS = ("minLength", "maxLength", "minItems", "maxItems")
_NUMERIC_KEYS = ("min", "max")
_RANGES = (("minLength", "maxLength"), ("min", "max"), ("minItems", "maxItems"))
_SUPPORTED_KINDS = frozenset(kind.value for kind in FieldKind)
_CODE_BY_SEVERITY = {
    Severity.ERROR: DeductionCode.SCHEMA_ERROR,
    Severity.WARNING: DeductionCode.SCHEMA_WARNING,
    Severity.SUGGESTION: DeductionCode.SCHEMA_SUGGESTION,
}


def qualify(parent: str, name: str) -> str:
    return f"{parent}.{name}" if parent else name


def path_depth(path: str) -> int:
    """Count path segments; each ``[]`` is a segment of its own."""
    depth = 0
    for segment in path.split("."):
        while segment.endswith("[]"):
            depth += 1
            segment = segment[:-2]
        if segment:
            depth += 1
    return depth


class _SchemaParser:
    """Shape raw definitions into nodes, guarding against self-reference and runaway depth."""

    def __init__(self) -> None:
        self._active: set[int] = set()

    def parse_fields(self, raw: Mapping[Any, Any], parent_path: str, depth: int) -> tuple[FieldSchema, ...]:
        return tuple(
            self.parse_node(str(name), qualify(parent_path, str(name)), definition, depth)
            for name, definition in raw.items()
        )

    def parse_node(
        self,
        name: str,
        path: str,
        definition: Any,
        depth: int,
        is_item: bool = False,
    ) -> FieldSchema:
        if depth > MAX_SCHEMA_DEPTH:
            return MalformedField(
                name=name,
                path=path,
                depth=depth,
                is_item=is_item,
                reason=f"is nested deeper than {MAX_SCHEMA_DEPTH} levels",
            )
        if is_item and isinstance(definition, str):
            definition = {"type": definition}
        if not isinstance(definition, Mapping):
            return MalformedField(
                name=name,
                path=path,
                depth=depth,
                is_item=is_item,
                reason="must be an object",
            )
        marker = id(definition)
        if marker in self._active:
            return MalformedField(
                name=name,
                path=path,
                depth=depth,
                is_item=is_item,
                reason="references its own definition",
            )
        self._active.add(marker)
        try:
            return self._shape(name, path, definition, depth, is_item)
        finally:
            self._active.discard(marker)

    def _shape(
        self,
        name: str,
        path: str,
        definition: Mapping[Any, Any],
        depth: int,
        is_item: bool,
    ) -> FieldSchema:
        common: dict[str, Any] = {
            "name": name,
            "path": path,
            "depth": depth,
            "label": definition.get("label"),
            "required": definition.get("required"),
            "constraints": {key: definition[key] for key in CONSTRAINT_KEYS if key in definition},
            "is_item": is_item,
        }
        declared = definition.get("type")
        if declared is None:
            properties = definition.get("properties")
            if isinstance(properties, Mapping):
                return ObjectField(**common, children=self.parse_fields(properties, path, depth + 1))
            if definition and all(isinstance(value, Mapping) for value in definition.values()):
                # untyped group such as markdown "frontmatter"
                return ObjectField(
                    name=name,
                    path=path,
                    depth=depth,
                    is_item=is_item,
                    children=self.parse_fields(definition, path, depth + 1),
                    implicit_group=True,
                )
            return ScalarField(**common, field_kind=FieldKind.STRING, implicit_kind=True)

        if not isinstance(declared, str) or declared not in _SUPPORTED_KINDS:
            return UnsupportedField(**common, declared_kind=declared)

        kind = FieldKind(declared)
        if kind == FieldKind.OBJECT:
            properties = definition.get("properties")
            if properties is None:
                return ObjectField(**common)
            if not isinstance(properties, Mapping):
                common["constraints"]["properties"] = properties
                return ObjectField(**common)
            return ObjectField(**common, children=self.parse_fields(properties, path, depth + 1))
        if kind == FieldKind.ARRAY:
            items = definition.get("items")
            item = None if items is None else self.parse_node("", f"{path}[]", items, depth + 1, is_item=True)
            return ArrayField(**common, item=item)
        if kind == FieldKind.SELECT:
            return SelectField(**common, options=definition.get("options"))
        return ScalarField(**common, field_kind=kind)


def parse_schema(raw: Any, *, base_path: str = "") -> tuple[FieldSchema, ...]:
    """Shape a raw schema mapping into root nodes. Non-mapping input yields no nodes."""
    if not isinstance(raw, Mapping):
        return ()
    depth = path_depth(base_path) + 1
    return _SchemaParser().parse_fields(raw, base_path, depth)


def iter_nodes(nodes: Sequence[FieldSchema]) -> Iterator[FieldSchema]:
    """Yield every node depth-first in declaration order."""
    stack = list(reversed(nodes))
    while stack:
        node = stack.pop()
        yield node
        if isinstance(node, ObjectField):
            stack.extend(reversed(node.children))
        elif isinstance(node, ArrayField) and node.item is not None:
            stack.append(node.item)


def count_fields(nodes: Sequence[FieldSchema]) -> int:
    """Number of named fields; array item nodes are not fields themselves."""
    return sum(1 for node in iter_nodes(nodes) if not node.is_item)


def _issue(severity: Severity, node: FieldSchema, message: str, suggestion: str) -> ValidationIssue:
    return ValidationIssue(
        severity=severity,
        message=message,
        suggestion=suggestion,
        path=node.path,
        code=_CODE_BY_SEVERITY[severity],
    )


def _is_count(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _check_constraints(node: FieldSchema) -> list[ValidationIssue]:
    found: list[ValidationIssue] = []
    constraints = node.constraints
    for key in _COUNT_KEYS:
        if key in constraints and not _is_count(constraints[key]):
            found.append(
                _issue(
                    Severity.WARNING,
                    node,
                    f"{node.path}.{key} must be a non-negative integer",
                    f"Set {key} to a whole number of 0 or more",
                )
            )
    for key in _NUMERIC_KEYS:
        if key in constraints and not _is_number(constraints[key]):
            found.append(
                _issue(Severity.WARNING, node, f"{node.path}.{key} must be a number", f"Set {key} to a numeric value")
            )
    if "pattern" in constraints:
        pattern = constraints["pattern"]
        valid = isinstance(pattern, str)
        if valid:
            try:
                re.compile(pattern)
            except (re.error, OverflowError):
                valid = False
        if not valid:
            found.append(
                _issue(
                    Severity.WARNING,
                    node,
                    f"{node.path}.pattern is not a valid regular expression",
                    "Provide the pattern as a well-formed regular expression string",
                )
            )
    if "fileSize" in constraints:
        size = constraints["fileSize"]
        valid = (_is_number(size) and size > 0) or (isinstance(size, str) and FILE_SIZE_RE.match(size.strip()))
        if not valid:
            found.append(
                _issue(
                    Severity.WARNING,
                    node,
                    f"{node.path}.fileSize must be a positive number or a size like \"5MB\"",
                    "Specify the maximum file size with units",
                )
            )
    if "fileType" in constraints:
        file_type = constraints["fileType"]
        valid = isinstance(file_type, str) or (
            isinstance(file_type, list) and all(isinstance(item, str) for item in file_type)
        )
        if not valid:
            found.append(
                _issue(
                    Severity.WARNING,
                    node,
                    f"{node.path}.fileType must be a string or an array of strings",
                    "List accepted file types, e.g. [\"image/png\", \"image/jpeg\"]",
                )
            )
    for low_key, high_key in _RANGES:
        low, high = constraints.get(low_key), constraints.get(high_key)
        if _is_number(low) and _is_number(high) and low > high:
            found.append(
                _issue(
                    Severity.WARNING,
                    node,
                    f"{node.path}.{low_key} ({low}) is greater than {high_key} ({high})",
                    f"Make {low_key} less than or equal to {high_key}",
                )
            )
    return found


def _check_node(node: FieldSchema) -> list[ValidationIssue]:
    found: list[ValidationIssue] = []
    if isinstance(node, MalformedField):
        found.append(
            _issue(
                Severity.ERROR,
                node,
                f"{node.path} {node.reason}",
                "Define field properties as an object with type, label, etc.",
            )
        )
        return found
    if not node.is_item and not FIELD_NAME_RE.fullmatch(node.name):
        found.append(
            _issue(Severity.WARNING, node, f"{node.path} has invalid field name", "Use camelCase or snake_case for field names")
        )
    if isinstance(node, UnsupportedField):
        supported = ", ".join(kind.value for kind in FieldKind)
        found.append(
            _issue(
                Severity.ERROR,
                node,
                f"{node.path} has unsupported type: {node.declared_kind}",
                f"Use supported types: {supported}",
            )
        )
    if isinstance(node, ScalarField) and node.implicit_kind:
        found.append(
            _issue(Severity.WARNING, node, f"{node.path} has no type; treated as string", "Add a \"type\" to the field definition")
        )
    if node.label is not None and not isinstance(node.label, str):
        found.append(
            _issue(Severity.WARNING, node, f"{node.path}.label must be a string", "Provide a descriptive label for the field")
        )
    if node.required is not None and not isinstance(node.required, bool):
        found.append(
            _issue(Severity.WARNING, node, f"{node.path}.required must be true or false", "Use a boolean for required")
        )
    found.extend(_check_constraints(node))
    if isinstance(node, SelectField):
        if node.options is None:
            found.append(
                _issue(Severity.SUGGESTION, node, f"{node.path} has no options", "List the values users can pick from")
            )
        elif not isinstance(node.options, list):
            found.append(
                _issue(
                    Severity.WARNING,
                    node,
                    f"{node.path}.options must be an array",
                    "Provide options as an array of values or objects",
                )
            )
    elif isinstance(node, ObjectField) and not node.implicit_group:
        if "properties" in node.constraints:
            found.append(
                _issue(
                    Severity.WARNING,
                    node,
                    f"{node.path}.properties must be an object",
                    "Map each property name to its field definition",
                )
            )
        elif not node.children:
            found.append(
                _issue(Severity.SUGGESTION, node, f"{node.path} has no properties", "Describe the object's fields under \"properties\"")
            )
    elif isinstance(node, ArrayField) and node.item is None:
        found.append(
            _issue(Severity.SUGGESTION, node, f"{node.path} has no item definition", "Describe one element under \"items\"")
        )
    return found


def walk_schema(nodes: Sequence[FieldSchema]) -> tuple[ValidationIssue, ...]:
    """Validate every node once; issues come back in visiting order."""
    issues: list[ValidationIssue] = []
    for node in iter_nodes(nodes):
        issues.extend(_check_node(node))
    logger.debug("schema walk produced %d issue(s)", len(issues))
    return tuple(issues)


def validate_schema(raw: Any, *, base_path: str = "") -> tuple[tuple[FieldSchema, ...], tuple[ValidationIssue, ...]]:
    """Parse then walk; convenience for callers that need both."""
    nodes = parse_schema(raw, base_path=base_path)
    return nodes, walk_schema(nodes)
