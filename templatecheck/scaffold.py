"""Starter manifests and template-type detection for new templates."""

from __future__ import annotations

import copy
from collections.abc import Sequence
from typing import Any

from templatecheck.schema.models import RepositoryEntry, TemplateType

DEFAULT_TEMPLATE_NAME = "My Portfolio Template"
DEFAULT_DESCRIPTION = "A custom portfolio template"
DEFAULT_PREVIEW_COMPONENT = "PortfolioTemplate"

_FRONTMATTER_SCHEMA: dict[str, Any] = {
    "frontmatter": {
        "title": {"type": "string", "label": "Title", "required": True},
        "date": {"type": "date", "label": "Date"},
    },
    "content": {"type": "markdown", "label": "Content"},
}


def detect_template_type(entries: Sequence[RepositoryEntry]) -> TemplateType:
    """Guess the template type from file extensions; json when nothing tells."""
    has_json = any(entry.is_file and entry.name.lower().endswith(".json") for entry in entries)
    has_markdown = any(
        entry.is_file and entry.name.lower().endswith((".md", ".markdown")) for entry in entries
    )
    if has_json and has_markdown:
        return TemplateType.HYBRID
    if has_markdown:
        return TemplateType.MARKDOWN
    return TemplateType.JSON


def _content_files(template_type: TemplateType) -> list[dict[str, Any]]:
    if template_type == TemplateType.MARKDOWN:
        return [{"path": "content/about.md", "type": "markdown", "schema": copy.deepcopy(_FRONTMATTER_SCHEMA)}]
    if template_type == TemplateType.HYBRID:
        return [
            {
                "path": "config.json",
                "type": "json",
                "schema": {
                    "siteTitle": {"type": "string", "label": "Site Title", "required": True},
                    "description": {"type": "text", "label": "Site Description"},
                },
            },
            {"path": "content/*.md", "type": "markdown", "schema": copy.deepcopy(_FRONTMATTER_SCHEMA)},
        ]
    return [
        {
            "path": "data.json",
            "type": "json",
            "schema": {
                "title": {"type": "string", "label": "Portfolio Title", "required": True},
                "description": {"type": "text", "label": "Description", "maxLength": 500},
                "author": {"type": "string", "label": "Author Name", "required": True},
            },
        }
    ]


def generate_config_template(
    template_type: TemplateType | str = TemplateType.JSON,
    name: str | None = None,
    description: str | None = None,
    preview_component: str | None = None,
) -> dict[str, Any]:
    """Return a starter ``.nebula/config.json`` document for ``template_type``."""
    kind = TemplateType(template_type)
    return {
        "version": "1.0.0",
        "name": name or DEFAULT_TEMPLATE_NAME,
        "description": description or DEFAULT_DESCRIPTION,
        "templateType": kind.value,
        "previewComponent": preview_component or DEFAULT_PREVIEW_COMPONENT,
        "contentFiles": _content_files(kind),
        "assets": {
            "allowedTypes": ["image/jpeg", "image/png", "image/webp"],
            "maxSize": "5MB",
            "paths": ["public/images", "assets"],
        },
    }
