"""Static remediation content: action guides, examples, categories and resource links."""

from __future__ import annotations

import json

from templatecheck.feedback.models import ActionGuide, CodeExample, ResourceLink, Resources
from templatecheck.scaffold import generate_config_template
from templatecheck.validation.constants import MANIFEST_PATH

STATUS_TEMPLATES: dict[str, tuple[str, str, str]] = {
    "excellent": (
        "Template Validation Successful",
        "Your template meets all platform requirements and is ready for use.",
        "positive",
    ),
    "good": (
        "Template Has Some Issues",
        "Your template is functional but has some areas for improvement.",
        "cautionary",
    ),
    "needs-work": (
        "Template Validation Failed",
        "Your template has critical issues that must be fixed before it can be used.",
        "critical",
    ),
    "improvements-needed": (
        "Suggestions for Improvement",
        "Here are some ways to make your template even better.",
        "helpful",
    ),
}

# Checked in order; the first category with a matching keyword wins.
CATEGORY_KEYWORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("structure", ("missing", "directory", "file", "required")),
    ("configuration", ("config", "schema", "json", "field")),
    ("content", ("content", "data", "markdown", "empty")),
    ("naming", ("name", "naming", "convention")),
    ("compatibility", ("component", "react", "preview")),
    ("documentation", ("readme", "documentation", "description")),
)
DEFAULT_CATEGORY = "general"

_STARTER_EXAMPLE = json.dumps(
    {
        "version": "1.0.0",
        "name": "My Portfolio Template",
        "templateType": "json",
        "contentFiles": [
            {
                "path": "data.json",
                "type": "json",
                "schema": {"title": {"type": "string", "label": "Portfolio Title", "required": True}},
            }
        ],
    },
    indent=2,
)

ACTION_GUIDES: dict[str, ActionGuide] = {
    "missing-config": ActionGuide(
        key="missing-config",
        title="Create Template Configuration",
        steps=(
            "Create a `.nebula` directory in your repository root",
            "Add a `config.json` file inside the `.nebula` directory",
            "Define your template structure using the configuration schema",
            "Specify content files and their editing schemas",
        ),
        example=_STARTER_EXAMPLE,
    ),
    "missing-preview": ActionGuide(
        key="missing-preview",
        title="Add Template Preview Image",
        steps=(
            "Create a preview image of your template (recommended: 800x600px)",
            "Save it as `preview.png` in the `.nebula` directory",
            "Ensure the image shows the key features of your template",
            "Use a high-quality screenshot or mockup",
        ),
    ),
    "invalid-schema": ActionGuide(
        key="invalid-schema",
        title="Fix Schema Definition",
        steps=(
            "Review the schema definition in your config.json",
            "Ensure all field types are supported",
            'Add required properties like "type" and "label"',
            "Test your schema with sample data",
        ),
    ),
    "missing-content": ActionGuide(
        key="missing-content",
        title="Add Content Files",
        steps=(
            "Create the content files specified in your configuration",
            "Ensure file paths match those in config.json",
            "Add sample content to demonstrate your template",
            "Validate JSON syntax if using JSON files",
        ),
    ),
}

# (substring of the lowercased message, guide key), first match wins
ACTION_GUIDE_TRIGGERS: tuple[tuple[str, str], ...] = (
    ("config.json", "missing-config"),
    ("preview", "missing-preview"),
    ("schema", "invalid-schema"),
    ("content file", "missing-content"),
)

CONFIG_EXAMPLE = CodeExample(
    language="json",
    title=f"Example {MANIFEST_PATH}",
    filename=MANIFEST_PATH,
    code=json.dumps(generate_config_template("json"), indent=2),
)

SCHEMA_EXAMPLE = CodeExample(
    language="json",
    title="Example Schema Definition",
    code=json.dumps(
        {
            "personalInfo": {
                "type": "object",
                "label": "Personal Information",
                "properties": {
                    "name": {"type": "string", "label": "Full Name", "required": True},
                    "email": {"type": "email", "label": "Email Address"},
                },
            },
            "projects": {
                "type": "array",
                "label": "Projects",
                "items": {
                    "type": "object",
                    "properties": {
                        "title": {"type": "string", "label": "Project Title", "required": True},
                        "description": {"type": "text", "label": "Description"},
                    },
                },
            },
        },
        indent=2,
    ),
)

RESOURCES = Resources(
    documentation=(
        ResourceLink(
            "Template Configuration Guide",
            "/docs/template-configuration",
            "Complete guide to configuring your template",
        ),
        ResourceLink(
            "Schema Definition Reference",
            "/docs/schema-reference",
            "Reference for all supported field types and validation rules",
        ),
        ResourceLink("Template Examples", "/docs/template-examples", "Example templates for different use cases"),
    ),
    tools=(
        ResourceLink("Template Validator", "/tools/validator", "Online tool to validate your template configuration"),
        ResourceLink("Schema Builder", "/tools/schema-builder", "Visual tool to build template schemas"),
    ),
    community=(
        ResourceLink(
            "Template Creators Discord",
            "/community/discord",
            "Join other template creators for help and discussion",
        ),
        ResourceLink("Template Gallery", "/templates", "Browse existing templates for inspiration"),
    ),
)
