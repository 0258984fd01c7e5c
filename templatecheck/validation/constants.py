"""Fixed repository layout names the validators look for."""

from __future__ import annotations

MANIFEST_DIR = ".nebula"
MANIFEST_PATH = ".nebula/config.json"
PREVIEW_PATHS = (
    ".nebula/preview.png",
    ".nebula/preview.jpg",
    ".nebula/preview.jpeg",
    ".nebula/preview.webp",
)
README_NAMES = frozenset({"readme.md", "readme.txt", "readme"})
KNOWN_CONTENT_DIRS = (".nebula", "components", "public", "content", "data", "assets")
STANDARD_LAYOUT_DIRS = ("components", "public")
BONUS_FILES = ("package.json", "LICENSE", ".gitignore")
UI_COMPONENT_EXTENSIONS = (".js", ".jsx", ".ts", ".tsx", ".vue", ".svelte")

SUPPORTED_TEMPLATE_TYPES = ("json", "markdown", "hybrid")
SUPPORTED_DOCUMENT_TYPES = ("json", "markdown", "yaml")
REQUIRED_MANIFEST_FIELDS = ("version", "templateType", "contentFiles")

DOCUMENT_TYPE_BY_EXTENSION = {
    ".json": "json",
    ".md": "markdown",
    ".markdown": "markdown",
    ".yaml": "yaml",
    ".yml": "yaml",
}
