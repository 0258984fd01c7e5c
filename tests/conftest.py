"""Shared test fixtures: small template repositories held in memory or on disk."""

from __future__ import annotations

import asyncio
import json
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any

import pytest

from templatecheck.accessor import InMemoryRepositoryAccessor
from templatecheck.schema.models import CompatibilityReport
from templatecheck.validation import CompatibilityScorer

VALID_MANIFEST: dict[str, Any] = {
    "version": "1.0.0",
    "name": "Minimal Portfolio",
    "description": "One page portfolio",
    "templateType": "json",
    "contentFiles": [
        {
            "path": "data.json",
            "type": "json",
            "schema": {
                "title": {"type": "string", "label": "Title", "required": True},
                "bio": {"type": "text", "label": "Bio"},
            },
        }
    ],
}


def template_files(manifest: Mapping[str, Any] | str | None = None) -> dict[str, str]:
    """Files of a template that scores 100; ``manifest`` replaces the config document."""
    if manifest is None:
        manifest = VALID_MANIFEST
    return {
        ".nebula/config.json": manifest if isinstance(manifest, str) else json.dumps(manifest),
        ".nebula/preview.png": "png-bytes",
        "README.md": "# Minimal Portfolio\n",
        "components/Portfolio.jsx": "export default function Portfolio() { return null }\n",
        "data.json": '{"title": "Hello", "bio": "Builder"}',
    }


def run_scorer(files: Mapping[str, str], max_concurrency: int = 8) -> CompatibilityReport:
    accessor = InMemoryRepositoryAccessor(files)
    return asyncio.run(CompatibilityScorer(accessor, max_concurrency=max_concurrency).validate())


@pytest.fixture
def valid_files() -> dict[str, str]:
    return template_files()


@pytest.fixture
def write_template(tmp_path: Path) -> Callable[[Mapping[str, str]], Path]:
    """Materialize a ``path -> text`` mapping under ``tmp_path``."""

    def _write(files: Mapping[str, str]) -> Path:
        for relative, text in files.items():
            target = tmp_path / relative
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(text, encoding="utf-8")
        return tmp_path

    return _write


@pytest.fixture
def make_files() -> Callable[..., dict[str, str]]:
    return template_files


@pytest.fixture
def score() -> Callable[..., CompatibilityReport]:
    return run_scorer
