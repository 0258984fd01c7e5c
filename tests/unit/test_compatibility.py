"""Unit tests for platform compatibility checks."""

from __future__ import annotations

from typing import Any

from templatecheck.schema.models import DeductionCode, EntryKind, RepositoryEntry, Severity, TemplateManifest
from templatecheck.validation.compatibility import check_compatibility


def _file(path: str) -> RepositoryEntry:
    return RepositoryEntry(name=path.rsplit("/", 1)[-1], path=path, kind=EntryKind.FILE)


def _manifest(editable_fields: Any = None, preview_component: str | None = "Portfolio") -> TemplateManifest:
    return TemplateManifest(
        version="1.0.0",
        template_type=None,
        editable_fields=editable_fields,
        preview_component=preview_component,
    )


def test_components_directory_satisfies_ui_check() -> None:
    section = check_compatibility([_file("README.md")], [_file("components/Hero.tsx")], _manifest())
    assert section.issues == ()
    assert section.score == 20


def test_missing_components_and_preview_component_are_suggestions() -> None:
    section = check_compatibility([_file("README.md")], [], _manifest(preview_component=None))
    assert [(issue.severity, issue.code) for issue in section.issues] == [
        (Severity.SUGGESTION, DeductionCode.NO_UI_COMPONENTS),
        (Severity.SUGGESTION, DeductionCode.NO_PREVIEW_COMPONENT),
    ]
    assert section.score == 18


def test_invalid_root_file_names_warn() -> None:
    section = check_compatibility([_file("App.jsx"), _file("my notes.md"), _file("ok-file.txt")], [], _manifest())
    [issue] = section.issues
    assert issue.severity == Severity.WARNING
    assert issue.message == "Some files have invalid names: my notes.md"
    assert section.score == 17


def test_editable_fields_shape() -> None:
    root = [_file("index.js")]
    wrong = check_compatibility(root, [], _manifest(editable_fields="title"))
    assert [issue.code for issue in wrong.issues] == [DeductionCode.EDITABLE_FIELDS_INVALID]
    empty = check_compatibility(root, [], _manifest(editable_fields=[]))
    assert [issue.severity for issue in empty.issues] == [Severity.SUGGESTION]
    assert check_compatibility(root, [], _manifest(editable_fields=["title"])).issues == ()


def test_manifest_checks_skipped_without_manifest() -> None:
    section = check_compatibility([_file("index.js")], [], None)
    assert section.issues == ()
