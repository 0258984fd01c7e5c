"""templatecheck init: write a starter .nebula/config.json."""

from __future__ import annotations

import json
from pathlib import Path

import typer
from rich.console import Console

from templatecheck.scaffold import generate_config_template
from templatecheck.schema.models import TemplateType
from templatecheck.validation.constants import MANIFEST_PATH

console = Console()


def init_template(
    path: str = ".",
    template_type: TemplateType | str = TemplateType.JSON,
    name: str | None = None,
    force: bool = False,
) -> Path:
    """Create ``.nebula/config.json`` under ``path``; refuse to overwrite unless ``force``."""
    output_path = Path(path).resolve() / MANIFEST_PATH
    if output_path.exists() and not force:
        raise FileExistsError(f"Manifest already exists: {output_path}")
    output_path.parent.mkdir(parents=True, exist_ok=True)
    document = generate_config_template(template_type, name=name)
    output_path.write_text(json.dumps(document, indent=2) + "\n", encoding="utf-8")
    return output_path


def init_command(
    path: str = typer.Argument(".", help="Template repository root."),
    template_type: str = typer.Option("json", "--type", "-t", help="Template type: json, markdown or hybrid."),
    name: str = typer.Option("", "--name", help="Template display name."),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing manifest.", is_flag=True),
) -> None:
    """Generate a starter template manifest."""
    try:
        kind = TemplateType(template_type.strip().lower())
    except ValueError as exc:
        choices = ", ".join(t.value for t in TemplateType)
        raise typer.BadParameter(f"must be one of: {choices}", param_hint="--type") from exc
    try:
        output_path = init_template(path=path, template_type=kind, name=name or None, force=force)
    except FileExistsError as exc:
        typer.echo(f"Error: {exc} (use --force to overwrite)", err=True)
        raise typer.Exit(1) from exc
    console.print(f"[green]Created[/green] {output_path}")
