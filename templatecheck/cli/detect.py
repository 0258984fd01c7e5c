"""templatecheck detect-type: guess a template type from root file extensions."""

from __future__ import annotations

import asyncio
from pathlib import Path

import typer

from templatecheck.accessor import LocalRepositoryAccessor
from templatecheck.exceptions import AccessorError
from templatecheck.scaffold import detect_template_type


def detect_command(
    path: str = typer.Argument(".", help="Template repository root."),
) -> None:
    """Print json, markdown or hybrid."""
    try:
        accessor = LocalRepositoryAccessor(Path(path))
        entries = asyncio.run(accessor.list_entries(""))
    except AccessorError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(2) from exc
    typer.echo(detect_template_type(entries).value)
