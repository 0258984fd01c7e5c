"""CLI tools: templatecheck validate, templatecheck init, templatecheck detect-type."""

import sys
from importlib import metadata

import typer

from templatecheck.cli.detect import detect_command
from templatecheck.cli.init_template import init_command
from templatecheck.cli.validate import validate_command

app = typer.Typer(
    name="templatecheck",
    help="Validate and score portfolio template repositories.",
    no_args_is_help=True,
)

app.command("validate")(validate_command)
app.command("init")(init_command)
app.command("detect-type")(detect_command)


def _print_version_and_exit() -> None:
    """Print installed package version and exit."""
    try:
        version = metadata.version("templatecheck")
    except metadata.PackageNotFoundError:
        version = "unknown"
    print(f"templatecheck {version}")
    raise SystemExit(0)


def main() -> None:
    """CLI entry point."""
    if "--version" in sys.argv[1:] or "-V" in sys.argv[1:]:
        _print_version_and_exit()
    try:
        app()
    except KeyboardInterrupt:
        sys.exit(130)


__all__ = ["app", "main"]
