"""templatecheck validate: score a template repository and report issues."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from templatecheck.accessor import GitHubRepositoryAccessor, LocalRepositoryAccessor, RepositoryAccessor
from templatecheck.config import ConfigLoadError, TemplateCheckConfig, load_config
from templatecheck.exceptions import AccessorError
from templatecheck.feedback.models import FeedbackReport
from templatecheck.schema.models import CompatibilityReport, Severity
from templatecheck.service import ValidationOutcome, check_template

console = Console()

_SEVERITY_STYLE = {
    Severity.ERROR: "red",
    Severity.WARNING: "yellow",
    Severity.SUGGESTION: "cyan",
}


def configure_logging(config: TemplateCheckConfig, verbose: bool) -> None:
    level = logging.DEBUG if verbose else getattr(logging, config.logging.level, logging.WARNING)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def _build_accessor(path: str, github: str | None, config: TemplateCheckConfig) -> RepositoryAccessor:
    if github:
        return GitHubRepositoryAccessor.from_slug(github, config=config.github)
    return LocalRepositoryAccessor(Path(path))


def render_report(report: CompatibilityReport, target: str) -> None:
    table = Table(title=f"Template validation: {target}")
    table.add_column("Section")
    table.add_column("Score", justify="right")
    table.add_column("Status")
    for section in report.sections:
        status = "[green]pass[/green]" if section.valid else "[red]fail[/red]"
        table.add_row(section.name.value, f"{section.score}/{section.max_score}", status)
    table.add_row("total", f"{report.score}/{report.max_score}", f"grade {report.grade.value}")
    console.print(table)
    for section in report.sections:
        for issue in section.issues:
            style = _SEVERITY_STYLE[issue.severity]
            console.print(f"  [{style}]{issue.severity.value}[/{style}] {escape(issue.message)}")
            console.print(f"      -> {escape(issue.suggestion)}", highlight=False)


def render_feedback(feedback: FeedbackReport) -> None:
    console.print(f"\n[bold]{feedback.summary.title}[/bold]")
    console.print(feedback.summary.message)
    for win in feedback.recommendations.quick_wins:
        console.print(f"  quick win: {win.title} ({win.time_estimate})")
    console.print("\n[bold]Next steps[/bold]")
    for step in feedback.next_steps.steps:
        console.print(f"  {step.priority}. {step.title}: {escape(step.description)} ({step.estimated_time})")
    console.print(f"  Total estimated time: {feedback.next_steps.total_estimated_time}")


def validate_command(
    path: str = typer.Argument(".", help="Path to a local template checkout."),
    ref: str = typer.Option("", "--ref", help="Git ref to validate (GitHub only)."),
    github: str = typer.Option("", "--github", help="Validate OWNER/REPO on GitHub instead of a local path."),
    json_output: bool = typer.Option(False, "--json", help="Print the result as JSON.", is_flag=True),
    feedback: bool = typer.Option(False, "--feedback", help="Include author feedback.", is_flag=True),
    interactive: bool = typer.Option(
        False, "--interactive", help="Add checklist and progress tracker to feedback.", is_flag=True
    ),
    strict: bool = typer.Option(False, "--strict", "-s", help="Treat warnings as failures.", is_flag=True),
    config: str = typer.Option("", "--config", help="Path to templatecheck.yaml."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging.", is_flag=True),
) -> None:
    """Validate a template repository and print its compatibility score."""
    try:
        settings = load_config(config or None)
    except ConfigLoadError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(2) from exc
    configure_logging(settings, verbose)

    target = github or str(Path(path).resolve())
    try:
        accessor = _build_accessor(path, github or None, settings)
    except (AccessorError, ValueError) as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(2) from exc

    outcome: ValidationOutcome = asyncio.run(
        check_template(
            accessor,
            ref or None,
            feedback=feedback or interactive,
            interactive=interactive or None,
            config=settings,
        )
    )
    if not outcome.success or outcome.report is None:
        if json_output:
            typer.echo(json.dumps(outcome.to_dict(), indent=2, sort_keys=True))
        typer.echo(f"Error: {outcome.error}", err=True)
        raise typer.Exit(2)

    report = outcome.report
    if json_output:
        typer.echo(json.dumps(outcome.to_dict(), indent=2, sort_keys=True))
    else:
        render_report(report, target)
        if outcome.feedback is not None:
            render_feedback(outcome.feedback)

    fails = not report.overall_valid or (strict and bool(report.warnings))
    if not json_output:
        label = "FAIL" if fails else "OK"
        typer.echo(f"{label}: {target} score={report.score}/{report.max_score} grade={report.grade.value}", err=fails)
    if fails:
        raise typer.Exit(1)
