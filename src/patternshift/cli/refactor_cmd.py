"""patternshift refactor command."""

from __future__ import annotations

from pathlib import Path

import click
from rich.prompt import Confirm

from patternshift.core.config import load_config
from patternshift.core.errors import PatternShiftError
from patternshift.core.models import PlanStep
from patternshift.core.output import (
    console,
    print_analysis,
    print_execution_result,
    print_matches,
    print_plan,
    print_restore_result,
    print_step_preview,
)
from patternshift.refactor.engine import RefactorEngine


def confirm_step(step: PlanStep) -> bool:
    """Interactive confirmation for one plan step."""
    print_step_preview(step)
    return Confirm.ask(f"  Apply changes to {step.relative_path}?", default=False)


@click.command()
@click.argument("description")
@click.option("--threshold", type=click.FloatRange(0.0, 1.0), default=None,
              help="Maximum similarity distance (0 = identical)")
@click.option("--limit", type=click.IntRange(min=1), default=None,
              help="Maximum number of candidates to retrieve")
@click.option("--target-pattern", type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help="File containing an example of the desired pattern")
@click.option("--execute", is_flag=True, help="Apply changes (default is a dry run)")
@click.option("--yes", "-y", "auto_accept", is_flag=True, help="Skip per-file confirmation")
@click.option("--target", "-t", "target", default=".", help="Project directory (default: current dir)")
def refactor(
    description: str,
    threshold: float | None,
    limit: int | None,
    target_pattern: Path | None,
    execute: bool,
    auto_accept: bool,
    target: str,
):
    """Find code matching DESCRIPTION and refactor it consistently.

    Runs as a dry run unless --execute is given. Live runs back up every
    affected file before changing anything.
    """
    project_path = Path(target).resolve()
    try:
        config = load_config(project_path)
        engine = RefactorEngine(project_path, config, confirm=confirm_step)
        run = engine.prepare(description, threshold=threshold, limit=limit)
    except PatternShiftError as e:
        console.print(f"\n  [red]{e}[/red]\n")
        raise SystemExit(1)

    if not run.matches:
        console.print(f"\n  No patterns found matching '{description}'.")
        console.print("  Try a higher --threshold or a broader description.\n")
        return

    # shown before any per-file confirmation
    print_matches(run.matches)
    print_analysis(run.analysis)
    print_plan(run.plan)

    try:
        engine.execute(
            run,
            dry_run=not execute,
            auto_accept=auto_accept or None,
            target_pattern=target_pattern.read_text() if target_pattern else None,
        )
    except PatternShiftError as e:
        console.print(f"\n  [red]{e}[/red]\n")
        raise SystemExit(1)

    print_execution_result(run.result, dry_run=run.dry_run)
    if run.restore is not None:
        console.print("  [bold]Changes rolled back after failures[/bold]")
        print_restore_result(run.restore)
        console.print()

    if run.result.has_failures:
        raise SystemExit(1)
