"""patternshift analyze command."""

from __future__ import annotations

from pathlib import Path

import click

from patternshift.core.config import load_config
from patternshift.core.errors import PatternShiftError
from patternshift.core.output import console, print_analysis, print_matches
from patternshift.refactor.engine import RefactorEngine


@click.command()
@click.argument("description")
@click.option("--threshold", type=click.FloatRange(0.0, 1.0), default=None,
              help="Maximum similarity distance (0 = identical)")
@click.option("--limit", type=click.IntRange(min=1), default=None,
              help="Maximum number of candidates to retrieve")
@click.option("--target", "-t", "target", default=".", help="Project directory (default: current dir)")
def analyze(description: str, threshold: float | None, limit: int | None, target: str):
    """Analyze code matching DESCRIPTION without changing anything."""
    project_path = Path(target).resolve()
    try:
        engine = RefactorEngine(project_path, load_config(project_path))
        run = engine.analyze(description, threshold, limit)
    except PatternShiftError as e:
        console.print(f"\n  [red]{e}[/red]\n")
        raise SystemExit(1)

    if not run.matches:
        console.print(f"\n  No patterns found matching '{description}'.\n")
        return

    print_matches(run.matches)
    print_analysis(run.analysis)
