"""Rich terminal formatting for PatternShift output."""

from __future__ import annotations

from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table
from rich.text import Text

from patternshift.core.models import (
    Backup,
    ExecutionResult,
    PatternAnalysis,
    PatternMatch,
    PlanStep,
    RestoreResult,
    RiskTier,
)

console = Console()
error_console = Console(stderr=True)


RISK_COLORS = {
    RiskTier.LOW: "green",
    RiskTier.MEDIUM: "yellow",
    RiskTier.HIGH: "red",
}


def print_matches(matches: list[PatternMatch]) -> None:
    """Print matched patterns as a table."""
    table = Table(title=f"{len(matches)} similar pattern(s)", title_justify="left")
    table.add_column("#", justify="right", style="dim")
    table.add_column("File")
    table.add_column("Distance", justify="right")
    table.add_column("Lines", justify="right")
    table.add_column("Symbols")
    for i, match in enumerate(matches, 1):
        symbols = ", ".join(match.extracted_symbols[:4])
        if len(match.extracted_symbols) > 4:
            symbols += f" (+{len(match.extracted_symbols) - 4})"
        table.add_row(
            str(i),
            str(match.file_path),
            f"{match.similarity_distance:.3f}",
            str(match.line_count),
            symbols,
        )
    console.print(table)


def print_analysis(analysis: PatternAnalysis) -> None:
    """Print a pattern analysis panel."""
    lines = []
    sections = [
        ("Common patterns", analysis.common_patterns),
        ("Variations", analysis.variations),
        ("Refactoring opportunities", analysis.refactoring_opportunities),
    ]
    for title, items in sections:
        if not items:
            continue
        lines.append(f"  [bold]{title}[/bold]")
        for item in items:
            lines.append(f"    - {item}")
        lines.append("")

    lines.append("  [bold]Suggested approach[/bold]")
    for line in analysis.suggested_approach.splitlines() or [""]:
        lines.append(f"    {line}")

    border = "cyan" if analysis.parsed else "yellow"
    title = "Pattern Analysis" if analysis.parsed else "Pattern Analysis (unstructured)"
    console.print(Panel("\n".join(lines), title=f"[bold]{title}[/bold]", border_style=border))


def print_plan(plan: list[PlanStep]) -> None:
    """Print the ordered change plan."""
    console.print(f"\n  [bold]Refactoring plan[/bold] ({len(plan)} file(s))\n")
    for i, step in enumerate(plan, 1):
        color = RISK_COLORS[step.risk_tier]
        console.print(
            f"  {i:>2}. [{color}]{step.risk_tier.value:<6}[/{color}]  "
            f"{step.relative_path}  [dim](distance {step.similarity_distance:.3f})[/dim]"
        )
    console.print()


def print_step_preview(step: PlanStep, max_lines: int = 20) -> None:
    """Show a step before asking for confirmation."""
    color = RISK_COLORS[step.risk_tier]
    console.print(
        f"\n  [bold]{step.relative_path}[/bold]  "
        f"[{color}]{step.risk_tier.value} risk[/{color}]"
    )
    excerpt = "\n".join(step.original_content.splitlines()[:max_lines])
    lexer = Syntax.guess_lexer(str(step.absolute_path), code=excerpt)
    console.print(Syntax(excerpt, lexer, line_numbers=True, theme="ansi_dark"))
    console.print(Panel(
        Text(step.suggested_changes or "(no suggestion)"),
        title="Proposed change",
        border_style="cyan",
    ))


def print_execution_result(result: ExecutionResult, dry_run: bool) -> None:
    """Print summary after executing a plan."""
    console.print()
    if dry_run:
        for report in result.dry_run_reports:
            console.print(f"  [cyan]~[/cyan] {report}")
        console.print("\n  [dim]Dry run: no files were changed. Re-run with --execute to apply.[/dim]\n")
        return

    for path in sorted(result.succeeded):
        console.print(f"  [green]✅ {path}[/green]")
    for failure in result.failed:
        console.print(f"  [red]❌ {failure.relative_path}[/red]  {failure.error}")
    for path in sorted(result.skipped):
        console.print(f"  [dim]- {path} (skipped)[/dim]")

    console.print()
    console.print(
        f"  {len(result.succeeded)} refactored | "
        f"{len(result.failed)} failed | "
        f"{len(result.skipped)} skipped"
    )
    if result.backup_location:
        console.print(f"  Backup: {result.backup_location}")
        console.print(
            f"  [dim]Run `patternshift backup restore {result.backup_location.name}` to revert.[/dim]"
        )
    console.print()


def print_backups(backups: list[Backup]) -> None:
    if not backups:
        console.print("\n  No backups found.\n")
        return

    console.print("\n  [bold]Backups[/bold]\n")
    for backup in backups:
        console.print(f"  {backup.path.name}  {backup.file_count} file(s)")
    console.print()


def print_restore_result(result: RestoreResult) -> None:
    if result.success:
        console.print(f"  [green]✅[/green] {result.message}")
    else:
        console.print(f"  [red]❌[/red] {result.message}")
