"""patternshift backup commands."""

from __future__ import annotations

from pathlib import Path

import click

from patternshift.core.config import load_config
from patternshift.core.errors import PatternShiftError
from patternshift.core.output import console, print_backups, print_restore_result
from patternshift.refactor.backup import BackupManager


def _manager(target: str) -> BackupManager:
    project_path = Path(target).resolve()
    config = load_config(project_path)
    return BackupManager(project_path, config.backup_dir(project_path))


@click.group()
def backup():
    """List and restore refactoring backups."""


@backup.command("list")
@click.option("--target", "-t", "target", default=".", help="Project directory (default: current dir)")
def list_cmd(target: str):
    """List backups, newest first."""
    try:
        manager = _manager(target)
    except PatternShiftError as e:
        console.print(f"\n  [red]{e}[/red]\n")
        raise SystemExit(1)
    print_backups(manager.list_backups())


@backup.command("restore")
@click.argument("name", required=False)
@click.option("--last", is_flag=True, help="Restore the most recent backup")
@click.option("--target", "-t", "target", default=".", help="Project directory (default: current dir)")
def restore_cmd(name: str | None, last: bool, target: str):
    """Restore files from backup NAME (a directory name or path)."""
    try:
        manager = _manager(target)
    except PatternShiftError as e:
        console.print(f"\n  [red]{e}[/red]\n")
        raise SystemExit(1)

    if last:
        latest = manager.latest_backup()
        if latest is None:
            console.print("\n  No backups to restore.\n")
            raise SystemExit(1)
        backup_path = latest.path
    elif name:
        backup_path = Path(name)
        if not backup_path.is_absolute() and not backup_path.exists():
            backup_path = manager.backup_dir / name
    else:
        console.print("\n  Usage: patternshift backup restore <NAME> or --last")
        console.print("  Run `patternshift backup list` to see available backups.\n")
        return

    result = manager.restore_backup(backup_path)
    print_restore_result(result)
    if not result.success:
        raise SystemExit(1)
