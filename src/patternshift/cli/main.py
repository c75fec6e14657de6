"""Click CLI entry point for PatternShift."""

from __future__ import annotations

import logging

import click
from rich.logging import RichHandler

from patternshift._version import __version__
from patternshift.core.output import error_console


@click.group()
@click.version_option(version=__version__, prog_name="patternshift")
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
def cli(verbose: bool):
    """PatternShift - semantic pattern refactoring.

    Describe a code pattern in plain words, find every place it appears,
    and refactor them consistently with a backup you can restore.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=error_console, show_path=False)],
    )


# Import and register subcommands
from patternshift.cli.refactor_cmd import refactor  # noqa: E402
from patternshift.cli.analyze_cmd import analyze  # noqa: E402
from patternshift.cli.backup_cmd import backup  # noqa: E402

cli.add_command(refactor)
cli.add_command(analyze)
cli.add_command(backup)


if __name__ == "__main__":
    cli()
