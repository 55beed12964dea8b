"""CLI interface for plantree using Typer.

Usage:
    plantree show               # Show the plan tree
    plantree progress           # Show task progress per panel
    plantree plan search TERM   # Filter rows by text
    plantree config show        # Show engine settings

The CLI is structured as:
- app: Main Typer application
- commands/: Command groups (plan, config)
- common.py: Shared utilities for CLI commands
- main.py: Entry point that runs the app
"""

import logging
from pathlib import Path
from typing import Optional

import typer

from plantree import __version__
from plantree.interfaces.cli.commands import config, plan
from plantree.interfaces.cli.common import seed_option

app = typer.Typer(
    name="plantree",
    help="Hierarchical plan engine",
    add_completion=False,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"plantree version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-V",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log engine decisions"),
) -> None:
    """plantree - panels, tasks and notes in one editable tree."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


# =============================================================================
# Register Command Groups
# =============================================================================

app.add_typer(plan.app, name="plan")
app.add_typer(config.app, name="config")


# =============================================================================
# Top-Level Shortcuts for Common Commands
# =============================================================================


@app.command("show")
def show(
    seed: Optional[Path] = seed_option,
    show_all: bool = typer.Option(
        False, "--all", "-a", help="Include rows under collapsed parents"
    ),
) -> None:
    """Show the plan tree (shortcut for 'plan show')."""
    plan.show(seed=seed, show_all=show_all)


@app.command("progress")
def progress(seed: Optional[Path] = seed_option) -> None:
    """Show task progress (shortcut for 'plan progress')."""
    plan.progress(seed=seed)
