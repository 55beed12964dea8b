"""CLI command groups for plantree.

Command groups:
- plan: Inspect a plan and ask for suggestions (show, search, progress, ...)
- config: Read and change engine settings

Each command group is a Typer app that gets registered
with the main app using app.add_typer().
"""

from plantree.interfaces.cli.commands import config, plan

__all__ = ["plan", "config"]
