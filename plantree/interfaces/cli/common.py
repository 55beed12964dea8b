"""Shared utilities for plantree CLI commands.

- Seed loading (built-in sample plan or a JSON file)
- Provider selection from the engine config
- Formatted output helpers (error, success, info)
- Row formatting for tree listings
"""

from pathlib import Path

import typer

from plantree.domain.plan import PlanDocument, Row, RowKind, TaskStatus, sample_document
from plantree.domain.shared import Err
from plantree.global_config import EngineConfig
from plantree.infrastructure.ai import (
    NullSuggestionProvider,
    OllamaSuggestionProvider,
    SuggestionProvider,
)
from plantree.infrastructure.storage import JsonStorage

# Reusable seed option for CLI commands
# Usage: def my_command(seed: Optional[Path] = seed_option) -> None:
seed_option = typer.Option(
    None,
    "--seed",
    "-s",
    help="Plan JSON file (or set PLANTREE_SEED env var; default: built-in sample)",
    envvar="PLANTREE_SEED",
)

STATUS_MARKERS = {
    TaskStatus.NEW: "[ ]",
    TaskStatus.IN_PROGRESS: "[>]",
    TaskStatus.ATTENTION: "[!]",
    TaskStatus.BLOCKED: "[#]",
    TaskStatus.DONE: "[x]",
}

KIND_MARKERS = {
    RowKind.TEXT: "#",
    RowKind.LINK: "@",
    RowKind.COMMENT: '"',
}


def load_document(seed: Path | None) -> PlanDocument:
    """Load the plan to work on.

    Args:
        seed: Path to a plan JSON file, or None for the built-in sample.

    Returns:
        The validated document.

    Raises:
        typer.Exit: If the file is missing or is not a valid plan.
    """
    if seed is None:
        return sample_document()
    result = JsonStorage().load_model(seed, PlanDocument)
    if isinstance(result, Err):
        print_error(result.error)
        raise typer.Exit(1)
    return result.value


def make_provider(config: EngineConfig) -> SuggestionProvider:
    """Build the suggestion provider the config asks for."""
    if not config.ai_mode:
        return NullSuggestionProvider()
    return OllamaSuggestionProvider(
        model=config.suggestion_model,
        host=config.ollama_host,
        timeout=config.request_timeout,
        min_prefix=config.min_prefix,
        max_children=config.max_children,
    )


def format_row(row: Row, depth: int, editing: bool = False) -> str:
    """Format one row as an indented tree line.

    Args:
        row: Row to format
        depth: Nesting depth (0 for top-level panels)
        editing: Whether the row holds the edit session

    Returns:
        Single display line
    """
    if row.kind == RowKind.PANEL:
        marker = "-" if row.expanded else "+"
    elif row.is_task:
        marker = STATUS_MARKERS[row.status]
    else:
        marker = KIND_MARKERS[row.kind]

    line = f"{'  ' * depth}{marker} {row.label or '(untitled)'}"
    if row.kind == RowKind.LINK and row.link_target:
        line += f" -> {row.link_target}"
    if row.kind != RowKind.PANEL and row.children and not row.expanded:
        line += f" (+{len(row.children)})"
    if not row.visible:
        line += " (hidden)"
    if editing:
        line += " *"
    return f"{line}  [{row.id}]"


def print_error(msg: str) -> None:
    """Print a formatted error message.

    Args:
        msg: Error message to display
    """
    typer.echo(typer.style(f"Error: {msg}", fg=typer.colors.RED), err=True)


def print_success(msg: str) -> None:
    typer.echo(typer.style(msg, fg=typer.colors.GREEN))


def print_info(msg: str) -> None:
    typer.echo(typer.style(msg, fg=typer.colors.BLUE))


def print_warning(msg: str) -> None:
    typer.echo(typer.style(f"Warning: {msg}", fg=typer.colors.YELLOW), err=True)


def print_separator(char: str = "=", width: int = 60) -> None:
    typer.echo(char * width)


def print_header(title: str, width: int = 60) -> None:
    """Print a formatted header with separators.

    Args:
        title: Header title text
        width: Width of the separator lines
    """
    print_separator("=", width)
    typer.echo(title)
    print_separator("=", width)
