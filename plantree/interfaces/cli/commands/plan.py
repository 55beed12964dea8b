"""Plan inspection CLI commands.

Commands for looking at a plan (tree, search, progress, validation) and
for trying the suggestion provider against one of its rows.
"""

from pathlib import Path
from typing import Optional

import typer

from plantree.application import (
    PlanSession,
    document_stats,
    panel_progress,
    request_children,
    request_completion,
)
from plantree.domain.plan import PlanDocument, Row, fold_rows, validate_document
from plantree.global_config import get_engine_config
from plantree.interfaces.cli.common import (
    format_row,
    load_document,
    make_provider,
    print_error,
    print_header,
    print_info,
    print_separator,
    print_success,
    print_warning,
    seed_option,
)

app = typer.Typer(help="Plan inspection commands")


# =============================================================================
# Output Helpers
# =============================================================================


def _depths(document: PlanDocument) -> dict[str, int]:
    def record(acc: dict[str, int], row: Row, depth: int) -> dict[str, int]:
        acc[row.id] = depth
        return acc

    return fold_rows(document.root_children, {}, record)


def print_rows(document: PlanDocument, rows: list[Row]) -> None:
    """Print rows as an indented tree."""
    depths = _depths(document)
    for row in rows:
        typer.echo(format_row(row, depths.get(row.id, 0), document.is_editing(row.id)))


def _all_rows(document: PlanDocument) -> list[Row]:
    return fold_rows(document.root_children, [], lambda acc, row, _: acc + [row])


# =============================================================================
# Commands
# =============================================================================


@app.command("show")
def show(
    seed: Optional[Path] = seed_option,
    show_all: bool = typer.Option(
        False, "--all", "-a", help="Include rows under collapsed parents"
    ),
) -> None:
    """Show the plan as a tree."""
    session = PlanSession(load_document(seed))
    rows = _all_rows(session.document) if show_all else session.visible_rows()
    print_header(session.document.title)
    print_rows(session.document, rows)


@app.command("search")
def search(
    term: str = typer.Argument(..., help="Text to look for in labels, tooltips and links"),
    seed: Optional[Path] = seed_option,
) -> None:
    """Show the rows matching a search term, with their ancestors."""
    session = PlanSession(load_document(seed))
    session.set_search(term)
    rows = session.visible_rows()
    if not rows:
        print_info(f"No rows match '{term}'")
        return
    print_rows(session.document, rows)


@app.command("progress")
def progress(seed: Optional[Path] = seed_option) -> None:
    """Show task progress per panel."""
    document = load_document(seed)
    steps = panel_progress(document)
    if not steps:
        print_info("No panels with tasks")
        return

    print_header(f"Progress: {document.title}")
    for step in steps:
        marker = "x" if step.is_complete else " "
        typer.echo(
            f"[{marker}] {step.label}: {step.done}/{step.total} done "
            f"({step.progress_percent}%)"
        )
        typer.echo(
            f"      new {step.new}, in progress {step.in_progress}, "
            f"attention {step.attention}, blocked {step.blocked}"
        )
    print_separator("-")
    stats = document_stats(document)
    typer.echo(f"Total: {stats.done}/{stats.total} tasks done ({stats.progress_percent}%)")


@app.command("validate")
def validate(seed: Optional[Path] = seed_option) -> None:
    """Check a plan file for structural problems."""
    document = load_document(seed)
    problems = validate_document(document)
    if problems:
        for problem in problems:
            print_error(problem)
        raise typer.Exit(1)
    print_success("Plan is valid")


@app.command("suggest")
def suggest(
    row_id: str = typer.Argument(..., help="Row whose label is being typed"),
    partial: str = typer.Argument(..., help="Text typed so far"),
    seed: Optional[Path] = seed_option,
) -> None:
    """Ask the suggestion provider to complete a row's label."""
    session = PlanSession(load_document(seed))
    outcome = session.begin_edit(row_id)
    if outcome.ignored:
        print_error(outcome.reason or f"Cannot edit {row_id}")
        raise typer.Exit(1)

    provider = make_provider(get_engine_config())
    answer = request_completion(provider, session.document, partial)
    if answer is None:
        print_error(f"Cannot edit {row_id}")
        raise typer.Exit(1)
    ticket, suffix = answer
    session.apply_completion(ticket, partial, suffix)

    ghost = session.ghost_text(row_id)
    if not ghost:
        print_warning("No completion")
        return
    typer.echo(partial + typer.style(ghost, dim=True))


@app.command("children")
def children(
    row_id: str = typer.Argument(..., help="Section to generate rows for"),
    seed: Optional[Path] = seed_option,
    apply: bool = typer.Option(
        False, "--apply", help="Insert the rows and show the resulting section"
    ),
) -> None:
    """Ask the suggestion provider for child rows of a section."""
    session = PlanSession(load_document(seed))
    provider = make_provider(get_engine_config())
    items = request_children(provider, session.document, row_id)
    if not items:
        print_warning("No suggestions")
        return

    if not apply:
        for item in items:
            typer.echo(f"- [{item.kind.value}] {item.label}")
            if item.tooltip:
                typer.echo(f"    {item.tooltip}")
        return

    added = session.apply_children(row_id, items)
    if not added:
        print_error(f"Row not found: {row_id}")
        raise typer.Exit(1)
    print_success(f"Added {len(added)} rows")
    print_rows(session.document, _all_rows(session.document))
