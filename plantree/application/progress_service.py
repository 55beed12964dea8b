"""Progress statistics for the plan.

Feeds the progress navigation strip: one step per visible top-level
panel that holds at least one task, with counts per task status.
Hidden rows are left out of every count.

All functions are pure - no I/O, no side effects.
"""

from pydantic import BaseModel

from plantree.domain.plan import (
    PlanDocument,
    Row,
    RowKind,
    TaskStatus,
    fold_rows,
    has_descendant_of_kind,
)


class PlanStats(BaseModel):
    """Task counts by status."""

    total: int = 0
    new: int = 0
    in_progress: int = 0
    attention: int = 0
    blocked: int = 0
    done: int = 0

    @property
    def progress_percent(self) -> float:
        """Calculate completion percentage."""
        if self.total == 0:
            return 0.0
        return round(self.done / self.total * 100, 1)


class PanelProgress(PlanStats):
    """Task counts for one top-level panel."""

    panel_id: str
    label: str
    expanded: bool

    @property
    def is_complete(self) -> bool:
        return self.total > 0 and self.done == self.total


_STATUS_FIELDS = {
    TaskStatus.NEW: "new",
    TaskStatus.IN_PROGRESS: "in_progress",
    TaskStatus.ATTENTION: "attention",
    TaskStatus.BLOCKED: "blocked",
    TaskStatus.DONE: "done",
}


def count_tasks(rows: list[Row]) -> dict[str, int]:
    """Count visible tasks beneath (and including) the given rows."""

    def count(acc: dict[str, int], row: Row, depth: int) -> dict[str, int]:
        if row.is_task and row.visible:
            acc["total"] += 1
            acc[_STATUS_FIELDS[row.status]] += 1
        return acc

    initial = {"total": 0, **{field: 0 for field in _STATUS_FIELDS.values()}}
    return fold_rows(rows, initial, count)


def is_tracked_panel(row: Row) -> bool:
    """A visible panel with at least one task beneath it."""
    return (
        row.kind == RowKind.PANEL
        and row.visible
        and has_descendant_of_kind(row, RowKind.TASK)
    )


def panel_progress(document: PlanDocument) -> list[PanelProgress]:
    """Return progress for every tracked top-level panel, in order."""
    return [
        PanelProgress(
            panel_id=panel.id,
            label=panel.label,
            expanded=panel.expanded,
            **count_tasks(panel.children),
        )
        for panel in document.root_children
        if is_tracked_panel(panel)
    ]


def expand_all_target(document: PlanDocument) -> bool:
    """Decide whether a nav double-click should expand or collapse all.

    Expands while fewer than half of the tracked panels (rounded up) are
    open, collapses otherwise.
    """
    steps = panel_progress(document)
    open_count = sum(1 for step in steps if step.expanded)
    return open_count < len(steps) / 2 + 0.5


def document_stats(document: PlanDocument) -> PlanStats:
    """Count every visible task in the document by status."""
    return PlanStats(**count_tasks(document.root_children))
