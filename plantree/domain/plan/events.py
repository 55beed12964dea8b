"""Plan domain events.

Immutable records returned by the mutation engine alongside the new
document. ``CommandIgnored`` is the diagnostic channel: a command that
referenced a missing row, asked for an impossible move or targeted the
wrong kind of row leaves the document untouched and yields one of these.

All events are pure data structures - no I/O, no side effects.
"""

from datetime import datetime

from plantree.domain.shared.events import DomainEvent

from .models import RowKind, TaskStatus


class RowAdded(DomainEvent):
    """A single row was appended and opened for editing."""

    parent_id: str
    row_id: str
    kind: RowKind


class RowsAdded(DomainEvent):
    """Several suggested rows were appended to a parent."""

    parent_id: str
    row_ids: list[str]


class RowDeleted(DomainEvent):
    """A row and its whole subtree were removed.

    ``removed_ids`` lists the row itself followed by every descendant.
    """

    row_id: str
    parent_id: str
    removed_ids: list[str]


class RowMoved(DomainEvent):
    row_id: str
    from_parent_id: str
    to_parent_id: str
    target_id: str
    edge: str


class TaskStatusChanged(DomainEvent):
    row_id: str
    previous: TaskStatus
    status: TaskStatus
    completed_at: datetime | None = None


class RowUpdated(DomainEvent):
    """Fields of one or more rows changed in place."""

    row_ids: list[str]
    fields: list[str]


class EditSessionChanged(DomainEvent):
    """The document-wide edit session opened, closed or moved."""

    previous_id: str | None = None
    editing_id: str | None = None
    generation: int


class CommandIgnored(DomainEvent):
    """A command was refused and the document left unchanged."""

    command: str
    reason: str


PlanEvent = (
    RowAdded
    | RowsAdded
    | RowDeleted
    | RowMoved
    | TaskStatusChanged
    | RowUpdated
    | EditSessionChanged
    | CommandIgnored
)
