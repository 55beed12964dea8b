"""Plan mutation engine.

Every write to a plan goes through ``apply_command``. Each command is
backed by a function that returns ``Ok((new_document, events))`` or
``Err(reason)``; ``apply_command`` turns a refusal into an unchanged
document plus a ``CommandIgnored`` event. Nothing here raises for a stale
row id, an impossible move or a command aimed at the wrong kind of row.

All functions are pure - no I/O, no side effects. New documents share
every subtree a command did not touch with the document they replace.
"""

import logging
from datetime import UTC, datetime

from pydantic import BaseModel

from plantree.domain.shared import Err, Ok, Result
from plantree.domain.types import ROOT_ID, DropEdge
from plantree.domain.plan import (
    AddChild,
    AddMultipleChildren,
    BeginEdit,
    CancelEdit,
    Command,
    CommandIgnored,
    CommitEdit,
    CycleTaskStatus,
    DeleteSubtree,
    EditSessionChanged,
    MoveRow,
    NewRowSpec,
    PatchSettings,
    PlanDocument,
    PlanEvent,
    ResetTask,
    Row,
    RowAdded,
    RowDeleted,
    RowKind,
    RowMoved,
    RowSettings,
    RowsAdded,
    RowUpdated,
    TaskStatus,
    TaskStatusChanged,
    ToggleExpanded,
    ToggleExpandedAll,
    ToggleVisible,
    append_children,
    contains_id,
    find_by_id,
    find_parent_list,
    insert_relative,
    iter_rows,
    map_rows,
    new_row,
    remove_row,
    row_from_spec,
    sibling_count,
    update_row,
)

logger = logging.getLogger(__name__)

Applied = tuple[PlanDocument, list[PlanEvent]]


class CommandOutcome(BaseModel):
    """Result of applying one command.

    ``document`` is the document to use from now on; it is the input
    document itself when the command was ignored.
    """

    document: PlanDocument
    events: list[PlanEvent]

    @property
    def ignored(self) -> bool:
        return any(isinstance(event, CommandIgnored) for event in self.events)

    @property
    def reason(self) -> str | None:
        """Why the command was ignored, if it was."""
        for event in self.events:
            if isinstance(event, CommandIgnored):
                return event.reason
        return None


# =============================================================================
# Edit Session Helpers
# =============================================================================


def _open_session(document: PlanDocument, row_id: str) -> Applied:
    generation = document.edit_generation + 1
    updated = document.model_copy(
        update={"editing_id": row_id, "edit_generation": generation}
    )
    event = EditSessionChanged(
        previous_id=document.editing_id,
        editing_id=row_id,
        generation=generation,
    )
    return updated, [event]


def _close_session(document: PlanDocument) -> Applied:
    if document.editing_id is None:
        return document, []
    generation = document.edit_generation + 1
    updated = document.model_copy(
        update={"editing_id": None, "edit_generation": generation}
    )
    event = EditSessionChanged(
        previous_id=document.editing_id,
        editing_id=None,
        generation=generation,
    )
    return updated, [event]


# =============================================================================
# Structure
# =============================================================================


def add_child(
    document: PlanDocument,
    parent_id: str,
    kind: RowKind,
    blank_label: bool = False,
) -> Result[Applied, str]:
    """Append a new row to a parent and open it for editing.

    Args:
        document: The document to update.
        parent_id: ROOT_ID or the id of an existing row.
        kind: Kind of the new row.
        blank_label: Start non-panel rows with an empty label.

    Returns:
        Ok((document, events)) with the row appended and the parent
        expanded, or Err(str) if the parent does not exist.
    """
    position = sibling_count(document, parent_id)
    if position is None:
        return Err(f"Parent not found: {parent_id}")

    row = new_row(kind, position, blank_label=blank_label)
    updated = append_children(document, parent_id, [row])
    if updated is None:
        return Err(f"Parent not found: {parent_id}")

    updated, session_events = _open_session(updated, row.id)
    events: list[PlanEvent] = [RowAdded(parent_id=parent_id, row_id=row.id, kind=kind)]
    return Ok((updated, events + session_events))


def add_multiple_children(
    document: PlanDocument,
    parent_id: str,
    items: list[NewRowSpec],
) -> Result[Applied, str]:
    """Append suggested rows to a parent, flagged new and not editing."""
    if not items:
        return Err("No rows to add")
    position = sibling_count(document, parent_id)
    if position is None:
        return Err(f"Parent not found: {parent_id}")

    rows = [row_from_spec(item, position + offset) for offset, item in enumerate(items)]
    updated = append_children(document, parent_id, rows)
    if updated is None:
        return Err(f"Parent not found: {parent_id}")

    event = RowsAdded(parent_id=parent_id, row_ids=[row.id for row in rows])
    return Ok((updated, [event]))


def delete_subtree(document: PlanDocument, row_id: str) -> Result[Applied, str]:
    """Remove a row and everything beneath it.

    Deletion is unconditional here; asking the author first is the
    caller's job (see ``plantree.domain.confirm``). If the edit session
    was inside the removed subtree it is closed.
    """
    siblings = find_parent_list(document, row_id)
    removed = remove_row(document, row_id)
    if siblings is None or removed is None:
        return Err(f"Row not found: {row_id}")

    updated, row = removed
    removed_ids = [node.id for node in iter_rows([row])]
    events: list[PlanEvent] = [
        RowDeleted(row_id=row_id, parent_id=siblings.owner_id, removed_ids=removed_ids)
    ]
    if updated.editing_id in removed_ids:
        updated, session_events = _close_session(updated)
        events.extend(session_events)
    return Ok((updated, events))


def move_row(
    document: PlanDocument,
    source_id: str,
    target_id: str,
    edge: DropEdge,
) -> Result[Applied, str]:
    """Move a row, with its subtree, before or after a target row.

    The row joins the target's sibling list, so its owner becomes the
    target's owner. Refused when source and target are the same row,
    when either is missing, or when the target lies inside the source's
    subtree (the tree would stop being a tree).

    Returns:
        Ok((document, events)) or Err(str) with the refusal reason.
    """
    if source_id == target_id:
        return Err("Cannot move a row onto itself")

    source = find_by_id(document, source_id)
    if source is None:
        return Err(f"Row not found: {source_id}")
    target_siblings = find_parent_list(document, target_id)
    if target_siblings is None:
        return Err(f"Target not found: {target_id}")
    if contains_id(source, target_id):
        return Err(f"Cannot move {source_id} into its own subtree")

    source_siblings = find_parent_list(document, source_id)
    removed = remove_row(document, source_id)
    if source_siblings is None or removed is None:
        return Err(f"Row not found: {source_id}")
    detached, row = removed

    updated = insert_relative(detached, target_id, row, edge)
    if updated is None:
        return Err(f"Target not found: {target_id}")

    events: list[PlanEvent] = [
        RowMoved(
            row_id=source_id,
            from_parent_id=source_siblings.owner_id,
            to_parent_id=target_siblings.owner_id,
            target_id=target_id,
            edge=edge,
        )
    ]
    # A suggestion requested for a row that has since moved is stale
    if updated.editing_id is not None and contains_id(row, updated.editing_id):
        updated, session_events = _open_session(updated, updated.editing_id)
        events.extend(session_events)
    return Ok((updated, events))


# =============================================================================
# Task Status
# =============================================================================


def cycle_task_status(
    document: PlanDocument,
    row_id: str,
    now: datetime,
) -> Result[Applied, str]:
    """Advance a task to the next status.

    Entering DONE stamps ``completed_at``; wrapping back to NEW clears
    it. Leaving DONE through a plain cycle is allowed here; hosts route
    clicks on a done task through the reset confirmation instead.
    """
    row = find_by_id(document, row_id)
    if row is None:
        return Err(f"Row not found: {row_id}")
    if not row.is_task:
        return Err(f"Row {row_id} is a {row.kind.value}, not a task")

    status = TaskStatus((row.status + 1) % len(TaskStatus))
    completed_at = row.completed_at
    if status == TaskStatus.DONE:
        completed_at = now
    elif status == TaskStatus.NEW:
        completed_at = None

    def advance(node: Row) -> Row:
        return node.model_copy(update={"status": status, "completed_at": completed_at})

    updated = update_row(document, row_id, advance)
    if updated is None:
        return Err(f"Row not found: {row_id}")

    event = TaskStatusChanged(
        row_id=row_id,
        previous=row.status,
        status=status,
        completed_at=completed_at,
    )
    return Ok((updated, [event]))


def reset_task(document: PlanDocument, row_id: str) -> Result[Applied, str]:
    """Return a task to NEW and clear its completion time."""
    row = find_by_id(document, row_id)
    if row is None:
        return Err(f"Row not found: {row_id}")
    if not row.is_task:
        return Err(f"Row {row_id} is a {row.kind.value}, not a task")

    def reset(node: Row) -> Row:
        return node.model_copy(update={"status": TaskStatus.NEW, "completed_at": None})

    updated = update_row(document, row_id, reset)
    if updated is None:
        return Err(f"Row not found: {row_id}")

    event = TaskStatusChanged(row_id=row_id, previous=row.status, status=TaskStatus.NEW)
    return Ok((updated, [event]))


# =============================================================================
# Flags
# =============================================================================


def _flip(document: PlanDocument, row_id: str, field: str) -> Result[Applied, str]:
    def flip(node: Row) -> Row:
        return node.model_copy(update={field: not getattr(node, field)})

    updated = update_row(document, row_id, flip)
    if updated is None:
        return Err(f"Row not found: {row_id}")
    return Ok((updated, [RowUpdated(row_ids=[row_id], fields=[field])]))


def toggle_expanded(document: PlanDocument, row_id: str) -> Result[Applied, str]:
    return _flip(document, row_id, "expanded")


def toggle_visible(document: PlanDocument, row_id: str) -> Result[Applied, str]:
    """Flip the soft-hide flag of one row; children keep their own flag."""
    return _flip(document, row_id, "visible")


def toggle_expanded_all(document: PlanDocument, expand: bool) -> Result[Applied, str]:
    """Expand or collapse every row in the document."""
    updated = map_rows(document, lambda row: row.model_copy(update={"expanded": expand}))
    row_ids = [row.id for row in iter_rows(document.root_children)]
    return Ok((updated, [RowUpdated(row_ids=row_ids, fields=["expanded"])]))


# =============================================================================
# Edit Session
# =============================================================================


def begin_edit(document: PlanDocument, row_id: str) -> Result[Applied, str]:
    """Give ``row_id`` the edit session, taking it from any other row."""
    if find_by_id(document, row_id) is None:
        return Err(f"Row not found: {row_id}")
    return Ok(_open_session(document, row_id))


def commit_edit(
    document: PlanDocument,
    row_id: str,
    label: str,
    link_target: str | None = None,
) -> Result[Applied, str]:
    """Write the authored label (and link) and close the edit session."""
    fields = ["label", "is_new"]
    update: dict[str, object] = {"label": label, "is_new": False}
    if link_target is not None:
        update["link_target"] = link_target
        fields.append("link_target")

    updated = update_row(document, row_id, lambda node: node.model_copy(update=update))
    if updated is None:
        return Err(f"Row not found: {row_id}")

    events: list[PlanEvent] = [RowUpdated(row_ids=[row_id], fields=fields)]
    if updated.is_editing(row_id):
        updated, session_events = _close_session(updated)
        events.extend(session_events)
    return Ok((updated, events))


def cancel_edit(document: PlanDocument, row_id: str) -> Result[Applied, str]:
    """Close the edit session without touching the row.

    Discarding unsaved keystrokes is up to the caller; the model never
    saw them.
    """
    if find_by_id(document, row_id) is None:
        return Err(f"Row not found: {row_id}")
    if not document.is_editing(row_id):
        return Ok((document, []))
    return Ok(_close_session(document))


def patch_settings(
    document: PlanDocument,
    row_id: str,
    settings: RowSettings,
) -> Result[Applied, str]:
    """Merge auxiliary metadata (tooltip, link, media, due date) into a row."""
    update = settings.updates()
    if not update:
        return Err("No settings to apply")
    updated = update_row(document, row_id, lambda node: node.model_copy(update=update))
    if updated is None:
        return Err(f"Row not found: {row_id}")
    return Ok((updated, [RowUpdated(row_ids=[row_id], fields=sorted(update))]))


# =============================================================================
# Dispatch
# =============================================================================


def _run(
    document: PlanDocument,
    command: Command,
    now: datetime,
    blank_labels: bool,
) -> Result[Applied, str]:
    match command:
        case AddChild(parent_id=parent_id, kind=kind):
            return add_child(document, parent_id, kind, blank_label=blank_labels)
        case AddMultipleChildren(parent_id=parent_id, items=items):
            return add_multiple_children(document, parent_id, items)
        case DeleteSubtree(row_id=row_id):
            return delete_subtree(document, row_id)
        case MoveRow(source_id=source_id, target_id=target_id, edge=edge):
            return move_row(document, source_id, target_id, edge)
        case CycleTaskStatus(row_id=row_id):
            return cycle_task_status(document, row_id, now)
        case ResetTask(row_id=row_id):
            return reset_task(document, row_id)
        case ToggleExpanded(row_id=row_id):
            return toggle_expanded(document, row_id)
        case ToggleExpandedAll(expand=expand):
            return toggle_expanded_all(document, expand)
        case ToggleVisible(row_id=row_id):
            return toggle_visible(document, row_id)
        case BeginEdit(row_id=row_id):
            return begin_edit(document, row_id)
        case CommitEdit(row_id=row_id, label=label, link_target=link_target):
            return commit_edit(document, row_id, label, link_target)
        case CancelEdit(row_id=row_id):
            return cancel_edit(document, row_id)
        case PatchSettings(row_id=row_id, settings=settings):
            return patch_settings(document, row_id, settings)
    return Err(f"Unknown command: {command!r}")


def apply_command(
    document: PlanDocument,
    command: Command,
    *,
    now: datetime | None = None,
    blank_labels: bool = False,
) -> CommandOutcome:
    """Apply one command to a document.

    Args:
        document: The current document.
        command: The command to apply.
        now: Time used for completion stamps (defaults to UTC now).
        blank_labels: Start new non-panel rows with an empty label.

    Returns:
        CommandOutcome with the new document and its events. A refused
        command returns the input document and a CommandIgnored event.
    """
    result = _run(document, command, now or datetime.now(UTC), blank_labels)
    if isinstance(result, Err):
        logger.debug(f"Ignored {command.name}: {result.error}")
        return CommandOutcome(
            document=document,
            events=[CommandIgnored(command=command.name, reason=result.error)],
        )
    updated, events = result.value
    return CommandOutcome(document=updated, events=events)


__all__ = [
    "CommandOutcome",
    "apply_command",
    "add_child",
    "add_multiple_children",
    "delete_subtree",
    "move_row",
    "cycle_task_status",
    "reset_task",
    "toggle_expanded",
    "toggle_expanded_all",
    "toggle_visible",
    "begin_edit",
    "commit_edit",
    "cancel_edit",
    "patch_settings",
]
