"""Two-phase confirmation for destructive and lossy commands.

Deleting a subtree and un-completing a done task both go through a
request step that captures what is about to happen, and only a confirm
step produces the command. Cancelling is dropping the pending value.
The engine itself cannot tell whether a command was confirmed; keeping
to this protocol is the host's contract.
"""

from dataclasses import dataclass
from enum import Enum

from plantree.domain.plan.commands import DeleteSubtree, ResetTask
from plantree.domain.plan.models import PlanDocument, Row, TaskStatus
from plantree.domain.plan.traversal import find_by_id


class DeleteWarning(str, Enum):
    """Which warning a delete confirmation shows."""

    HAS_CHILDREN = "has-children"
    ACTIVE_TASK = "active-task"
    PLAIN = "plain"

    @classmethod
    def classify(cls, row: Row) -> "DeleteWarning":
        """Classify a row about to be deleted.

        Rows with children win over active tasks: losing a subtree is the
        bigger surprise.
        """
        if row.children:
            return cls.HAS_CHILDREN
        if row.is_task and row.status != TaskStatus.NEW:
            return cls.ACTIVE_TASK
        return cls.PLAIN


@dataclass(frozen=True)
class ConfirmPrompt:
    """Title and message for a confirmation dialog."""

    title: str
    message: str


@dataclass(frozen=True)
class PendingDelete:
    """A delete waiting for confirmation."""

    row_id: str
    label: str
    warning: DeleteWarning

    def prompt(self) -> ConfirmPrompt:
        name = self.label or "Unnamed Item"
        if self.warning == DeleteWarning.HAS_CHILDREN:
            return ConfirmPrompt(
                title="Delete Item and Contents?",
                message=(
                    f'"{name}" has nested items. Deleting it will also delete '
                    "all its children. This action cannot be undone."
                ),
            )
        if self.warning == DeleteWarning.ACTIVE_TASK:
            return ConfirmPrompt(
                title="Delete Active Task?",
                message=(
                    f'"{name}" is currently active or completed. '
                    "Are you sure you want to delete it?"
                ),
            )
        return ConfirmPrompt(
            title="Delete Item?",
            message=f'Are you sure you want to delete "{name}"?',
        )


@dataclass(frozen=True)
class PendingReset:
    """A task reset waiting for confirmation."""

    row_id: str
    name: str

    def prompt(self) -> ConfirmPrompt:
        return ConfirmPrompt(
            title="Reset Task?",
            message=f'Reset task "{self.name or "Item"}"?',
        )


def request_delete(document: PlanDocument, row_id: str) -> PendingDelete | None:
    """Open a delete confirmation, or return None for an unknown row."""
    row = find_by_id(document, row_id)
    if row is None:
        return None
    return PendingDelete(row_id=row_id, label=row.label, warning=DeleteWarning.classify(row))


def confirm_delete(pending: PendingDelete) -> DeleteSubtree:
    return DeleteSubtree(row_id=pending.row_id)


def request_reset(
    document: PlanDocument,
    row_id: str,
    name: str | None = None,
) -> PendingReset | None:
    """Open a reset confirmation for a task.

    Args:
        document: Current document.
        row_id: The task to reset.
        name: Name to show; defaults to the row's label.

    Returns:
        PendingReset, or None if the row is missing or not a task.
    """
    row = find_by_id(document, row_id)
    if row is None or not row.is_task:
        return None
    return PendingReset(row_id=row_id, name=row.label if name is None else name)


def confirm_reset(pending: PendingReset) -> ResetTask:
    return ResetTask(row_id=pending.row_id)
