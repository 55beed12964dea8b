"""Drag-and-drop reorder state machine.

A drag is a value, not a set of mutable UI refs: every transition takes
the current state and returns the next one. Hovering only changes the
local drop indicator; the document is touched once, on drop, through
the ``MoveRow`` command the drop returns.

    DragIdle --pick_up--> DragState(source)
    DragState --hover/leave--> DragState(source, hover_id, edge)
    DragState --drop--> DragIdle (+ MoveRow)
    DragState --cancel--> DragIdle
"""

from dataclasses import dataclass, replace

from plantree.domain.plan.commands import MoveRow
from plantree.domain.types import DropEdge


@dataclass(frozen=True)
class DragIdle:
    """No drag in progress."""

    @property
    def active(self) -> bool:
        return False


@dataclass(frozen=True)
class DragState:
    """A row is being dragged.

    Attributes:
        source_id: The row picked up.
        hover_id: The candidate target under the pointer, if any.
        edge: Where the source would land relative to ``hover_id``.
    """

    source_id: str
    hover_id: str | None = None
    edge: DropEdge | None = None

    @property
    def active(self) -> bool:
        return True

    def indicator_for(self, row_id: str) -> DropEdge | None:
        """Return the drop indicator a row should show, if any."""
        if self.hover_id == row_id:
            return self.edge
        return None


Drag = DragIdle | DragState

IDLE = DragIdle()


def edge_for_pointer(pointer_y: float, top: float, height: float) -> DropEdge:
    """Pick the drop edge from the pointer's position over a row.

    Above the row's vertical midpoint means "before", anything else
    "after".
    """
    midpoint = top + height / 2
    return "before" if pointer_y < midpoint else "after"


def pick_up(state: Drag, row_id: str) -> Drag:
    """Start dragging ``row_id``.

    Drags are not reentrant: picking up while already dragging keeps the
    current drag.
    """
    if isinstance(state, DragState):
        return state
    return DragState(source_id=row_id)


def hover(
    state: Drag,
    target_id: str,
    pointer_y: float,
    top: float,
    height: float,
) -> Drag:
    """Record the candidate target and edge under the pointer."""
    if not isinstance(state, DragState):
        return state
    if target_id == state.source_id:
        return replace(state, hover_id=None, edge=None)
    return replace(state, hover_id=target_id, edge=edge_for_pointer(pointer_y, top, height))


def leave(state: Drag, target_id: str) -> Drag:
    """Clear the indicator when the pointer leaves its row."""
    if isinstance(state, DragState) and state.hover_id == target_id:
        return replace(state, hover_id=None, edge=None)
    return state


def drop(
    state: Drag,
    target_id: str,
    pointer_y: float,
    top: float,
    height: float,
) -> tuple[Drag, MoveRow | None]:
    """Finish the drag over ``target_id``.

    Returns:
        (IDLE, MoveRow) for a real move, or (IDLE, None) when nothing
        was being dragged or the row was dropped onto itself.
    """
    if not isinstance(state, DragState) or target_id == state.source_id:
        return IDLE, None
    command = MoveRow(
        source_id=state.source_id,
        target_id=target_id,
        edge=edge_for_pointer(pointer_y, top, height),
    )
    return IDLE, command


def cancel(state: Drag) -> Drag:
    """Abandon the drag; no command is issued."""
    return IDLE
