"""Plan session: the engine as a host UI drives it.

A ``PlanSession`` owns the current document and the state that sits
around it: search, the drag in progress, pending confirmations, the drop
highlight and the completion ghost text. Commands run one at a time;
each one replaces the document before the next is handled.
"""

import logging
import time
from collections.abc import Callable
from datetime import UTC, datetime

from plantree.application.plan_service import CommandOutcome, apply_command
from plantree.application.suggestion_service import SuggestionTicket, is_stale, open_ticket
from plantree.domain import drag
from plantree.domain.confirm import (
    PendingDelete,
    PendingReset,
    confirm_delete,
    confirm_reset,
    request_delete,
    request_reset,
)
from plantree.domain.drag import IDLE, Drag, DragState
from plantree.domain.plan import (
    AddChild,
    AddMultipleChildren,
    BeginEdit,
    CancelEdit,
    Command,
    CommandIgnored,
    CommitEdit,
    CycleTaskStatus,
    NewRowSpec,
    PatchSettings,
    PlanDocument,
    PlanEvent,
    Row,
    RowAdded,
    RowKind,
    RowsAdded,
    RowSettings,
    ToggleExpanded,
    ToggleExpandedAll,
    ToggleVisible,
    ancestors_of,
    find_by_id,
    flatten_visible,
    next_visible_id,
    sample_document,
)
from plantree.domain.types import ROOT_ID, DropEdge
from plantree.global_config import EngineConfig

logger = logging.getLogger(__name__)

Subscriber = Callable[[CommandOutcome], None]


class PlanSession:
    """Single-threaded command loop over one plan document.

    Example:
        session = PlanSession(sample_document())
        new_id = session.add_child("panel-search", RowKind.TASK)
        session.commit_edit(new_id, "Book a second viewing")
    """

    def __init__(
        self,
        document: PlanDocument | None = None,
        config: EngineConfig | None = None,
        clock: Callable[[], float] = time.monotonic,
        now: Callable[[], datetime] = lambda: datetime.now(UTC),
    ) -> None:
        """Initialize the session.

        Args:
            document: Starting document (defaults to the built-in seed).
            config: Engine settings (defaults to EngineConfig()).
            clock: Monotonic clock in seconds, for highlight expiry.
            now: Wall clock, for completion timestamps.
        """
        self.document = document if document is not None else sample_document()
        self.config = config or EngineConfig()
        self.ai_mode = self.config.ai_mode
        self.search_term = ""
        self.drag: Drag = IDLE
        self.pending_delete: PendingDelete | None = None
        self.pending_reset: PendingReset | None = None
        self.diagnostics: list[CommandIgnored] = []
        self._clock = clock
        self._now = now
        self._dropped: tuple[str, float] | None = None
        self._ghost: tuple[SuggestionTicket, str, str] | None = None
        self._subscribers: list[Subscriber] = []

    # =========================================================================
    # Dispatch
    # =========================================================================

    def dispatch(self, command: Command) -> CommandOutcome:
        """Apply a command, keep its diagnostics and notify subscribers."""
        outcome = apply_command(
            self.document,
            command,
            now=self._now(),
            blank_labels=self.ai_mode,
        )
        self.document = outcome.document
        for event in outcome.events:
            if isinstance(event, CommandIgnored):
                self.diagnostics.append(event)
        for subscriber in list(self._subscribers):
            subscriber(outcome)
        return outcome

    def subscribe(self, subscriber: Subscriber) -> Callable[[], None]:
        """Register a callback for every outcome; returns an unsubscribe."""
        self._subscribers.append(subscriber)

        def unsubscribe() -> None:
            if subscriber in self._subscribers:
                self._subscribers.remove(subscriber)

        return unsubscribe

    def toggle_ai_mode(self) -> bool:
        self.ai_mode = not self.ai_mode
        return self.ai_mode

    # =========================================================================
    # Structure and Flags
    # =========================================================================

    def add_child(self, parent_id: str, kind: RowKind) -> str | None:
        """Add a row and open it for editing; returns the new id."""
        outcome = self.dispatch(AddChild(parent_id=parent_id, kind=kind))
        return _first_added(outcome.events)

    def add_children(self, parent_id: str, items: list[NewRowSpec]) -> list[str]:
        """Insert several rows at once; returns their ids."""
        outcome = self.dispatch(AddMultipleChildren(parent_id=parent_id, items=items))
        for event in outcome.events:
            if isinstance(event, RowsAdded):
                return list(event.row_ids)
        return []

    def toggle_expanded(self, row_id: str) -> CommandOutcome:
        return self.dispatch(ToggleExpanded(row_id=row_id))

    def toggle_expanded_all(self, expand: bool) -> CommandOutcome:
        return self.dispatch(ToggleExpandedAll(expand=expand))

    def toggle_visible(self, row_id: str) -> CommandOutcome:
        return self.dispatch(ToggleVisible(row_id=row_id))

    def patch_settings(self, row_id: str, settings: RowSettings) -> CommandOutcome:
        return self.dispatch(PatchSettings(row_id=row_id, settings=settings))

    def click_status(self, row_id: str) -> CommandOutcome | PendingReset | None:
        """Handle a click on a task's status control.

        A done task is not cycled: the click opens a reset confirmation,
        so a completion time is never dropped silently.
        """
        row = find_by_id(self.document, row_id)
        if row is not None and row.is_done:
            return self.request_reset(row_id)
        return self.dispatch(CycleTaskStatus(row_id=row_id))

    # =========================================================================
    # Confirmation
    # =========================================================================

    def request_delete(self, row_id: str) -> PendingDelete | None:
        self.pending_delete = request_delete(self.document, row_id)
        return self.pending_delete

    def confirm_delete(self) -> CommandOutcome | None:
        """Run the pending delete; None if nothing was pending."""
        pending, self.pending_delete = self.pending_delete, None
        if pending is None:
            return None
        return self.dispatch(confirm_delete(pending))

    def cancel_delete(self) -> None:
        self.pending_delete = None

    def request_reset(self, row_id: str, name: str | None = None) -> PendingReset | None:
        self.pending_reset = request_reset(self.document, row_id, name)
        return self.pending_reset

    def confirm_reset(self) -> CommandOutcome | None:
        """Run the pending reset; None if nothing was pending."""
        pending, self.pending_reset = self.pending_reset, None
        if pending is None:
            return None
        return self.dispatch(confirm_reset(pending))

    def cancel_reset(self) -> None:
        self.pending_reset = None

    # =========================================================================
    # Edit Session
    # =========================================================================

    def begin_edit(self, row_id: str) -> CommandOutcome:
        return self.dispatch(BeginEdit(row_id=row_id))

    def commit_edit(
        self,
        row_id: str,
        label: str,
        link_target: str | None = None,
    ) -> CommandOutcome:
        self._ghost = None
        return self.dispatch(CommitEdit(row_id=row_id, label=label, link_target=link_target))

    def cancel_edit(self, row_id: str) -> CommandOutcome:
        self._ghost = None
        return self.dispatch(CancelEdit(row_id=row_id))

    def commit_and_advance(
        self,
        row_id: str,
        label: str,
        link_target: str | None = None,
    ) -> str | None:
        """Commit a row, then start editing the next visible row.

        Returns:
            The id now being edited, or None if there was no next row or
            the commit was refused.
        """
        outcome = self.commit_edit(row_id, label, link_target)
        if outcome.ignored:
            return None
        next_id = next_visible_id(
            self.document, row_id, self.search_term, self.search_active
        )
        if next_id is None:
            return None
        self.begin_edit(next_id)
        return next_id

    # =========================================================================
    # Search and Views
    # =========================================================================

    @property
    def search_active(self) -> bool:
        return bool(self.search_term.strip())

    def set_search(self, term: str) -> None:
        self.search_term = term

    def visible_rows(self) -> list[Row]:
        """Rows to render, in order, under the current search."""
        return flatten_visible(self.document, self.search_term, self.search_active)

    def highlighted_ids(self) -> set[str]:
        """Rows to highlight: the dragged row, its ancestors, a fresh drop."""
        ids: set[str] = set()
        if isinstance(self.drag, DragState):
            ids.add(self.drag.source_id)
            ids.update(ancestors_of(self.document, self.drag.source_id))
        if self._dropped is not None:
            row_id, expires_at = self._dropped
            if self._clock() < expires_at:
                ids.add(row_id)
            else:
                self._dropped = None
        return ids

    # =========================================================================
    # Drag and Drop
    # =========================================================================

    def pick_up(self, row_id: str) -> None:
        if find_by_id(self.document, row_id) is None:
            return
        self.drag = drag.pick_up(self.drag, row_id)

    def hover(self, target_id: str, pointer_y: float, top: float, height: float) -> None:
        self.drag = drag.hover(self.drag, target_id, pointer_y, top, height)

    def leave(self, target_id: str) -> None:
        self.drag = drag.leave(self.drag, target_id)

    def drop_indicator(self, row_id: str) -> DropEdge | None:
        if isinstance(self.drag, DragState):
            return self.drag.indicator_for(row_id)
        return None

    def drop(
        self,
        target_id: str,
        pointer_y: float,
        top: float,
        height: float,
    ) -> CommandOutcome | None:
        """Drop the dragged row on a target and highlight it briefly."""
        self.drag, command = drag.drop(self.drag, target_id, pointer_y, top, height)
        if command is None:
            return None
        outcome = self.dispatch(command)
        if not outcome.ignored:
            expires_at = self._clock() + self.config.highlight_ms / 1000
            self._dropped = (command.source_id, expires_at)
        return outcome

    def cancel_drag(self) -> None:
        self.drag = drag.cancel(self.drag)

    # =========================================================================
    # Suggestions
    # =========================================================================

    def open_ticket(self) -> SuggestionTicket | None:
        return open_ticket(self.document)

    def apply_completion(self, ticket: SuggestionTicket, partial: str, suffix: str) -> bool:
        """Show a completion as ghost text, unless its ticket is stale."""
        if is_stale(self.document, ticket):
            return False
        self._ghost = (ticket, partial, suffix) if suffix else None
        return True

    def ghost_text(self, row_id: str) -> str:
        """Return the pending completion suffix for a row ("" if none)."""
        if self._ghost is None:
            return ""
        ticket, _, suffix = self._ghost
        if is_stale(self.document, ticket):
            self._ghost = None
            return ""
        return suffix if ticket.row_id == row_id else ""

    def accept_completion(self) -> str | None:
        """Accept the ghost text; returns the completed label to show."""
        if self._ghost is None:
            return None
        ticket, partial, suffix = self._ghost
        self._ghost = None
        if is_stale(self.document, ticket):
            return None
        return partial + suffix

    def apply_children(self, parent_id: str, items: list[NewRowSpec]) -> list[str]:
        """Insert suggested children, unless the parent is gone."""
        if not items:
            return []
        if parent_id != ROOT_ID and find_by_id(self.document, parent_id) is None:
            logger.debug(f"Discarded {len(items)} suggested rows for {parent_id}")
            return []
        return self.add_children(parent_id, items)


def _first_added(events: list[PlanEvent]) -> str | None:
    for event in events:
        if isinstance(event, RowAdded):
            return event.row_id
    return None
