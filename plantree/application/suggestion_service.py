"""Suggestion requests and their staleness rules.

Suggestions are requested while the author types and can come back
after the row was deleted, moved, or left edit mode. Every completion
request carries a ticket naming the edited row and the edit generation
it was made under; an answer whose ticket no longer matches the
document is dropped.

``SuggestionScheduler`` adds the debounce: only the last keystroke in a
burst triggers a provider call, which runs in a worker thread so the
event loop keeps serving the UI.
"""

import asyncio
import logging
from typing import TYPE_CHECKING

from pydantic import BaseModel

from plantree.domain.plan import (
    NewRowSpec,
    PlanDocument,
    RowKind,
    find_by_id,
    find_parent_list,
)
from plantree.infrastructure.ai.provider import SuggestionProvider

if TYPE_CHECKING:
    from plantree.application.session import PlanSession

logger = logging.getLogger(__name__)


class SuggestionTicket(BaseModel):
    """Identifies the edit session a suggestion was requested for."""

    row_id: str
    generation: int

    model_config = {"frozen": True}


class CompletionContext(BaseModel):
    """What the provider is told about the row being completed."""

    row_kind: RowKind
    sibling_labels: list[str]
    section_title: str


def open_ticket(document: PlanDocument) -> SuggestionTicket | None:
    """Issue a ticket for the row currently being edited, if any."""
    if document.editing_id is None:
        return None
    return SuggestionTicket(row_id=document.editing_id, generation=document.edit_generation)


def is_stale(document: PlanDocument, ticket: SuggestionTicket) -> bool:
    """Check whether an answer for ``ticket`` should be discarded."""
    return (
        document.editing_id != ticket.row_id
        or document.edit_generation != ticket.generation
        or find_by_id(document, ticket.row_id) is None
    )


def completion_context(document: PlanDocument, row_id: str) -> CompletionContext | None:
    """Describe a row's surroundings for a completion request.

    Sibling labels are the non-empty labels next to the row; the section
    title is the owning row's label, or the document title at top level.
    """
    siblings = find_parent_list(document, row_id)
    if siblings is None:
        return None
    row = siblings.rows[siblings.index]
    owner = None if siblings.is_root else find_by_id(document, siblings.owner_id)
    return CompletionContext(
        row_kind=row.kind,
        sibling_labels=[
            sibling.label
            for sibling in siblings.rows
            if sibling.id != row_id and sibling.label
        ],
        section_title=owner.label if owner else document.title,
    )


def request_completion(
    provider: SuggestionProvider,
    document: PlanDocument,
    partial: str,
) -> tuple[SuggestionTicket, str] | None:
    """Ask for a completion of the edited row's label.

    Returns:
        (ticket, suffix), or None when no row is being edited.
    """
    ticket = open_ticket(document)
    if ticket is None:
        return None
    context = completion_context(document, ticket.row_id)
    if context is None:
        return None
    suffix = provider.suggest_completion(
        partial,
        context.row_kind,
        context.sibling_labels,
        context.section_title,
    )
    return ticket, suffix


def request_children(
    provider: SuggestionProvider,
    document: PlanDocument,
    parent_id: str,
) -> list[NewRowSpec]:
    """Ask for child rows of ``parent_id`` (empty if the parent is gone)."""
    parent = find_by_id(document, parent_id)
    if parent is None:
        return []
    return provider.suggest_children(parent.label, document.title)


class SuggestionScheduler:
    """Debounced, asynchronous suggestion requests for a session.

    Example:
        scheduler = SuggestionScheduler(session, provider, debounce_ms=400)
        scheduler.schedule_completion("Book fli")   # inside a running loop
    """

    def __init__(
        self,
        session: "PlanSession",
        provider: SuggestionProvider,
        debounce_ms: int = 400,
    ) -> None:
        self._session = session
        self._provider = provider
        self._debounce = debounce_ms / 1000
        self._pending: asyncio.Task[str | None] | None = None

    @property
    def pending(self) -> bool:
        return self._pending is not None and not self._pending.done()

    def cancel(self) -> None:
        """Drop the pending request, if any."""
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        self._pending = None

    def schedule_completion(self, partial: str) -> "asyncio.Task[str | None] | None":
        """Restart the debounce timer for a completion of ``partial``.

        Must be called from a running event loop. Returns the task that
        resolves to the applied suffix, or None if it was discarded.
        """
        self.cancel()
        ticket = open_ticket(self._session.document)
        if ticket is None:
            return None
        self._pending = asyncio.get_running_loop().create_task(
            self._complete(ticket, partial)
        )
        return self._pending

    async def _complete(self, ticket: SuggestionTicket, partial: str) -> str | None:
        await asyncio.sleep(self._debounce)
        document = self._session.document
        if is_stale(document, ticket):
            return None
        context = completion_context(document, ticket.row_id)
        if context is None:
            return None
        suffix = await asyncio.to_thread(
            self._provider.suggest_completion,
            partial,
            context.row_kind,
            context.sibling_labels,
            context.section_title,
        )
        if not self._session.apply_completion(ticket, partial, suffix):
            logger.debug(f"Discarded completion for {ticket.row_id}")
            return None
        return suffix

    async def generate_children(self, parent_id: str) -> list[str]:
        """Fetch child rows for a parent and insert them.

        Returns:
            Ids of the inserted rows (empty if nothing was proposed or the
            parent disappeared while waiting).
        """
        parent = find_by_id(self._session.document, parent_id)
        if parent is None:
            return []
        items = await asyncio.to_thread(
            self._provider.suggest_children,
            parent.label,
            self._session.document.title,
        )
        return self._session.apply_children(parent_id, items)
