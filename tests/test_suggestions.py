from __future__ import annotations

import pytest

from plantree.application import (
    PlanSession,
    SuggestionScheduler,
    completion_context,
    is_stale,
    open_ticket,
    request_children,
    request_completion,
)
from plantree.application.plan_service import apply_command
from plantree.domain.plan import (
    AddChild,
    BeginEdit,
    DeleteSubtree,
    MoveRow,
    NewRowSpec,
    PlanDocument,
    RowKind,
    find_by_id,
)
from plantree.global_config import EngineConfig
from plantree.infrastructure.ai import NullSuggestionProvider

from .conftest import FakeProvider


def _editing(document: PlanDocument, row_id: str) -> PlanDocument:
    return apply_command(document, BeginEdit(row_id=row_id)).document


class TestTickets:
    def test_no_ticket_without_edit_session(self, document: PlanDocument) -> None:
        assert open_ticket(document) is None

    def test_fresh_ticket_is_not_stale(self, document: PlanDocument) -> None:
        editing = _editing(document, "task-w2")
        ticket = open_ticket(editing)
        assert ticket is not None
        assert ticket.row_id == "task-w2"
        assert not is_stale(editing, ticket)

    def test_ticket_goes_stale_when_row_is_deleted(self, document: PlanDocument) -> None:
        editing = _editing(document, "task-w2")
        ticket = open_ticket(editing)
        assert ticket is not None
        deleted = apply_command(editing, DeleteSubtree(row_id="task-documents")).document
        assert is_stale(deleted, ticket)

    def test_ticket_goes_stale_when_row_moves(self, document: PlanDocument) -> None:
        editing = _editing(document, "task-w2")
        ticket = open_ticket(editing)
        assert ticket is not None
        moved = apply_command(
            editing, MoveRow(source_id="task-w2", target_id="task-tour", edge="after")
        ).document
        assert moved.editing_id == "task-w2"
        assert is_stale(moved, ticket)

    def test_ticket_goes_stale_when_edit_restarts(self, document: PlanDocument) -> None:
        editing = _editing(document, "task-w2")
        ticket = open_ticket(editing)
        assert ticket is not None
        assert is_stale(_editing(editing, "task-w2"), ticket)


class TestCompletionContext:
    def test_nested_row(self, document: PlanDocument) -> None:
        context = completion_context(document, "task-w2")
        assert context is not None
        assert context.row_kind == RowKind.TASK
        assert context.sibling_labels == ["Export bank statements"]
        assert context.section_title == "Gather income documents"

    def test_top_level_row_uses_document_title(self, document: PlanDocument) -> None:
        context = completion_context(document, "panel-search")
        assert context is not None
        assert context.section_title == "Home Buying Plan"
        assert "Find a Home" not in context.sibling_labels
        assert "Closing" in context.sibling_labels

    def test_blank_sibling_labels_are_skipped(self, document: PlanDocument) -> None:
        added = apply_command(
            document, AddChild(parent_id="panel-search", kind=RowKind.TASK), blank_labels=True
        ).document
        context = completion_context(added, "task-tour")
        assert context is not None
        assert context.sibling_labels == [
            "Neighborhood shortlist",
            "Agent prefers weekend showings",
        ]

    def test_missing_row(self, document: PlanDocument) -> None:
        assert completion_context(document, "gone") is None


class TestRequests:
    def test_request_completion_passes_context(self, document: PlanDocument) -> None:
        provider = FakeProvider(suffix="ms")
        editing = _editing(document, "task-w2")

        answer = request_completion(provider, editing, "Download W-2 for")
        assert answer is not None
        ticket, suffix = answer
        assert ticket.row_id == "task-w2"
        assert suffix == "ms"
        assert provider.completion_calls == [
            (
                "Download W-2 for",
                RowKind.TASK,
                ["Export bank statements"],
                "Gather income documents",
            )
        ]

    def test_request_completion_needs_edit_session(self, document: PlanDocument) -> None:
        assert request_completion(FakeProvider(suffix="x"), document, "Tour") is None

    def test_request_children(self, document: PlanDocument) -> None:
        provider = FakeProvider(children=[NewRowSpec(label="Order appraisal")])
        items = request_children(provider, document, "panel-closing")
        assert items == [NewRowSpec(label="Order appraisal")]
        assert provider.children_calls == [("Closing", "Home Buying Plan")]

    def test_request_children_for_missing_parent(self, document: PlanDocument) -> None:
        provider = FakeProvider(children=[NewRowSpec(label="x")])
        assert request_children(provider, document, "gone") == []
        assert provider.children_calls == []

    def test_null_provider_suggests_nothing(self, document: PlanDocument) -> None:
        editing = _editing(document, "task-w2")
        answer = request_completion(NullSuggestionProvider(), editing, "Down")
        assert answer is not None
        assert answer[1] == ""
        assert request_children(NullSuggestionProvider(), document, "panel-closing") == []


class TestScheduler:
    @pytest.fixture
    def session(self, document: PlanDocument, config: EngineConfig) -> PlanSession:
        return PlanSession(document, config=config)

    @pytest.mark.asyncio
    async def test_completion_lands_as_ghost_text(self, session: PlanSession) -> None:
        provider = FakeProvider(suffix=" homes")
        scheduler = SuggestionScheduler(session, provider, debounce_ms=0)
        session.begin_edit("task-tour")

        task = scheduler.schedule_completion("Tour five")
        assert task is not None
        assert await task == " homes"
        assert session.ghost_text("task-tour") == " homes"
        assert not scheduler.pending

    @pytest.mark.asyncio
    async def test_only_last_keystroke_is_sent(self, session: PlanSession) -> None:
        provider = FakeProvider(suffix=" five homes")
        scheduler = SuggestionScheduler(session, provider, debounce_ms=20)
        session.begin_edit("task-tour")

        first = scheduler.schedule_completion("To")
        second = scheduler.schedule_completion("Tour")
        assert first is not None and second is not None
        assert await second == " five homes"
        assert first.cancelled()
        assert [call[0] for call in provider.completion_calls] == ["Tour"]

    @pytest.mark.asyncio
    async def test_edit_change_during_debounce_drops_request(
        self, session: PlanSession
    ) -> None:
        provider = FakeProvider(suffix=" homes")
        scheduler = SuggestionScheduler(session, provider, debounce_ms=20)
        session.begin_edit("task-tour")

        task = scheduler.schedule_completion("Tour")
        assert task is not None
        session.commit_edit("task-tour", "Tour")
        assert await task is None
        assert provider.completion_calls == []

    @pytest.mark.asyncio
    async def test_nothing_scheduled_without_edit(self, session: PlanSession) -> None:
        scheduler = SuggestionScheduler(session, FakeProvider(suffix="x"), debounce_ms=0)
        assert scheduler.schedule_completion("Tour") is None
        assert not scheduler.pending

    @pytest.mark.asyncio
    async def test_generate_children(self, session: PlanSession) -> None:
        provider = FakeProvider(
            children=[
                NewRowSpec(label="Order appraisal", tooltip="Lender requires it"),
                NewRowSpec(label="Title company", kind=RowKind.LINK),
            ]
        )
        scheduler = SuggestionScheduler(session, provider, debounce_ms=0)

        ids = await scheduler.generate_children("panel-closing")
        assert len(ids) == 2
        rows = [find_by_id(session.document, row_id) for row_id in ids]
        assert [row.kind for row in rows] == [RowKind.TASK, RowKind.LINK]
        assert rows[0].tooltip == "Lender requires it"

    @pytest.mark.asyncio
    async def test_generate_children_for_missing_parent(self, session: PlanSession) -> None:
        provider = FakeProvider(children=[NewRowSpec(label="x")])
        scheduler = SuggestionScheduler(session, provider, debounce_ms=0)
        assert await scheduler.generate_children("gone") == []
        assert provider.children_calls == []
