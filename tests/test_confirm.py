from __future__ import annotations

from plantree.domain.confirm import (
    DeleteWarning,
    PendingReset,
    confirm_delete,
    confirm_reset,
    request_delete,
    request_reset,
)
from plantree.domain.plan import DeleteSubtree, PlanDocument, ResetTask


class TestDeleteGate:
    def test_row_with_children(self, document: PlanDocument) -> None:
        pending = request_delete(document, "task-documents")
        assert pending is not None
        assert pending.warning == DeleteWarning.HAS_CHILDREN
        prompt = pending.prompt()
        assert prompt.title == "Delete Item and Contents?"
        assert '"Gather income documents" has nested items' in prompt.message

    def test_active_task(self, document: PlanDocument) -> None:
        pending = request_delete(document, "task-tour")
        assert pending is not None
        assert pending.warning == DeleteWarning.ACTIVE_TASK
        assert pending.prompt().title == "Delete Active Task?"

    def test_plain_rows(self, document: PlanDocument) -> None:
        for row_id in ["task-w2", "comment-agent", "link-lenders"]:
            pending = request_delete(document, row_id)
            assert pending is not None
            assert pending.warning == DeleteWarning.PLAIN

    def test_unnamed_row_prompt(self) -> None:
        document = PlanDocument.model_validate(
            {"title": "t", "root_children": [{"id": "p", "kind": "panel"}]}
        )
        pending = request_delete(document, "p")
        assert pending is not None
        assert pending.prompt().message == 'Are you sure you want to delete "Unnamed Item"?'

    def test_confirm_issues_delete(self, document: PlanDocument) -> None:
        pending = request_delete(document, "task-w2")
        assert pending is not None
        assert confirm_delete(pending) == DeleteSubtree(row_id="task-w2")

    def test_missing_row(self, document: PlanDocument) -> None:
        assert request_delete(document, "gone") is None


class TestResetGate:
    def test_reset_prompt_uses_label(self, document: PlanDocument) -> None:
        pending = request_reset(document, "task-inspection")
        assert pending == PendingReset(row_id="task-inspection", name="Schedule home inspection")
        assert pending.prompt().message == 'Reset task "Schedule home inspection"?'

    def test_reset_prompt_name_override(self, document: PlanDocument) -> None:
        pending = request_reset(document, "task-inspection", name="Inspection")
        assert pending is not None
        assert pending.prompt().message == 'Reset task "Inspection"?'

    def test_reset_only_for_tasks(self, document: PlanDocument) -> None:
        assert request_reset(document, "panel-closing") is None
        assert request_reset(document, "gone") is None

    def test_confirm_issues_reset(self, document: PlanDocument) -> None:
        pending = request_reset(document, "task-inspection")
        assert pending is not None
        assert confirm_reset(pending) == ResetTask(row_id="task-inspection")
