"""Application service layer for plantree.

Services orchestrate domain operations:

    plan_service - the mutation engine (apply_command)
    progress_service - panel progress statistics
    suggestion_service - suggestion tickets, staleness and debouncing
    session - PlanSession, the stateful front door for a host UI

Example usage:
    >>> from plantree.application import PlanSession
    >>> from plantree.domain.plan import RowKind
    >>> session = PlanSession()
    >>> row_id = session.add_child("panel-search", RowKind.TASK)
    >>> session.document.is_editing(row_id)
    True
"""

from plantree.application.plan_service import CommandOutcome, apply_command
from plantree.application.progress_service import (
    PanelProgress,
    PlanStats,
    document_stats,
    expand_all_target,
    panel_progress,
)
from plantree.application.session import PlanSession
from plantree.application.suggestion_service import (
    CompletionContext,
    SuggestionScheduler,
    SuggestionTicket,
    completion_context,
    is_stale,
    open_ticket,
    request_children,
    request_completion,
)

__all__ = [
    # Mutation engine
    "apply_command",
    "CommandOutcome",
    # Progress
    "PanelProgress",
    "PlanStats",
    "panel_progress",
    "document_stats",
    "expand_all_target",
    # Suggestions
    "SuggestionTicket",
    "SuggestionScheduler",
    "CompletionContext",
    "open_ticket",
    "is_stale",
    "completion_context",
    "request_completion",
    "request_children",
    # Session
    "PlanSession",
]
