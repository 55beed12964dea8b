"""Built-in seed plan.

The document a fresh session starts from when no seed file is given.
Kept as a plain literal so it reads the same way a seed file does.
"""

from typing import Any

from .models import PlanDocument

SAMPLE_PLAN: dict[str, Any] = {
    "title": "Home Buying Plan",
    "root_children": [
        {
            "id": "panel-preapproval",
            "position": 0,
            "kind": "panel",
            "label": "Get Pre-Approved",
            "tooltip": "Know the budget before touring homes",
            "expanded": True,
            "children": [
                {
                    "id": "task-credit",
                    "position": 0,
                    "kind": "task",
                    "label": "Check credit report",
                    "tooltip": "Pull reports from all three bureaus and dispute errors",
                    "status": 1,
                },
                {
                    "id": "task-documents",
                    "position": 1,
                    "kind": "task",
                    "label": "Gather income documents",
                    "tooltip": "Two years of W-2s, recent pay stubs, bank statements",
                    "expanded": True,
                    "children": [
                        {
                            "id": "task-w2",
                            "position": 0,
                            "kind": "task",
                            "label": "Download W-2 forms",
                        },
                        {
                            "id": "task-statements",
                            "position": 1,
                            "kind": "task",
                            "label": "Export bank statements",
                            "status": 2,
                        },
                    ],
                },
                {
                    "id": "link-lenders",
                    "position": 2,
                    "kind": "link",
                    "label": "Compare lender rates",
                    "link_target": "https://www.consumerfinance.gov/owning-a-home/",
                },
            ],
        },
        {
            "id": "panel-search",
            "position": 1,
            "kind": "panel",
            "label": "Find a Home",
            "tooltip": "Neighborhoods, tours and offers",
            "children": [
                {
                    "id": "text-neighborhoods",
                    "position": 0,
                    "kind": "text",
                    "label": "Neighborhood shortlist",
                    "media_url": "https://www.youtube.com/embed/Isq-bVj_yHE",
                },
                {
                    "id": "task-tour",
                    "position": 1,
                    "kind": "task",
                    "label": "Tour five homes",
                    "status": 3,
                },
                {
                    "id": "comment-agent",
                    "position": 2,
                    "kind": "comment",
                    "label": "Agent prefers weekend showings",
                },
            ],
        },
        {
            "id": "panel-closing",
            "position": 2,
            "kind": "panel",
            "label": "Closing",
            "children": [
                {
                    "id": "task-inspection",
                    "position": 0,
                    "kind": "task",
                    "label": "Schedule home inspection",
                    "status": 4,
                    "completed_at": "2026-01-12T15:30:00Z",
                },
                {
                    "id": "task-insurance",
                    "position": 1,
                    "kind": "task",
                    "label": "Buy homeowners insurance",
                    "visible": False,
                },
            ],
        },
        {
            "id": "panel-resources",
            "position": 3,
            "kind": "panel",
            "label": "Resources",
            "children": [
                {
                    "id": "link-glossary",
                    "position": 0,
                    "kind": "link",
                    "label": "Mortgage glossary",
                    "link_target": "https://www.hud.gov/glossary",
                    "open_in_new_context": False,
                },
            ],
        },
    ],
}


def sample_document() -> PlanDocument:
    """Return a fresh copy of the built-in seed plan."""
    return PlanDocument.model_validate(SAMPLE_PLAN)
