"""Shared fixtures for plan engine tests."""

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

import pytest

from plantree.domain.plan import NewRowSpec, PlanDocument, RowKind, sample_document
from plantree.global_config import EngineConfig

NOW = datetime(2026, 3, 14, 9, 30, tzinfo=UTC)


class FakeClock:
    """Monotonic clock the test moves by hand."""

    def __init__(self) -> None:
        self.value = 1000.0

    def __call__(self) -> float:
        return self.value

    def advance(self, seconds: float) -> None:
        self.value += seconds


class FakeProvider:
    """Suggestion provider returning canned answers and recording calls."""

    def __init__(
        self,
        suffix: str = "",
        children: list[NewRowSpec] | None = None,
    ) -> None:
        self.suffix = suffix
        self.children = children or []
        self.completion_calls: list[tuple[str, RowKind, list[str], str]] = []
        self.children_calls: list[tuple[str, str]] = []

    def suggest_completion(
        self,
        partial_label: str,
        row_kind: RowKind,
        sibling_labels: list[str],
        section_title: str,
    ) -> str:
        self.completion_calls.append((partial_label, row_kind, sibling_labels, section_title))
        return self.suffix

    def suggest_children(self, parent_label: str, document_title: str) -> list[NewRowSpec]:
        self.children_calls.append((parent_label, document_title))
        return list(self.children)


@pytest.fixture
def document() -> PlanDocument:
    return sample_document()


@pytest.fixture
def small_document() -> PlanDocument:
    """Panel P holding a single new task T1."""
    return PlanDocument.model_validate(
        {
            "title": "Small",
            "root_children": [
                {
                    "id": "P",
                    "kind": "panel",
                    "label": "Panel",
                    "expanded": True,
                    "children": [{"id": "T1", "kind": "task", "label": "First"}],
                }
            ],
        }
    )


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def config() -> EngineConfig:
    return EngineConfig(ai_mode=False, debounce_ms=0, highlight_ms=300)


@pytest.fixture
def plantree_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the config directory at a temporary folder."""
    home = tmp_path / "plantree-home"
    monkeypatch.setenv("PLANTREE_HOME", str(home))
    return home
