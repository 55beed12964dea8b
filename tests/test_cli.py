from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from plantree import __version__
from plantree.domain.plan import NewRowSpec, RowKind
from plantree.interfaces.cli import app

from .conftest import FakeProvider

runner = CliRunner()


@pytest.fixture
def seed_file(tmp_path: Path) -> Path:
    path = tmp_path / "plan.json"
    path.write_text(
        json.dumps(
            {
                "title": "Garden",
                "root_children": [
                    {
                        "id": "beds",
                        "kind": "panel",
                        "label": "Raised beds",
                        "expanded": True,
                        "children": [
                            {"id": "soil", "kind": "checkbox", "label": "Buy soil", "status": 1},
                            {"id": "seeds", "kind": "task", "label": "Order seeds"},
                        ],
                    }
                ],
            }
        ),
        encoding="utf-8",
    )
    return path


@pytest.fixture
def offline(plantree_home: Path) -> Path:
    """Config home with AI assistance switched off."""
    result = runner.invoke(app, ["config", "set", "ai_mode", "false"])
    assert result.exit_code == 0
    return plantree_home


class TestRoot:
    def test_version(self) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert f"plantree version {__version__}" in result.output


class TestShow:
    def test_show_respects_collapse(self) -> None:
        result = runner.invoke(app, ["show"])
        assert result.exit_code == 0
        assert "Home Buying Plan" in result.output
        assert "[>] Check credit report" in result.output
        assert "Tour five homes" not in result.output

    def test_show_all(self) -> None:
        result = runner.invoke(app, ["plan", "show", "--all"])
        assert result.exit_code == 0
        assert "[#] Tour five homes" in result.output
        assert "Buy homeowners insurance (hidden)" in result.output

    def test_show_seed_file(self, seed_file: Path) -> None:
        result = runner.invoke(app, ["show", "--seed", str(seed_file)])
        assert result.exit_code == 0
        assert "Garden" in result.output
        assert "[>] Buy soil" in result.output

    def test_missing_seed_file(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["show", "--seed", str(tmp_path / "nope.json")])
        assert result.exit_code == 1
        assert "File not found" in result.output

    def test_seed_file_with_bad_encoding(self, tmp_path: Path) -> None:
        path = tmp_path / "latin.json"
        path.write_bytes(b'{"title": "\xff"}')
        result = runner.invoke(app, ["show", "--seed", str(path)])
        assert result.exit_code == 1
        assert "Invalid encoding" in result.output


class TestPlanCommands:
    def test_search(self) -> None:
        result = runner.invoke(app, ["plan", "search", "agent"])
        assert result.exit_code == 0
        assert "Find a Home" in result.output
        assert "Agent prefers weekend showings" in result.output
        assert "Closing" not in result.output

    def test_search_without_matches(self) -> None:
        result = runner.invoke(app, ["plan", "search", "zzz"])
        assert result.exit_code == 0
        assert "No rows match 'zzz'" in result.output

    def test_progress(self) -> None:
        result = runner.invoke(app, ["progress"])
        assert result.exit_code == 0
        assert "Get Pre-Approved: 0/4 done (0.0%)" in result.output
        assert "[x] Closing: 1/1 done (100.0%)" in result.output
        assert "Total: 1/6 tasks done (16.7%)" in result.output

    def test_validate(self, seed_file: Path) -> None:
        result = runner.invoke(app, ["plan", "validate", "--seed", str(seed_file)])
        assert result.exit_code == 0
        assert "Plan is valid" in result.output

    def test_validate_reports_problems(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.json"
        path.write_text(
            json.dumps({"title": "Bad", "root_children": [{"id": "t", "kind": "task"}]}),
            encoding="utf-8",
        )
        result = runner.invoke(app, ["plan", "validate", "--seed", str(path)])
        assert result.exit_code == 1
        assert "Top-level row t is a task" in result.output


class TestSuggestCommands:
    def test_suggest_offline(self, offline: Path) -> None:
        result = runner.invoke(app, ["plan", "suggest", "task-tour", "Tour five"])
        assert result.exit_code == 0
        assert "No completion" in result.output

    def test_suggest_with_provider(
        self, plantree_home: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr(
            "plantree.interfaces.cli.commands.plan.make_provider",
            lambda config: FakeProvider(suffix=" homes downtown"),
        )
        result = runner.invoke(app, ["plan", "suggest", "task-tour", "Tour five"])
        assert result.exit_code == 0
        assert "Tour five homes downtown" in result.output

    def test_suggest_unknown_row(self, offline: Path) -> None:
        result = runner.invoke(app, ["plan", "suggest", "gone", "Tour"])
        assert result.exit_code == 1
        assert "Row not found: gone" in result.output

    def test_children_offline(self, offline: Path) -> None:
        result = runner.invoke(app, ["plan", "children", "panel-closing"])
        assert result.exit_code == 0
        assert "No suggestions" in result.output

    def test_children_apply(self, plantree_home: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        provider = FakeProvider(
            children=[
                NewRowSpec(label="Order appraisal"),
                NewRowSpec(label="Title company", kind=RowKind.LINK),
            ]
        )
        monkeypatch.setattr(
            "plantree.interfaces.cli.commands.plan.make_provider", lambda config: provider
        )

        listed = runner.invoke(app, ["plan", "children", "panel-closing"])
        assert "- [link] Title company" in listed.output

        applied = runner.invoke(app, ["plan", "children", "panel-closing", "--apply"])
        assert applied.exit_code == 0
        assert "Added 2 rows" in applied.output
        assert "[ ] Order appraisal" in applied.output


class TestConfigCommands:
    def test_set_and_show(self, plantree_home: Path) -> None:
        result = runner.invoke(app, ["config", "set", "debounce_ms", "250"])
        assert result.exit_code == 0
        assert "debounce_ms = 250" in result.output

        shown = runner.invoke(app, ["config", "show"])
        assert "debounce_ms = 250" in shown.output
        assert "ai_mode = True" in shown.output

    def test_unknown_key(self, plantree_home: Path) -> None:
        result = runner.invoke(app, ["config", "set", "colour", "blue"])
        assert result.exit_code == 1
        assert "Unknown setting: colour" in result.output

    def test_invalid_value(self, plantree_home: Path) -> None:
        result = runner.invoke(app, ["config", "set", "request_timeout", "0"])
        assert result.exit_code == 1
        assert "Invalid value for request_timeout" in result.output

    def test_empty_model_is_rejected(self, plantree_home: Path) -> None:
        result = runner.invoke(app, ["config", "set", "suggestion_model", ""])
        assert result.exit_code == 1
        assert "Invalid value for suggestion_model" in result.output
        assert not (plantree_home / "config.json").exists()
