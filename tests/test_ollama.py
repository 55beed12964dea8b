from __future__ import annotations

import json
import logging
from unittest.mock import MagicMock

import httpx
import ollama
import pytest

from plantree.domain.plan import NewRowSpec, RowKind
from plantree.domain.shared import Err, Ok
from plantree.infrastructure.ai import (
    OllamaSuggestionProvider,
    clean_completion,
    parse_child_specs,
)


def _client(response: str) -> MagicMock:
    client = MagicMock()
    client.generate.return_value = {"response": response}
    return client


class TestCleanCompletion:
    @pytest.mark.parametrize(
        "partial,raw,expected",
        [
            ("Book fli", "ghts to Paris", "ghts to Paris"),
            ("Book fli", "Book flights to Paris", "ghts to Paris"),
            ("book fli", "Book flights", "ghts"),
            ("Plan a trip", " to Yosemite", " to Yosemite"),
            ("Plan a trip ", " to Yosemite", "to Yosemite"),
            ("Tour", '"ing the area"\nsecond line', "ing the area"),
            ("Tour", "\n\n  \n", ""),
            ("Tour", "Tour", ""),
        ],
    )
    def test_suffix(self, partial: str, raw: str, expected: str) -> None:
        assert clean_completion(partial, raw) == expected


class TestParseChildSpecs:
    def test_items_object(self) -> None:
        raw = json.dumps(
            {
                "items": [
                    {"label": "Check rates", "kind": "task", "tooltip": "Compare APRs"},
                    {"name": "Rate tracker", "type": "link"},
                    {"label": "Nested panel", "kind": "panel"},
                    {"label": "   "},
                    {"label": "Clip", "kind": "video"},
                    "not an object",
                ]
            }
        )
        assert parse_child_specs(raw) == [
            NewRowSpec(label="Check rates", kind=RowKind.TASK, tooltip="Compare APRs"),
            NewRowSpec(label="Rate tracker", kind=RowKind.LINK),
        ]

    def test_bare_list_and_legacy_kind(self) -> None:
        raw = json.dumps([{"label": "Sign papers", "kind": "checkbox"}])
        assert parse_child_specs(raw) == [NewRowSpec(label="Sign papers", kind=RowKind.TASK)]

    def test_first_list_under_any_key(self) -> None:
        raw = json.dumps({"subtasks": [{"label": "Call agent"}]})
        assert parse_child_specs(raw) == [NewRowSpec(label="Call agent")]

    def test_limit(self) -> None:
        raw = json.dumps([{"label": f"Step {i}"} for i in range(10)])
        assert len(parse_child_specs(raw, limit=7)) == 7

    @pytest.mark.parametrize("raw", ["not json", "42", '{"items": "nope"}'])
    def test_unusable_answers(self, raw: str) -> None:
        assert parse_child_specs(raw) == []


class TestOllamaSuggestionProvider:
    def test_completion_request(self) -> None:
        client = _client("ghts to Paris")
        provider = OllamaSuggestionProvider(model="test-model", client=client)

        suffix = provider.suggest_completion(
            "Book fli", RowKind.TASK, ["Pack bags"], "Trip to France"
        )

        assert suffix == "ghts to Paris"
        kwargs = client.generate.call_args.kwargs
        assert kwargs["model"] == "test-model"
        assert "format" not in kwargs
        assert '"Book fli"' in kwargs["prompt"]
        assert "Pack bags" in kwargs["prompt"]
        assert "Trip to France" in kwargs["prompt"]

    def test_short_prefix_skips_the_model(self) -> None:
        client = _client("anything")
        provider = OllamaSuggestionProvider(client=client, min_prefix=2)
        assert provider.complete("B", RowKind.TASK, [], "Plan") == Ok("")
        client.generate.assert_not_called()

    def test_children_request_uses_json_format(self) -> None:
        answer = json.dumps({"items": [{"label": f"Step {i}"} for i in range(9)]})
        client = _client(answer)
        provider = OllamaSuggestionProvider(client=client, max_children=7)

        items = provider.suggest_children("Closing", "Home Buying Plan")

        assert len(items) == 7
        kwargs = client.generate.call_args.kwargs
        assert kwargs["format"] == "json"
        assert "Closing" in kwargs["prompt"]
        assert "5-7" in kwargs["prompt"]

    @pytest.mark.parametrize(
        "error",
        [
            httpx.ConnectError("connection refused"),
            ollama.ResponseError("model not found"),
            ConnectionError("server down"),
            ValueError("Invalid IPv6 URL"),
            RuntimeError("unexpected"),
        ],
    )
    def test_failures_resolve_to_empty(
        self, error: Exception, caplog: pytest.LogCaptureFixture
    ) -> None:
        client = MagicMock()
        client.generate.side_effect = error
        provider = OllamaSuggestionProvider(client=client)

        with caplog.at_level(logging.WARNING):
            assert provider.suggest_completion("Book fli", RowKind.TASK, [], "Trip") == ""
            assert provider.suggest_children("Closing", "Plan") == []

        assert "Autocomplete failed" in caplog.text
        assert "Child suggestions failed" in caplog.text

    def test_generate_returns_err(self) -> None:
        client = MagicMock()
        client.generate.side_effect = httpx.ReadTimeout("slow")
        result = OllamaSuggestionProvider(client=client).generate("prompt")
        assert isinstance(result, Err)
        assert "slow" in result.error

    def test_malformed_reply_resolves_to_empty(self, caplog: pytest.LogCaptureFixture) -> None:
        client = MagicMock()
        client.generate.return_value = {"done": True}
        provider = OllamaSuggestionProvider(client=client)

        with caplog.at_level(logging.WARNING):
            assert provider.suggest_completion("Book fli", RowKind.TASK, [], "Trip") == ""
            assert provider.suggest_children("Closing", "Plan") == []

        assert "'response'" in caplog.text

    def test_bad_host_resolves_to_empty(self) -> None:
        provider = OllamaSuggestionProvider(host="http://[bad-host")
        assert provider.suggest_completion("Book fli", RowKind.TASK, [], "Trip") == ""
        assert isinstance(provider.generate("prompt"), Err)

    def test_connect_error_names_the_host(self) -> None:
        client = MagicMock()
        client.generate.side_effect = httpx.ConnectError("connection refused")
        provider = OllamaSuggestionProvider(host="http://localhost:9", client=client)
        result = provider.generate("prompt")
        assert isinstance(result, Err)
        assert "Cannot connect to Ollama at http://localhost:9" in result.error
