"""Ollama-backed suggestion provider.

Completions and child-row batches come from a local Ollama model. The
internal calls return ``Result`` values; the public provider methods
unwrap them to empty answers and log the failure, so a missing server
never reaches the engine as an exception.
"""

import json
import logging
from typing import Any

import httpx
import ollama
from pydantic import ValidationError

from plantree.domain.plan import NewRowSpec, RowKind
from plantree.domain.shared.result import Err, Ok, Result, map_result, unwrap_or

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "qwen2.5-coder:7b"
DEFAULT_HOST = "http://localhost:11434"

COMPLETION_PROMPT = """Context: A hierarchical project plan.
Current section: "{section}"
Existing items: {siblings}

The user is typing a {kind} name: "{partial}"

Predict the rest of the text.
- Provide ONLY the remaining part of the string.
- DO NOT repeat the words the user has already typed ("{partial}").
- If the next word is not a continuation of the current word, INCLUDE a leading space.
- If there is no logical completion, return nothing.
- Keep it concise (1-5 words).
- Example: user types "Book fli", you return "ghts to Paris".
- Example: user types "Plan a trip", you return " to Yosemite".
"""

CHILDREN_PROMPT = """Context: "{title}" -> "{parent}"

Generate {count} logical, detailed subtasks for this section.
Mix kinds: "task" for actions, "link" for resources, "text" for headers.

For each item give a "tooltip": a detailed description (30-50 words)
explaining the reasoning, the concrete steps and how it serves the
parent goal.

Return JSON: {{"items": [{{"label": string, "kind": "task"|"text"|"link", "tooltip": string}}]}}
"""

def clean_completion(partial: str, raw: str) -> str:
    """Normalise a model completion into a suffix for ``partial``.

    Keeps the first line, drops wrapping quotes, removes the typed text
    if the model repeated it, and avoids doubling a trailing space.
    """
    lines = [line for line in raw.splitlines() if line.strip()]
    if not lines:
        return ""
    suggestion = lines[0].rstrip().strip("\"'`")

    typed = partial.strip()
    if typed and suggestion.strip().lower().startswith(typed.lower()):
        suggestion = suggestion.strip()[len(typed):]
        if not suggestion.strip():
            return ""

    if partial.endswith(" "):
        suggestion = suggestion.lstrip()
    return suggestion


def parse_child_specs(raw: str, limit: int | None = None) -> list[NewRowSpec]:
    """Parse a model's JSON answer into child row proposals.

    Accepts either a bare array or an object holding one. Items may use
    ``name``/``type`` instead of ``label``/``kind``; items that still do
    not validate are dropped.

    Args:
        raw: Model output.
        limit: Maximum number of proposals to keep.

    Returns:
        Parsed proposals (possibly empty).
    """
    try:
        data: Any = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("Child suggestions were not valid JSON")
        return []

    if isinstance(data, dict):
        data = data.get("items") or next(
            (value for value in data.values() if isinstance(value, list)), []
        )
    if not isinstance(data, list):
        return []

    specs: list[NewRowSpec] = []
    for item in data:
        if not isinstance(item, dict):
            continue
        fields = {
            "label": item.get("label", item.get("name")),
            "kind": item.get("kind", item.get("type", RowKind.TASK.value)),
            "tooltip": item.get("tooltip") or "",
        }
        try:
            spec = NewRowSpec.model_validate(fields)
        except ValidationError:
            continue
        if spec.kind == RowKind.PANEL or not spec.label.strip():
            continue
        specs.append(spec)
    return specs[:limit] if limit is not None else specs


class OllamaSuggestionProvider:
    """Suggestion provider backed by an Ollama server.

    Example:
        provider = OllamaSuggestionProvider(model="qwen2.5-coder:7b")
        suffix = provider.suggest_completion("Book fli", RowKind.TASK, [], "Trip")
    """

    def __init__(
        self,
        model: str = DEFAULT_MODEL,
        host: str = DEFAULT_HOST,
        timeout: float = 20.0,
        min_prefix: int = 2,
        max_children: int = 7,
        client: Any | None = None,
    ) -> None:
        """Initialize the provider.

        Args:
            model: Generation model name.
            host: Ollama server URL.
            timeout: Request timeout in seconds.
            min_prefix: Shortest partial label worth completing.
            max_children: Most child rows returned per request.
            client: Preconfigured client (anything with ``generate``).
        """
        self._model = model
        self._host = host
        self._timeout = timeout
        self._min_prefix = min_prefix
        self._max_children = max_children
        self._client = client

    def _get_client(self) -> Any:
        if self._client is None:
            self._client = ollama.Client(host=self._host, timeout=self._timeout)
        return self._client

    def generate(self, prompt: str, **options: Any) -> Result[str, str]:
        """Run one generation.

        Returns:
            Ok(str) with the model's text, or Err(str) on failure.
        """
        request: dict[str, Any] = {"model": self._model, "prompt": prompt}
        if options.pop("json_format", False):
            request["format"] = "json"
        try:
            response = self._get_client().generate(**request, options=options)
            return Ok(response["response"])
        except httpx.ConnectError:
            return Err(f"Cannot connect to Ollama at {self._host}. Is Ollama running?")
        except Exception as e:
            return Err(f"Generation error: {e}")

    def complete(
        self,
        partial_label: str,
        row_kind: RowKind,
        sibling_labels: list[str],
        section_title: str,
    ) -> Result[str, str]:
        """Ask the model for the rest of a label."""
        if len(partial_label.strip()) < self._min_prefix:
            return Ok("")
        prompt = COMPLETION_PROMPT.format(
            section=section_title,
            siblings=", ".join(sibling_labels) or "(none)",
            kind=row_kind.value,
            partial=partial_label,
        )
        result = self.generate(prompt, temperature=0.1, num_predict=24)
        return map_result(result, lambda raw: clean_completion(partial_label, raw))

    def propose_children(
        self,
        parent_label: str,
        document_title: str,
    ) -> Result[list[NewRowSpec], str]:
        """Ask the model for child rows of a section."""
        prompt = CHILDREN_PROMPT.format(
            title=document_title,
            parent=parent_label,
            count=f"5-{self._max_children}",
        )
        result = self.generate(prompt, json_format=True, num_predict=1500)
        return map_result(result, lambda raw: parse_child_specs(raw, limit=self._max_children))

    def suggest_completion(
        self,
        partial_label: str,
        row_kind: RowKind,
        sibling_labels: list[str],
        section_title: str,
    ) -> str:
        result = self.complete(partial_label, row_kind, sibling_labels, section_title)
        if isinstance(result, Err):
            logger.warning(f"Autocomplete failed: {result.error}")
        return unwrap_or(result, "")

    def suggest_children(
        self,
        parent_label: str,
        document_title: str,
    ) -> list[NewRowSpec]:
        result = self.propose_children(parent_label, document_title)
        if isinstance(result, Err):
            logger.warning(f"Child suggestions failed: {result.error}")
        return unwrap_or(result, [])
