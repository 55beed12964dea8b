"""Suggestion provider boundary.

The edit session asks an external text-generation service for two
things: the rest of a label being typed, and a batch of child rows for
a section. Both calls are best-effort. A provider never raises into the
engine; failure means an empty answer.
"""

from typing import Protocol

from plantree.domain.plan import NewRowSpec, RowKind


class SuggestionProvider(Protocol):
    """Anything that can propose label completions and child rows."""

    def suggest_completion(
        self,
        partial_label: str,
        row_kind: RowKind,
        sibling_labels: list[str],
        section_title: str,
    ) -> str:
        """Return a suffix to append to ``partial_label`` ("" for none).

        The suffix must not repeat the text already typed.
        """
        ...

    def suggest_children(
        self,
        parent_label: str,
        document_title: str,
    ) -> list[NewRowSpec]:
        """Return zero or more candidate child rows for a parent."""
        ...


class NullSuggestionProvider:
    """Provider used when AI assistance is switched off."""

    def suggest_completion(
        self,
        partial_label: str,
        row_kind: RowKind,
        sibling_labels: list[str],
        section_title: str,
    ) -> str:
        return ""

    def suggest_children(
        self,
        parent_label: str,
        document_title: str,
    ) -> list[NewRowSpec]:
        return []
