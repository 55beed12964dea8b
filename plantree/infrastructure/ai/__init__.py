"""AI infrastructure for plantree.

Suggestion providers for label completion and child-row generation.
"""

from plantree.infrastructure.ai.ollama import (
    OllamaSuggestionProvider,
    clean_completion,
    parse_child_specs,
)
from plantree.infrastructure.ai.provider import (
    NullSuggestionProvider,
    SuggestionProvider,
)

__all__ = [
    "SuggestionProvider",
    "NullSuggestionProvider",
    "OllamaSuggestionProvider",
    "clean_completion",
    "parse_child_specs",
]
