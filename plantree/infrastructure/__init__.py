"""Infrastructure layer for plantree.

Adapters to the outside world:

- ai: suggestion providers (Ollama)
- storage: JSON config and seed files
"""

from plantree.infrastructure.ai import (
    NullSuggestionProvider,
    OllamaSuggestionProvider,
    SuggestionProvider,
)
from plantree.infrastructure.storage import JsonStorage

__all__ = [
    "SuggestionProvider",
    "NullSuggestionProvider",
    "OllamaSuggestionProvider",
    "JsonStorage",
]
