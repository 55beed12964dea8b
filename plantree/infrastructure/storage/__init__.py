"""Storage infrastructure for plantree."""

from plantree.infrastructure.storage.json_storage import JsonStorage

__all__ = ["JsonStorage"]
