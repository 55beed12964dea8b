"""Shared domain building blocks.

- Result type for operations that may be refused
- Base event model

Example usage:
    >>> from plantree.domain.shared import Ok, Err, unwrap_or
    >>> unwrap_or(Err("Row not found: x"), "")
    ''
"""

from plantree.domain.shared.events import DomainEvent
from plantree.domain.shared.result import (
    Err,
    Ok,
    Result,
    map_result,
    unwrap_or,
)

__all__ = [
    # Result
    "Ok",
    "Err",
    "Result",
    "map_result",
    "unwrap_or",
    # Events
    "DomainEvent",
]
