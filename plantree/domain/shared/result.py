"""Result type for domain operations that can be refused.

Plan operations are expected to fail quietly: a command may point at a
row that was deleted a moment ago, or ask for a move that would create a
cycle. Instead of raising, operations return ``Ok(value)`` or
``Err(reason)`` and the caller decides what a refusal means.

Example usage:
    >>> def pick_label(labels: list[str], index: int) -> Result[str, str]:
    ...     if index >= len(labels):
    ...         return Err(f"No label at {index}")
    ...     return Ok(labels[index])
    ...
    >>> unwrap_or(pick_label(["Setup"], 3), "")
    ''
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E")
U = TypeVar("U")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Successful outcome carrying a value."""

    value: T


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """Refused outcome carrying the reason."""

    error: E


# Using Union here as TypeVar aliases don't work with | syntax at runtime
Result = Union[Ok[T], Err[E]]  # noqa: UP007


def map_result(result: Ok[T] | Err[E], fn: Callable[[T], U]) -> Ok[U] | Err[E]:
    """Apply fn to the value of an Ok result, passing Err through.

    Args:
        result: The result to transform.
        fn: Function applied to the Ok value.

    Returns:
        Ok with the transformed value, or the original Err.
    """
    if isinstance(result, Ok):
        return Ok(fn(result.value))
    return result


def unwrap_or(result: Ok[T] | Err[E], default: T) -> T:
    """Return the Ok value, or default for an Err."""
    if isinstance(result, Ok):
        return result.value
    return default
