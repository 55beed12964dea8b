"""Confirmation gates for delete and reset."""

from .gates import (
    ConfirmPrompt,
    DeleteWarning,
    PendingDelete,
    PendingReset,
    confirm_delete,
    confirm_reset,
    request_delete,
    request_reset,
)

__all__ = [
    "DeleteWarning",
    "ConfirmPrompt",
    "PendingDelete",
    "PendingReset",
    "request_delete",
    "confirm_delete",
    "request_reset",
    "confirm_reset",
]
