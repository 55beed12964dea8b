"""Drag-and-drop reorder protocol.

Pure transitions producing MoveRow commands.
"""

from .machine import (
    IDLE,
    Drag,
    DragIdle,
    DragState,
    cancel,
    drop,
    edge_for_pointer,
    hover,
    leave,
    pick_up,
)

__all__ = [
    "IDLE",
    "Drag",
    "DragIdle",
    "DragState",
    "edge_for_pointer",
    "pick_up",
    "hover",
    "leave",
    "drop",
    "cancel",
]
