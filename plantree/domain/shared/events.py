"""Base event model shared by every plantree event.

Events are immutable records of what a command did (or why it did
nothing). The mutation engine returns them next to the new document so a
host can log, audit or react without inspecting the tree itself.
"""

from datetime import UTC, datetime
from uuid import uuid4

from pydantic import BaseModel, Field


class DomainEvent(BaseModel):
    """Base class for all plantree events.

    Each event has a unique id and the UTC time it was recorded.
    """

    event_id: str = Field(default_factory=lambda: str(uuid4()))
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))

    model_config = {"frozen": True}
