"""Plan domain models.

Pure models for the plan document tree. Rows are frozen so that a new
document can share every untouched subtree with the one it replaced.
"""

from datetime import datetime
from enum import Enum, IntEnum

from pydantic import BaseModel, Field, field_validator


class RowKind(str, Enum):
    """Kind of a row in the plan."""

    PANEL = "panel"
    TASK = "task"
    TEXT = "text"
    LINK = "link"
    COMMENT = "comment"


# Older plan exports call task rows "checkbox"
LEGACY_KIND_ALIASES = {"checkbox": "task"}


class TaskStatus(IntEnum):
    """Status of a task row.

    The values are stable and cycle in order: a click on the status
    control advances to ``(status + 1) % 5``.
    """

    NEW = 0
    IN_PROGRESS = 1
    ATTENTION = 2
    BLOCKED = 3
    DONE = 4


class Row(BaseModel):
    """A node in the plan tree.

    Panels group everything beneath them; tasks carry a status; text,
    link and comment rows are annotations. A row does not store its
    parent: the owner of a row is whichever sibling list holds it.
    """

    id: str
    position: int = 0
    kind: RowKind
    label: str = ""
    tooltip: str = ""
    link_target: str = ""
    open_in_new_context: bool = True
    completed_at: datetime | None = None
    due_date: str | None = None
    visible: bool = True
    expanded: bool = False
    status: TaskStatus = TaskStatus.NEW
    media_url: str = ""
    media_script: str = ""
    owner: int = 0
    is_new: bool = False
    children: list["Row"] = Field(default_factory=list)

    model_config = {"frozen": True}

    @field_validator("kind", mode="before")
    @classmethod
    def _accept_legacy_kind(cls, value: object) -> object:
        if isinstance(value, str):
            return LEGACY_KIND_ALIASES.get(value, value)
        return value

    @property
    def is_task(self) -> bool:
        return self.kind == RowKind.TASK

    @property
    def is_done(self) -> bool:
        return self.is_task and self.status == TaskStatus.DONE


class PlanDocument(BaseModel):
    """A whole plan: a title and the top-level rows.

    The root is implicit. ``root_children`` is the top-level sibling list
    and is expected to hold panels only.

    The single document-wide edit session is ``editing_id``: the id of
    the row being edited, or None. ``edit_generation`` changes every time
    the session opens, closes or moves to another row, so that an answer
    to a suggestion request made under an earlier session can be told
    apart from one that is still wanted.
    """

    title: str
    root_children: list[Row] = Field(default_factory=list)
    editing_id: str | None = None
    edit_generation: int = 0

    model_config = {"frozen": True}

    def is_editing(self, row_id: str) -> bool:
        """Return True if ``row_id`` owns the edit session."""
        return self.editing_id is not None and self.editing_id == row_id


class NewRowSpec(BaseModel):
    """A proposed child row, as produced by the suggestion provider."""

    label: str
    kind: RowKind = RowKind.TASK
    tooltip: str = ""

    model_config = {"frozen": True}

    @field_validator("kind", mode="before")
    @classmethod
    def _accept_legacy_kind(cls, value: object) -> object:
        if isinstance(value, str):
            return LEGACY_KIND_ALIASES.get(value, value)
        return value


class RowSettings(BaseModel):
    """Auxiliary metadata patch for a row.

    Only the fields explicitly set are merged into the row. Structure,
    status and completion time are not reachable through settings.
    """

    tooltip: str | None = None
    link_target: str | None = None
    open_in_new_context: bool | None = None
    media_url: str | None = None
    media_script: str | None = None
    due_date: str | None = None

    model_config = {"frozen": True}

    def updates(self) -> dict[str, object]:
        """Return the explicitly set fields as a model_copy update.

        ``due_date`` may be set to None to clear it; None for any other
        field means "leave unchanged".
        """
        return {
            key: value
            for key, value in self.model_dump(exclude_unset=True).items()
            if value is not None or key == "due_date"
        }
