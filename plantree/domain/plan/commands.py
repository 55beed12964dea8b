"""Plan commands.

The closed set of writes a host can ask of the engine. Each command is
a small frozen model; ``Command`` is their tagged union, so a command
received as JSON can be validated with ``CommandAdapter``.
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter

from plantree.domain.types import ROOT_ID, DropEdge

from .models import NewRowSpec, RowKind, RowSettings


class _Command(BaseModel):
    model_config = {"frozen": True}


class AddChild(_Command):
    """Append a new row, opened for editing, to a parent's children."""

    name: Literal["add_child"] = "add_child"
    parent_id: str = ROOT_ID
    kind: RowKind


class AddMultipleChildren(_Command):
    """Append several suggested rows to a parent, none of them editing."""

    name: Literal["add_multiple_children"] = "add_multiple_children"
    parent_id: str
    items: list[NewRowSpec]


class DeleteSubtree(_Command):
    name: Literal["delete_subtree"] = "delete_subtree"
    row_id: str


class MoveRow(_Command):
    """Move a row (with its subtree) next to a target row."""

    name: Literal["move_row"] = "move_row"
    source_id: str
    target_id: str
    edge: DropEdge


class CycleTaskStatus(_Command):
    name: Literal["cycle_task_status"] = "cycle_task_status"
    row_id: str


class ResetTask(_Command):
    """Return a task to NEW and forget its completion time."""

    name: Literal["reset_task"] = "reset_task"
    row_id: str


class ToggleExpanded(_Command):
    name: Literal["toggle_expanded"] = "toggle_expanded"
    row_id: str


class ToggleExpandedAll(_Command):
    name: Literal["toggle_expanded_all"] = "toggle_expanded_all"
    expand: bool


class ToggleVisible(_Command):
    name: Literal["toggle_visible"] = "toggle_visible"
    row_id: str


class BeginEdit(_Command):
    name: Literal["begin_edit"] = "begin_edit"
    row_id: str


class CommitEdit(_Command):
    """Write authored text back and close the edit session."""

    name: Literal["commit_edit"] = "commit_edit"
    row_id: str
    label: str
    link_target: str | None = None


class CancelEdit(_Command):
    name: Literal["cancel_edit"] = "cancel_edit"
    row_id: str


class PatchSettings(_Command):
    name: Literal["patch_settings"] = "patch_settings"
    row_id: str
    settings: RowSettings


Command = Annotated[
    Union[  # noqa: UP007
        AddChild,
        AddMultipleChildren,
        DeleteSubtree,
        MoveRow,
        CycleTaskStatus,
        ResetTask,
        ToggleExpanded,
        ToggleExpandedAll,
        ToggleVisible,
        BeginEdit,
        CommitEdit,
        CancelEdit,
        PatchSettings,
    ],
    Field(discriminator="name"),
]

CommandAdapter: TypeAdapter[Command] = TypeAdapter(Command)
