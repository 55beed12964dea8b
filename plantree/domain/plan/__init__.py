"""Plan domain - the hierarchical plan document.

All exports are pure (no I/O, no side effects).

Key Types:
    RowKind - Kind of a row (panel, task, text, link, comment)
    TaskStatus - Five-valued task status
    Row - Tree node
    PlanDocument - Title, top-level rows and the edit session
    NewRowSpec - Suggested child row
    RowSettings - Auxiliary metadata patch

Query Functions:
    find_by_id - Find a row by id
    find_parent_list - Sibling list containing a row
    path_to - Ancestor chain down to a row
    has_descendant_of_kind - Kind test over a subtree
    matches_search - Search match over a subtree
    flatten_visible - Rows in render order

Commands:
    AddChild, AddMultipleChildren, DeleteSubtree, MoveRow,
    CycleTaskStatus, ResetTask, ToggleExpanded, ToggleExpandedAll,
    ToggleVisible, BeginEdit, CommitEdit, CancelEdit, PatchSettings

Events:
    RowAdded, RowsAdded, RowDeleted, RowMoved, TaskStatusChanged,
    RowUpdated, EditSessionChanged, CommandIgnored
"""

from .commands import (
    AddChild,
    AddMultipleChildren,
    BeginEdit,
    CancelEdit,
    Command,
    CommandAdapter,
    CommitEdit,
    CycleTaskStatus,
    DeleteSubtree,
    MoveRow,
    PatchSettings,
    ResetTask,
    ToggleExpanded,
    ToggleExpandedAll,
    ToggleVisible,
)
from .events import (
    CommandIgnored,
    EditSessionChanged,
    PlanEvent,
    RowAdded,
    RowDeleted,
    RowMoved,
    RowsAdded,
    RowUpdated,
    TaskStatusChanged,
)
from .factory import default_label, generate_id, new_row, row_from_spec
from .models import NewRowSpec, PlanDocument, Row, RowKind, RowSettings, TaskStatus
from .seed import SAMPLE_PLAN, sample_document
from .traversal import (
    ancestors_of,
    append_children,
    contains_id,
    count_descendants,
    count_rows,
    find_by_id,
    find_parent_list,
    flatten_visible,
    fold_rows,
    has_descendant_of_kind,
    insert_relative,
    iter_rows,
    map_rows,
    matches_search,
    next_visible_id,
    parent_id_of,
    parent_index,
    path_to,
    remove_row,
    sibling_count,
    update_row,
    validate_document,
)

__all__ = [
    # Models
    "RowKind",
    "TaskStatus",
    "Row",
    "PlanDocument",
    "NewRowSpec",
    "RowSettings",
    # Factory
    "generate_id",
    "default_label",
    "new_row",
    "row_from_spec",
    # Seed
    "SAMPLE_PLAN",
    "sample_document",
    # Traversal - queries
    "iter_rows",
    "fold_rows",
    "find_by_id",
    "find_parent_list",
    "path_to",
    "ancestors_of",
    "parent_index",
    "parent_id_of",
    "next_visible_id",
    "contains_id",
    "has_descendant_of_kind",
    "matches_search",
    "flatten_visible",
    "count_rows",
    "count_descendants",
    "sibling_count",
    "validate_document",
    # Traversal - path copying
    "map_rows",
    "update_row",
    "remove_row",
    "insert_relative",
    "append_children",
    # Commands
    "Command",
    "CommandAdapter",
    "AddChild",
    "AddMultipleChildren",
    "DeleteSubtree",
    "MoveRow",
    "CycleTaskStatus",
    "ResetTask",
    "ToggleExpanded",
    "ToggleExpandedAll",
    "ToggleVisible",
    "BeginEdit",
    "CommitEdit",
    "CancelEdit",
    "PatchSettings",
    # Events
    "PlanEvent",
    "RowAdded",
    "RowsAdded",
    "RowDeleted",
    "RowMoved",
    "TaskStatusChanged",
    "RowUpdated",
    "EditSessionChanged",
    "CommandIgnored",
]
