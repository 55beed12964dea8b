"""Pure tree traversal and path-copying combinators.

All functions in this module are pure - no I/O, no side effects.
Query functions read the tree; structural functions return a new
document that shares every subtree they did not touch.
"""

from collections.abc import Callable, Iterable, Iterator
from typing import TypeVar

from plantree.domain.types import ROOT_ID, DropEdge, SiblingList

from .models import PlanDocument, Row, RowKind, TaskStatus

T = TypeVar("T")


# =============================================================================
# Fundamental Operations
# =============================================================================


def iter_rows(rows: Iterable[Row]) -> Iterator[Row]:
    """Yield every row in pre-order (parent before children)."""
    for row in rows:
        yield row
        yield from iter_rows(row.children)


def fold_rows(
    rows: Iterable[Row],
    initial: T,
    f: Callable[[T, Row, int], T],
) -> T:
    """Fold over rows in pre-order with their depth.

    Args:
        rows: Top-level rows to fold over (depth 0).
        initial: Starting accumulator value.
        f: Function (accumulator, row, depth) -> new_accumulator.

    Returns:
        Final accumulated value after visiting every row.
    """

    def fold_row(acc: T, row: Row, depth: int) -> T:
        acc = f(acc, row, depth)
        for child in row.children:
            acc = fold_row(acc, child, depth + 1)
        return acc

    result = initial
    for row in rows:
        result = fold_row(result, row, 0)
    return result


def _top_rows(source: PlanDocument | Row | Iterable[Row]) -> list[Row]:
    if isinstance(source, PlanDocument):
        return list(source.root_children)
    if isinstance(source, Row):
        return [source]
    return list(source)


# =============================================================================
# Lookups
# =============================================================================


def find_by_id(document: PlanDocument, row_id: str) -> Row | None:
    """Find a row by id (depth-first, first match)."""
    for row in iter_rows(document.root_children):
        if row.id == row_id:
            return row
    return None


def find_parent_list(document: PlanDocument, row_id: str) -> SiblingList | None:
    """Find the sibling list containing ``row_id``.

    Returns:
        The siblings, the id of their owner (ROOT_ID for the top level)
        and the row's index, or None if the row does not exist.
    """

    def search(rows: list[Row], owner_id: str) -> SiblingList | None:
        for index, row in enumerate(rows):
            if row.id == row_id:
                return SiblingList(rows=tuple(rows), owner_id=owner_id, index=index)
        for row in rows:
            found = search(row.children, row.id)
            if found:
                return found
        return None

    return search(document.root_children, ROOT_ID)


def path_to(document: PlanDocument, row_id: str) -> list[str] | None:
    """Return the ids from the top level down to and including ``row_id``.

    Used to keep ancestors highlighted while a row is dragged.
    """

    def search(rows: list[Row], path: list[str]) -> list[str] | None:
        for row in rows:
            current = path + [row.id]
            if row.id == row_id:
                return current
            found = search(row.children, current)
            if found:
                return found
        return None

    return search(document.root_children, [])


def ancestors_of(document: PlanDocument, row_id: str) -> list[str]:
    """Return the ancestor ids of a row, outermost first."""
    path = path_to(document, row_id)
    return path[:-1] if path else []


def parent_index(document: PlanDocument) -> dict[str, str]:
    """Map every row id to the id of its owner (ROOT_ID for the top level)."""

    def collect(rows: list[Row], owner_id: str, acc: dict[str, str]) -> dict[str, str]:
        for row in rows:
            acc[row.id] = owner_id
            collect(row.children, row.id, acc)
        return acc

    return collect(document.root_children, ROOT_ID, {})


def parent_id_of(document: PlanDocument, row_id: str) -> str | None:
    """Return the owner id of a row, or None if the row does not exist."""
    siblings = find_parent_list(document, row_id)
    return siblings.owner_id if siblings else None


def next_visible_id(
    document: PlanDocument,
    row_id: str,
    search_term: str = "",
    search_active: bool = False,
) -> str | None:
    """Return the id of the row after ``row_id`` in visible order."""
    ids = [row.id for row in flatten_visible(document, search_term, search_active)]
    if row_id not in ids:
        return None
    index = ids.index(row_id)
    return ids[index + 1] if index + 1 < len(ids) else None


# =============================================================================
# Predicates
# =============================================================================


def contains_id(row: Row, row_id: str) -> bool:
    """Check if ``row_id`` is the row itself or one of its descendants."""
    return any(node.id == row_id for node in iter_rows([row]))


def has_descendant_of_kind(row: Row, kind: RowKind) -> bool:
    """Check if the row or anything beneath it has the given kind.

    Panels holding at least one task are the ones tracked by the
    progress navigation.
    """
    return any(node.kind == kind for node in iter_rows([row]))


def matches_search(row: Row, term: str) -> bool:
    """Case-insensitive match of ``term`` against the row or any descendant.

    Label, tooltip and link target are searched. A row matches if it, or
    anything beneath it, matches, so ancestors of deep matches stay
    visible. An empty term matches everything.
    """
    if not term:
        return True
    needle = term.lower()
    for node in iter_rows([row]):
        if (
            needle in node.label.lower()
            or needle in node.tooltip.lower()
            or needle in node.link_target.lower()
        ):
            return True
    return False


# =============================================================================
# Derived Views
# =============================================================================


def flatten_visible(
    source: PlanDocument | Iterable[Row],
    search_term: str = "",
    search_active: bool = False,
) -> list[Row]:
    """Flatten the tree into the rows a host would render, in order.

    With search active, rows failing ``matches_search`` are pruned and
    every remaining row is treated as expanded. Otherwise the children
    of collapsed rows are pruned. Hidden rows are still returned; hiding
    only dims a row.
    """
    result: list[Row] = []

    def walk(rows: list[Row]) -> None:
        for row in rows:
            if search_active and not matches_search(row, search_term):
                continue
            result.append(row)
            if search_active or row.expanded:
                walk(row.children)

    walk(_top_rows(source))
    return result


def count_rows(source: PlanDocument | Row | Iterable[Row]) -> int:
    """Count rows including every subtree."""
    return sum(1 for _ in iter_rows(_top_rows(source)))


def count_descendants(row: Row) -> int:
    return count_rows(row.children)


def validate_document(document: PlanDocument) -> list[str]:
    """Return a list of structural problems (empty if the document is sound)."""
    problems: list[str] = []
    seen: set[str] = set()
    for row in iter_rows(document.root_children):
        if row.id in seen:
            problems.append(f"Duplicate row id: {row.id}")
        seen.add(row.id)
        if (row.completed_at is not None) != (row.status == TaskStatus.DONE):
            problems.append(f"Row {row.id}: completion time does not match status")
    for row in document.root_children:
        if row.kind != RowKind.PANEL:
            problems.append(f"Top-level row {row.id} is a {row.kind.value}, not a panel")
    if document.editing_id is not None and document.editing_id not in seen:
        problems.append(f"Edit session points at missing row {document.editing_id}")
    return problems


# =============================================================================
# Path-Copying Updates
# =============================================================================


def map_rows(document: PlanDocument, f: Callable[[Row], Row]) -> PlanDocument:
    """Transform every row in the tree.

    Args:
        document: The document to transform.
        f: Function (row) -> new_row, applied bottom-up.

    Returns:
        New document with all rows transformed.
    """

    def transform(row: Row) -> Row:
        children = [transform(child) for child in row.children]
        return f(row).model_copy(update={"children": children})

    children = [transform(row) for row in document.root_children]
    return document.model_copy(update={"root_children": children})


def _update_in(
    rows: list[Row],
    row_id: str,
    update: Callable[[Row], Row],
) -> list[Row] | None:
    for index, row in enumerate(rows):
        if row.id == row_id:
            copied = list(rows)
            copied[index] = update(row)
            return copied
        children = _update_in(row.children, row_id, update)
        if children is not None:
            copied = list(rows)
            copied[index] = row.model_copy(update={"children": children})
            return copied
    return None


def update_row(
    document: PlanDocument,
    row_id: str,
    update: Callable[[Row], Row],
) -> PlanDocument | None:
    """Replace one row, copying only the spine above it.

    Args:
        document: The document to update.
        row_id: Id of the row to replace.
        update: Function (row) -> new_row.

    Returns:
        New document, or None if the row does not exist.
    """
    children = _update_in(document.root_children, row_id, update)
    if children is None:
        return None
    return document.model_copy(update={"root_children": children})


def _update_list(
    document: PlanDocument,
    owner_id: str,
    update: Callable[[list[Row]], list[Row]],
) -> PlanDocument | None:
    if owner_id == ROOT_ID:
        return document.model_copy(
            update={"root_children": update(list(document.root_children))}
        )
    return update_row(
        document,
        owner_id,
        lambda owner: owner.model_copy(update={"children": update(list(owner.children))}),
    )


def remove_row(document: PlanDocument, row_id: str) -> tuple[PlanDocument, Row] | None:
    """Detach a row and its subtree.

    Returns:
        (new_document, removed_row), or None if the row does not exist.
    """
    siblings = find_parent_list(document, row_id)
    if siblings is None:
        return None
    removed = siblings.rows[siblings.index]

    def drop(rows: list[Row]) -> list[Row]:
        return [row for row in rows if row.id != row_id]

    updated = _update_list(document, siblings.owner_id, drop)
    if updated is None:
        return None
    return updated, removed


def insert_relative(
    document: PlanDocument,
    target_id: str,
    row: Row,
    edge: DropEdge,
) -> PlanDocument | None:
    """Insert ``row`` immediately before or after ``target_id``.

    Returns:
        New document, or None if the target does not exist.
    """
    siblings = find_parent_list(document, target_id)
    if siblings is None:
        return None
    insert_at = siblings.index if edge == "before" else siblings.index + 1

    def insert(rows: list[Row]) -> list[Row]:
        rows.insert(insert_at, row)
        return rows

    return _update_list(document, siblings.owner_id, insert)


def append_children(
    document: PlanDocument,
    parent_id: str,
    rows: list[Row],
    expand: bool = True,
) -> PlanDocument | None:
    """Append rows to a parent's child list (or the top level).

    Args:
        document: The document to update.
        parent_id: ROOT_ID or the id of an existing row.
        rows: Rows to append, in order.
        expand: Also expand the parent so the new rows are shown.

    Returns:
        New document, or None if the parent does not exist.
    """
    if parent_id == ROOT_ID:
        return document.model_copy(
            update={"root_children": list(document.root_children) + rows}
        )

    def attach(parent: Row) -> Row:
        update: dict[str, object] = {"children": list(parent.children) + rows}
        if expand:
            update["expanded"] = True
        return parent.model_copy(update=update)

    return update_row(document, parent_id, attach)


def sibling_count(document: PlanDocument, parent_id: str) -> int | None:
    """Return the number of children of a parent, or None if it is missing."""
    if parent_id == ROOT_ID:
        return len(document.root_children)
    parent = find_by_id(document, parent_id)
    return len(parent.children) if parent else None
