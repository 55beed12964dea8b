"""Construction of fresh rows.

New rows open expanded, visible and flagged as new so the host can
highlight them briefly.
"""

from uuid import uuid4

from .models import NewRowSpec, Row, RowKind

DEFAULT_LABELS: dict[RowKind, str] = {
    RowKind.PANEL: "New Panel",
    RowKind.TASK: "New task",
    RowKind.TEXT: "New title",
    RowKind.LINK: "New link",
    RowKind.COMMENT: "Add message",
}


def generate_id(prefix: str = "row") -> str:
    """Generate a document-unique row id such as ``task-3f2a9c01b7de``."""
    return f"{prefix}-{uuid4().hex[:12]}"


def default_label(kind: RowKind) -> str:
    return DEFAULT_LABELS[kind]


def new_row(kind: RowKind, position: int, *, blank_label: bool = False) -> Row:
    """Build a row ready for immediate authoring.

    Args:
        kind: Kind of the new row.
        position: Insertion-order hint (usually the sibling count).
        blank_label: Start non-panel rows with an empty label, for
            authoring with completions.

    Returns:
        A new row with a fresh id.
    """
    label = "" if blank_label and kind != RowKind.PANEL else default_label(kind)
    return Row(
        id=generate_id(kind.value),
        position=position,
        kind=kind,
        label=label,
        expanded=True,
        is_new=True,
    )


def row_from_spec(spec: NewRowSpec, position: int) -> Row:
    """Build a non-editing row from a suggested child."""
    return new_row(spec.kind, position).model_copy(
        update={"label": spec.label, "tooltip": spec.tooltip}
    )
