"""Domain value objects for plantree.

Small immutable values shared by the plan, drag and confirmation
modules.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from plantree.domain.plan.models import Row

# Owner id of the top-level sibling list. The root has no row of its own.
ROOT_ID = "root"

DropEdge = Literal["before", "after"]


@dataclass(frozen=True)
class SiblingList:
    """The sibling list that contains a row.

    Attributes:
        rows: The sibling rows, in order.
        owner_id: Id of the row owning the list, or ROOT_ID.
        index: Position of the looked-up row within ``rows``.
    """

    rows: tuple["Row", ...]
    owner_id: str
    index: int

    @property
    def is_root(self) -> bool:
        """Return True if the list is the document's top level."""
        return self.owner_id == ROOT_ID

    def ids(self) -> list[str]:
        """Return the ids of the siblings, in order."""
        return [row.id for row in self.rows]
