"""Domain models for sortable trees."""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any

NodeId = str | int


@dataclass(frozen=True)
class TreeNode:
    """A single node in a tree. Children are owned exclusively by their parent."""

    id: NodeId
    title: str
    children: tuple["TreeNode", ...] = ()
    collapsed: bool = False
    disabled: bool = False
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class FlattenedNode:
    """A tree node in its pre-order position, annotated with tree metadata.

    ``parent_id`` is a lookup key, not an ownership edge. ``children`` keeps the
    node's original children so filters can tell leaves from branches.
    """

    id: NodeId
    title: str
    parent_id: NodeId | None
    depth: int
    index: int
    path: str
    children: tuple[TreeNode, ...] = ()
    collapsed: bool = False
    disabled: bool = False
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_tree_node(self, children: tuple[TreeNode, ...]) -> TreeNode:
        return TreeNode(
            id=self.id,
            title=self.title,
            children=children,
            collapsed=self.collapsed,
            disabled=self.disabled,
            metadata=self.metadata,
        )

    def replace(self, **changes: Any) -> "FlattenedNode":
        return replace(self, **changes)


@dataclass(frozen=True)
class FlatRecord:
    """A persistence row: a node with its parent id and sibling order."""

    id: NodeId
    title: str
    parent: NodeId | None
    order: int
    collapsed: bool = False
    disabled: bool = False
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Projection:
    """Where the active item would land if dropped now."""

    depth: int
    parent_id: NodeId | None
    min_depth: int
    max_depth: int


class DragPhase(Enum):
    IDLE = "idle"
    DRAGGING = "dragging"


@dataclass(frozen=True)
class DragState:
    """Pointer state of an in-progress drag."""

    active_id: NodeId
    over_id: NodeId | None
    horizontal_offset: float
    anchor_parent_id: NodeId | None


class RejectReason(Enum):
    """Why a drop left the tree unchanged."""

    NOT_DRAGGING = "not-dragging"
    NO_PROJECTION = "no-projection"
    PARENT_CHANGE = "parent-change"
    MAX_DEPTH = "max-depth"
    DROP_DENIED = "drop-denied"


@dataclass(frozen=True)
class DropResult:
    """Outcome of committing a drag."""

    accepted: bool
    tree: tuple[TreeNode, ...]
    projection: Projection | None = None
    reason: RejectReason | None = None
