"""Drag-and-drop reordering and reparenting for hierarchical lists."""

from sortable_tree.config import TreeConfig
from sortable_tree.core.drag.permissions import PermissionGate
from sortable_tree.core.drag.projector import get_projection
from sortable_tree.core.drag.session import DragSession
from sortable_tree.core.tree.codec import build, flatten
from sortable_tree.core.tree.visibility import remove_children_of, visible_items
from sortable_tree.errors import StructuralError
from sortable_tree.models.node import (
    DragPhase,
    DropResult,
    FlattenedNode,
    Projection,
    RejectReason,
    TreeNode,
)

__all__ = [
    "DragPhase",
    "DragSession",
    "DropResult",
    "FlattenedNode",
    "PermissionGate",
    "Projection",
    "RejectReason",
    "StructuralError",
    "TreeConfig",
    "TreeNode",
    "build",
    "flatten",
    "get_projection",
    "remove_children_of",
    "visible_items",
]
