"""Permission predicates gating drags and drops."""

from dataclasses import dataclass

from sortable_tree.config import LOCKED_METADATA_KEY
from sortable_tree.models.node import FlattenedNode, NodeId, TreeNode
from sortable_tree.protocols import DragPredicate, DropPredicate


@dataclass(frozen=True)
class PermissionGate:
    """Host predicates plus the reparent policy.

    Both predicates default to allowing everything. They receive the original
    tree nodes and must not mutate them.
    """

    can_drag: DragPredicate | None = None
    can_drop: DropPredicate | None = None
    can_change_parent: bool = True

    def allows_drag(self, node: TreeNode) -> bool:
        return self.can_drag is None or bool(self.can_drag(node))

    def allows_drop(self, source: TreeNode, target: TreeNode) -> bool:
        return self.can_drop is None or bool(self.can_drop(source, target))

    def allows_parent(self, anchor_parent_id: NodeId | None, new_parent_id: NodeId | None) -> bool:
        """Reordering within the anchor parent is always allowed."""
        return self.can_change_parent or anchor_parent_id == new_parent_id

    def is_draggable(self, node: TreeNode | FlattenedNode) -> bool:
        """Whether a node is interactive: not disabled, not locked, and allowed by ``can_drag``."""
        if node.disabled or node.metadata.get(LOCKED_METADATA_KEY):
            return False
        if isinstance(node, FlattenedNode):
            node = node.to_tree_node(node.children)
        return self.allows_drag(node)
