"""Protocols for the host-supplied permission predicates."""

from typing import Protocol, runtime_checkable

from sortable_tree.models.node import TreeNode


@runtime_checkable
class DragPredicate(Protocol):
    """Decides whether a node may be picked up."""

    def __call__(self, node: TreeNode) -> bool:
        """Return True if the node may start a drag."""
        ...


@runtime_checkable
class DropPredicate(Protocol):
    """Decides whether a source node may be dropped on a target node."""

    def __call__(self, source: TreeNode, target: TreeNode) -> bool:
        """Return True if the drop is allowed."""
        ...
