"""Tree navigation: lookup, counting, ancestor paths, and path-copying updates."""

from collections.abc import Callable, Sequence
from dataclasses import replace
from typing import Any

from sortable_tree.models.node import FlattenedNode, NodeId, TreeNode

# Node fields that may be changed with set_property().
SETTABLE_PROPERTIES = frozenset({"title", "collapsed", "disabled", "metadata"})


def find_item_by_id(tree: Sequence[TreeNode], node_id: NodeId) -> TreeNode | None:
    """Depth-first search for a node anywhere in the tree."""
    stack = list(reversed(tree))
    while stack:
        node = stack.pop()
        if node.id == node_id:
            return node
        stack.extend(reversed(node.children))
    return None


def find_item(items: Sequence[FlattenedNode], node_id: NodeId) -> FlattenedNode | None:
    return next((item for item in items if item.id == node_id), None)


def count_tree_items(tree: Sequence[TreeNode]) -> int:
    """Count all nodes, including nested children."""
    count = 0
    stack = list(tree)
    while stack:
        node = stack.pop()
        count += 1
        stack.extend(node.children)
    return count


def get_child_count(tree: Sequence[TreeNode], node_id: NodeId) -> int:
    """Number of descendants of a node (0 if not found)."""
    node = find_item_by_id(tree, node_id)
    return count_tree_items(node.children) if node else 0


def get_item_path(tree: Sequence[TreeNode], node_id: NodeId) -> tuple[NodeId, ...]:
    """Ids from the top-level ancestor down to the node itself.

    Returns an empty tuple if the node is not in the tree.
    """
    stack: list[tuple[TreeNode, tuple[NodeId, ...]]] = [(n, ()) for n in reversed(tree)]
    while stack:
        node, ancestors = stack.pop()
        path = (*ancestors, node.id)
        if node.id == node_id:
            return path
        stack.extend((child, path) for child in reversed(node.children))
    return ()


def set_property(
    tree: tuple[TreeNode, ...],
    node_id: NodeId,
    name: str,
    setter: Callable[[Any], Any],
) -> tuple[TreeNode, ...]:
    """Return a new tree with one node's property replaced by ``setter(old)``.

    Only nodes on the path from the root to the target are copied; every other
    subtree is shared with the input. The input is returned as-is if the id is
    not found.

    Raises:
        ValueError: If ``name`` is not a settable node property.
    """
    if name not in SETTABLE_PROPERTIES:
        msg = f"Cannot set property {name!r}; expected one of {sorted(SETTABLE_PROPERTIES)}"
        raise ValueError(msg)

    path = get_item_path(tree, node_id)
    if not path:
        return tree
    return _rebuild_along(tree, path, lambda node: replace(node, **{name: setter(getattr(node, name))}))


def toggle_property(tree: tuple[TreeNode, ...], node_id: NodeId, name: str) -> tuple[TreeNode, ...]:
    """Flip a boolean node property such as ``collapsed``."""
    return set_property(tree, node_id, name, lambda value: not value)


def _rebuild_along(
    siblings: tuple[TreeNode, ...],
    path: tuple[NodeId, ...],
    change: Callable[[TreeNode], TreeNode],
) -> tuple[TreeNode, ...]:
    head, rest = path[0], path[1:]
    result = []
    for node in siblings:
        if node.id != head:
            result.append(node)
        elif rest:
            result.append(replace(node, children=_rebuild_along(node.children, rest, change)))
        else:
            result.append(change(node))
    return tuple(result)
