"""Convert between nested trees and their flat pre-order projection."""

from collections.abc import Iterable, Sequence

from sortable_tree.errors import StructuralError
from sortable_tree.models.node import FlattenedNode, NodeId, TreeNode

# Synthetic parent key for top-level items during build.
_ROOT = object()


def flatten(tree: Sequence[TreeNode]) -> list[FlattenedNode]:
    """Flatten a tree into a pre-order list annotated with depth, parent and path.

    Args:
        tree: Top-level nodes.

    Returns:
        One FlattenedNode per tree node. A node always appears directly after its
        parent and before any later sibling's subtree.

    Raises:
        StructuralError: If an id occurs more than once.
    """
    result: list[FlattenedNode] = []
    seen: set[NodeId] = set()

    # Stack of (node, parent_id, depth, index, parent_path), pushed in reverse
    # so siblings pop in order.
    todo: list[tuple[TreeNode, NodeId | None, int, int, str]] = [
        (node, None, 0, i, "") for i, node in reversed(list(enumerate(tree)))
    ]
    while todo:
        node, parent_id, depth, index, parent_path = todo.pop()
        if node.id in seen:
            msg = f"Duplicate node id: {node.id!r}"
            raise StructuralError(msg)
        seen.add(node.id)

        path = f"{parent_path}.{index}" if parent_path else str(index)
        result.append(
            FlattenedNode(
                id=node.id,
                title=node.title,
                parent_id=parent_id,
                depth=depth,
                index=index,
                path=path,
                children=node.children,
                collapsed=node.collapsed,
                disabled=node.disabled,
                metadata=node.metadata,
            )
        )

        for i in range(len(node.children) - 1, -1, -1):
            todo.append((node.children[i], node.id, depth + 1, i, path))

    return result


def build(items: Iterable[FlattenedNode]) -> tuple[TreeNode, ...]:
    """Rebuild a nested tree from a flat sequence.

    Sibling order is the order of appearance in ``items``. ``depth``, ``index``
    and ``path`` are ignored; only ``parent_id`` determines nesting.

    Raises:
        StructuralError: On duplicate ids, a parent_id that names no item in the
            sequence, or a parent cycle.
    """
    by_id: dict[NodeId, FlattenedNode] = {}
    children_of: dict[object, list[NodeId]] = {_ROOT: []}

    for item in items:
        if item.id in by_id:
            msg = f"Duplicate node id: {item.id!r}"
            raise StructuralError(msg)
        by_id[item.id] = item
        key = _ROOT if item.parent_id is None else item.parent_id
        children_of.setdefault(key, []).append(item.id)

    missing = [k for k in children_of if k is not _ROOT and k not in by_id]
    if missing:
        msg = f"Items reference missing parents: {missing!r}"
        raise StructuralError(msg)

    # Pre-order walk from the sentinel. Anything not reached hangs off a cycle.
    order: list[NodeId] = []
    stack = list(reversed(children_of[_ROOT]))
    while stack:
        node_id = stack.pop()
        order.append(node_id)
        stack.extend(reversed(children_of.get(node_id, ())))

    if len(order) != len(by_id):
        unreachable = sorted(map(repr, set(by_id) - set(order)))
        msg = f"Parent cycle among items: {', '.join(unreachable)}"
        raise StructuralError(msg)

    # Children follow their parent in pre-order, so build in reverse.
    built: dict[NodeId, TreeNode] = {}
    for node_id in reversed(order):
        kids = tuple(built.pop(c) for c in children_of.get(node_id, ()))
        built[node_id] = by_id[node_id].to_tree_node(kids)

    return tuple(built[c] for c in children_of[_ROOT])
