"""Hide collapsed and dragged subtrees from the flat projection."""

from collections.abc import Collection, Sequence

from sortable_tree.core.tree.codec import flatten
from sortable_tree.models.node import FlattenedNode, NodeId, TreeNode


def remove_children_of(
    items: Sequence[FlattenedNode],
    hidden_ids: Collection[NodeId],
) -> list[FlattenedNode]:
    """Drop every descendant of the given ids in one left-to-right pass.

    The hidden items themselves stay visible. Relies on pre-order: a parent is
    seen before any of its descendants.
    """
    excluded = set(hidden_ids)
    result: list[FlattenedNode] = []
    for item in items:
        if item.parent_id is not None and item.parent_id in excluded:
            if item.children:
                excluded.add(item.id)
            continue
        result.append(item)
    return result


def collapsed_ids(items: Sequence[FlattenedNode]) -> list[NodeId]:
    """Ids of collapsed items that actually have children."""
    return [item.id for item in items if item.collapsed and item.children]


def visible_items(
    tree: Sequence[TreeNode],
    *,
    active_id: NodeId | None = None,
    max_depth: int | None = None,
) -> list[FlattenedNode]:
    """The visible sequence used as ordering context for drag projection.

    Collapsed subtrees and the subtree of ``active_id`` are hidden. With a
    ``max_depth``, items nested deeper than it are dropped as well; their
    ancestors are always shallower and therefore stay visible.
    """
    flattened = flatten(tree)
    hidden = collapsed_ids(flattened)
    if active_id is not None:
        hidden.insert(0, active_id)

    result = remove_children_of(flattened, hidden)
    if max_depth is not None:
        result = [item for item in result if item.depth <= max_depth]
    return result
