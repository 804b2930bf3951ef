"""Project where a dragged item would land from pointer offset and neighbours."""

import math
from collections.abc import Sequence
from typing import TypeVar

from loguru import logger

from sortable_tree.models.node import FlattenedNode, NodeId, Projection

T = TypeVar("T")


def get_drag_depth(offset: float, indentation_width: int) -> int:
    """Whole indentation levels covered by a horizontal offset, halves rounding up."""
    if indentation_width <= 0:
        msg = f"indentation_width must be positive, got {indentation_width!r}"
        raise ValueError(msg)
    return math.floor(offset / indentation_width + 0.5)


def move_item(items: Sequence[T], from_index: int, to_index: int) -> list[T]:
    """Return a copy of ``items`` with one element moved to ``to_index``."""
    result = list(items)
    result.insert(to_index, result.pop(from_index))
    return result


def get_projection(
    items: Sequence[FlattenedNode],
    *,
    active_id: NodeId,
    over_id: NodeId | None,
    offset: float,
    indentation_width: int,
) -> Projection | None:
    """Compute the depth and parent the active item would get if dropped on ``over_id``.

    Args:
        items: The visible sequence (collapsed and dragged subtrees removed).
        active_id: The item being dragged.
        over_id: The item under the pointer, or None.
        offset: Horizontal pointer distance since the drag started.
        indentation_width: Width of one depth level, in the offset's units.

    Returns:
        The clamped projection, or None if it cannot be determined: no
        ``over_id``, an id missing from ``items``, or no visible ancestor at the
        required depth.
    """
    if over_id is None:
        return None

    index_of = {item.id: i for i, item in enumerate(items)}
    if active_id not in index_of or over_id not in index_of:
        logger.debug("No projection: {!r} or {!r} not visible", active_id, over_id)
        return None

    active_index = index_of[active_id]
    over_index = index_of[over_id]
    active_item = items[active_index]

    # Neighbours are taken from the order after the move, not before.
    new_items = move_item(items, active_index, over_index)
    previous_item = new_items[over_index - 1] if over_index > 0 else None
    next_item = new_items[over_index + 1] if over_index + 1 < len(new_items) else None

    projected_depth = active_item.depth + get_drag_depth(offset, indentation_width)
    max_depth = previous_item.depth + 1 if previous_item else 0
    min_depth = next_item.depth if next_item else 0

    depth = projected_depth
    if projected_depth >= max_depth:
        depth = max_depth
    elif projected_depth < min_depth:
        depth = min_depth

    if depth == 0 or previous_item is None:
        return Projection(depth=depth, parent_id=None, min_depth=min_depth, max_depth=max_depth)

    by_id = {item.id: item for item in items}
    candidate: FlattenedNode | None = previous_item
    while candidate is not None and candidate.depth > depth - 1:
        if candidate.parent_id is None:
            candidate = None
            break
        candidate = by_id.get(candidate.parent_id)

    if candidate is None or candidate.depth != depth - 1:
        logger.debug("No projection: no visible parent at depth {} for {!r}", depth - 1, active_id)
        return None
    if _descends_from(candidate, active_id, by_id):
        logger.debug("No projection: {!r} would be nested inside itself", active_id)
        return None

    return Projection(depth=depth, parent_id=candidate.id, min_depth=min_depth, max_depth=max_depth)


def _descends_from(
    item: FlattenedNode,
    ancestor_id: NodeId,
    by_id: dict[NodeId, FlattenedNode],
) -> bool:
    """True if ``item`` is ``ancestor_id`` or lies below it."""
    current: FlattenedNode | None = item
    while current is not None:
        if current.id == ancestor_id:
            return True
        current = by_id.get(current.parent_id) if current.parent_id is not None else None
    return False
