"""Persistence rows: trees as flat records with parent and sibling order."""

from collections.abc import Sequence

from sortable_tree.core.tree.codec import build, flatten
from sortable_tree.errors import StructuralError
from sortable_tree.models.node import FlatRecord, FlattenedNode, NodeId, TreeNode


def tree_to_flat(tree: Sequence[TreeNode]) -> list[FlatRecord]:
    """Convert a tree into pre-order records, ``order`` being the sibling index."""
    return [
        FlatRecord(
            id=item.id,
            title=item.title,
            parent=item.parent_id,
            order=item.index,
            collapsed=item.collapsed,
            disabled=item.disabled,
            metadata=item.metadata,
        )
        for item in flatten(tree)
    ]


def flat_to_tree(records: Sequence[FlatRecord]) -> tuple[TreeNode, ...]:
    """Rebuild a tree from records in any order.

    Siblings are sorted by ``order``; ties keep their input order.

    Raises:
        StructuralError: On duplicate ids, unknown parents or parent cycles.
    """
    groups: dict[NodeId | None, list[FlatRecord]] = {}
    for record in records:
        groups.setdefault(record.parent, []).append(record)

    known = {r.id for r in records}
    for parent in groups:
        if parent is not None and parent not in known:
            msg = f"Record parent not found: {parent!r}"
            raise StructuralError(msg)

    # Emit parents before children so build() sees a well-ordered sequence.
    items: list[FlattenedNode] = []
    emitted: set[NodeId] = set()
    stack: list[tuple[FlatRecord, int]] = [
        (r, 0) for r in reversed(sorted(groups.get(None, []), key=lambda r: r.order))
    ]
    while stack:
        record, depth = stack.pop()
        if record.id in emitted:
            msg = f"Duplicate record id: {record.id!r}"
            raise StructuralError(msg)
        emitted.add(record.id)
        items.append(
            FlattenedNode(
                id=record.id,
                title=record.title,
                parent_id=record.parent,
                depth=depth,
                index=record.order,
                path="",
                collapsed=record.collapsed,
                disabled=record.disabled,
                metadata=record.metadata,
            )
        )
        siblings = sorted(groups.get(record.id, []), key=lambda r: r.order)
        stack.extend((child, depth + 1) for child in reversed(siblings))

    if len(items) != len(records):
        stranded = sorted(repr(r.id) for r in records if r.id not in emitted)
        if not stranded:
            msg = "Duplicate record ids"
        else:
            msg = f"Parent cycle among records: {', '.join(stranded)}"
        raise StructuralError(msg)

    return build(items)


def update_flat_item_orders(records: Sequence[FlatRecord]) -> list[FlatRecord]:
    """Renumber ``order`` as 0..n-1 within each parent, keeping relative order.

    Output is grouped by parent, groups in order of first appearance.
    """
    groups: dict[NodeId | None, list[FlatRecord]] = {}
    for record in records:
        groups.setdefault(record.parent, []).append(record)

    result: list[FlatRecord] = []
    for siblings in groups.values():
        for i, record in enumerate(siblings):
            result.append(
                FlatRecord(
                    id=record.id,
                    title=record.title,
                    parent=record.parent,
                    order=i,
                    collapsed=record.collapsed,
                    disabled=record.disabled,
                    metadata=record.metadata,
                )
            )
    return result
