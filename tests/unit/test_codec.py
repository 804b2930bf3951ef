"""Tests for flattening trees and rebuilding them."""

import pytest

from sortable_tree.core.tree.codec import build, flatten
from sortable_tree.errors import StructuralError
from sortable_tree.models.node import FlattenedNode, TreeNode
from tests.unit.fakes import SIMPLE_TREE, node


def _flat(node_id: str, parent_id: str | None, depth: int = 0) -> FlattenedNode:
    return FlattenedNode(id=node_id, title=node_id, parent_id=parent_id, depth=depth, index=0, path="")


def test_flatten_is_pre_order_with_tree_metadata() -> None:
    """Items come out in pre-order with parent, depth, index and path."""
    items = flatten(SIMPLE_TREE)

    assert [i.id for i in items] == ["a", "b", "c", "d"]
    assert [i.parent_id for i in items] == [None, "a", "a", None]
    assert [i.depth for i in items] == [0, 1, 1, 0]
    assert [i.index for i in items] == [0, 0, 1, 1]
    assert [i.path for i in items] == ["0", "0.0", "0.1", "1"]


def test_flatten_keeps_original_children_for_branch_detection() -> None:
    """Flattened items keep their children so leaves can be told from branches."""
    items = flatten(SIMPLE_TREE)
    assert len(items[0].children) == 2
    assert items[1].children == ()


def test_flatten_deep_nesting_paths() -> None:
    """Paths and depths extend one level per ancestor."""
    tree = (node("x", node("y", node("z"))),)
    items = flatten(tree)
    assert items[-1].path == "0.0.0"
    assert items[-1].depth == 2
    assert items[-1].parent_id == "y"


def test_flatten_rejects_duplicate_ids() -> None:
    """An id used twice anywhere in the tree is rejected."""
    tree = (node("a", node("b")), node("b"))
    with pytest.raises(StructuralError, match="Duplicate"):
        flatten(tree)


def test_round_trip_preserves_structure_and_fields() -> None:
    """build(flatten(tree)) gives back an equal tree, flags and metadata included."""
    tree = (
        TreeNode(
            id="root",
            title="Root",
            collapsed=True,
            metadata={"owner": "alice"},
            children=(
                TreeNode(id=1, title="One", disabled=True),
                TreeNode(id=2, title="Two", children=(TreeNode(id=3, title="Three"),)),
            ),
        ),
        TreeNode(id="tail", title="Tail"),
    )
    assert build(flatten(tree)) == tree


def test_round_trip_of_empty_tree() -> None:
    """An empty tree flattens to nothing and builds back empty."""
    assert flatten(()) == []
    assert build([]) == ()


def test_build_uses_sequence_order_for_siblings() -> None:
    """Siblings follow sequence order, not their index field."""
    items = [_flat("p", None), _flat("second", "p", 1), _flat("first", "p", 1)]
    tree = build(items)
    assert [c.id for c in tree[0].children] == ["second", "first"]


def test_build_accepts_parent_after_child_without_cycle() -> None:
    """A parent listed after its child is resolved."""
    # A node moved below its former children in the full sequence.
    items = [_flat("child", "moved", 1), _flat("other", None), _flat("moved", None)]
    tree = build(items)
    assert [n.id for n in tree] == ["other", "moved"]
    assert tree[1].children[0].id == "child"


def test_build_rejects_missing_parent() -> None:
    """A parent id with no item is rejected."""
    with pytest.raises(StructuralError, match="missing parents"):
        build([_flat("a", None), _flat("b", "ghost", 1)])


def test_build_rejects_cycle() -> None:
    """Items that only reach each other are rejected as a cycle."""
    with pytest.raises(StructuralError, match="cycle"):
        build([_flat("root", None), _flat("a", "b", 1), _flat("b", "a", 1)])


def test_build_rejects_self_parent() -> None:
    """An item naming itself as parent is a cycle."""
    with pytest.raises(StructuralError, match="cycle"):
        build([_flat("a", "a")])


def test_build_rejects_duplicate_ids() -> None:
    """Two items sharing an id are rejected."""
    with pytest.raises(StructuralError, match="Duplicate"):
        build([_flat("a", None), _flat("a", None)])
