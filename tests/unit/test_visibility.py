"""Tests for hiding collapsed and dragged subtrees."""

from sortable_tree.core.importer.json_reader import parse_tree_data
from sortable_tree.core.tree.codec import flatten
from sortable_tree.core.tree.navigation import get_item_path
from sortable_tree.core.tree.visibility import collapsed_ids, remove_children_of, visible_items
from tests.unit.fakes import SAMPLE_DATA

SAMPLE_TREE = parse_tree_data(SAMPLE_DATA)


def test_remove_children_of_hides_whole_subtree() -> None:
    """All descendants of a hidden id go, the node itself stays."""
    items = flatten(SAMPLE_TREE)

    result = remove_children_of(items, ["collections"])

    assert [i.id for i in result] == ["home", "collections", "help", "faq", "contact", "settings"]


def test_remove_children_of_with_no_hidden_ids_is_identity() -> None:
    """No hidden ids keeps every item."""
    items = flatten(SAMPLE_TREE)
    assert remove_children_of(items, []) == items


def test_remove_children_of_preserves_order_and_containment() -> None:
    """The result is an ordered subsequence of the input."""
    items = flatten(SAMPLE_TREE)
    hidden = {"spring", "help"}

    result = remove_children_of(items, hidden)

    kept = [i.id for i in result]
    for item in items:
        ancestors = set(get_item_path(SAMPLE_TREE, item.id)[:-1])
        if ancestors & hidden:
            assert item.id not in kept
        else:
            assert item.id in kept
    # Relative order is unchanged.
    assert kept == [i.id for i in items if i.id in kept]


def test_collapsed_ids_skips_leaves() -> None:
    """Only collapsed nodes with children count."""
    tree = parse_tree_data(
        [
            {"id": "leaf", "title": "Leaf", "collapsed": True},
            {"id": "branch", "title": "Branch", "collapsed": True, "children": [{"id": "x", "title": "X"}]},
        ]
    )
    assert collapsed_ids(flatten(tree)) == ["branch"]


def test_visible_items_hides_collapsed_nodes() -> None:
    """Children of collapsed nodes are hidden."""
    ids = [i.id for i in visible_items(SAMPLE_TREE)]
    assert "faq" not in ids
    assert "help" in ids


def test_visible_items_hides_active_subtree() -> None:
    """The active node's children are hidden."""
    ids = [i.id for i in visible_items(SAMPLE_TREE, active_id="collections")]
    assert ids == ["home", "collections", "help", "settings"]


def test_visible_items_drops_items_below_max_depth() -> None:
    """Items deeper than max_depth are hidden."""
    ids = [i.id for i in visible_items(SAMPLE_TREE, max_depth=1)]
    assert ids == ["home", "collections", "spring", "summer", "help", "settings"]
