"""Read and write trees as JSON, nested or as flat parent/order records."""

import json
from pathlib import Path
from typing import Any

from loguru import logger

from sortable_tree.core.tree.codec import flatten
from sortable_tree.core.tree.records import flat_to_tree, tree_to_flat
from sortable_tree.errors import StructuralError
from sortable_tree.models.node import FlatRecord, TreeNode


def parse_tree_data(data: list[dict[str, Any]]) -> tuple[TreeNode, ...]:
    """Parse a JSON list into a tree.

    Args:
        data: Either nested nodes (``id``, ``title``, ``children``, ``collapsed``,
            ``disabled``, ``metadata``) or flat records carrying a ``parent`` key
            and an ``order``.

    Returns:
        The top-level nodes.

    Raises:
        StructuralError: On entries that are not objects, non-list ``children``,
            missing or duplicate ids, or broken parent links.
    """
    if not isinstance(data, list):
        msg = f"Expected a JSON list of nodes, got {type(data).__name__}"
        raise StructuralError(msg)

    for raw in data:
        _require_mapping(raw)

    if data and all("parent" in raw for raw in data):
        records = [
            FlatRecord(
                id=_require_id(raw),
                title=raw.get("title", ""),
                parent=raw["parent"],
                order=raw.get("order", i),
                collapsed=bool(raw.get("collapsed", False)),
                disabled=bool(raw.get("disabled", False)),
                metadata=raw.get("metadata") or {},
            )
            for i, raw in enumerate(data)
        ]
        return flat_to_tree(records)

    tree = _parse_nodes(data)
    # Reject duplicate ids up front.
    flatten(tree)
    return tree


def _require_mapping(raw: Any) -> None:
    if not isinstance(raw, dict):
        msg = f"Expected a JSON object for a node, got {type(raw).__name__}: {raw!r}"
        raise StructuralError(msg)


def _require_id(raw: dict[str, Any]) -> str | int:
    if "id" not in raw:
        msg = f"Node without id: {raw!r}"
        raise StructuralError(msg)
    return raw["id"]


def _parse_nodes(raw_nodes: list[dict[str, Any]]) -> tuple[TreeNode, ...]:
    # Iterative post-order so deep outlines don't hit the recursion limit.
    built: dict[int, TreeNode] = {}
    todo: list[tuple[dict[str, Any], bool]] = [(raw, False) for raw in raw_nodes]
    while todo:
        raw, expanded = todo.pop()
        _require_mapping(raw)
        children = raw.get("children") or []
        if not isinstance(children, list):
            kind = type(children).__name__
            msg = f"Children of node {raw.get('id')!r} must be a list, got {kind}"
            raise StructuralError(msg)
        if not expanded:
            todo.append((raw, True))
            todo.extend((child, False) for child in children)
            continue
        built[id(raw)] = TreeNode(
            id=_require_id(raw),
            title=raw.get("title", ""),
            children=tuple(built.pop(id(child)) for child in children),
            collapsed=bool(raw.get("collapsed", False)),
            disabled=bool(raw.get("disabled", False)),
            metadata=raw.get("metadata") or {},
        )
    return tuple(built.pop(id(raw)) for raw in raw_nodes)


def tree_to_data(tree: tuple[TreeNode, ...]) -> list[dict[str, Any]]:
    """Serialise a tree to nested JSON-ready dicts; false or empty optionals are omitted."""

    def to_dict(node: TreeNode) -> dict[str, Any]:
        out: dict[str, Any] = {
            "id": node.id,
            "title": node.title,
            "children": [to_dict(child) for child in node.children],
        }
        if node.collapsed:
            out["collapsed"] = True
        if node.disabled:
            out["disabled"] = True
        if node.metadata:
            out["metadata"] = node.metadata
        return out

    return [to_dict(node) for node in tree]


def records_to_data(tree: tuple[TreeNode, ...]) -> list[dict[str, Any]]:
    """Serialise a tree as flat parent/order records."""
    out: list[dict[str, Any]] = []
    for record in tree_to_flat(tree):
        row: dict[str, Any] = {
            "id": record.id,
            "title": record.title,
            "parent": record.parent,
            "order": record.order,
        }
        if record.collapsed:
            row["collapsed"] = True
        if record.disabled:
            row["disabled"] = True
        if record.metadata:
            row["metadata"] = record.metadata
        out.append(row)
    return out


def read_tree_file(path: Path) -> tuple[TreeNode, ...]:
    """Load a tree from a JSON file."""
    tree = parse_tree_data(json.loads(path.read_text()))
    logger.debug("Loaded {} top-level nodes from {}", len(tree), path)
    return tree


def dump_tree(tree: tuple[TreeNode, ...], *, flat: bool = False) -> str:
    data = records_to_data(tree) if flat else tree_to_data(tree)
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


def write_tree_file(path: Path, tree: tuple[TreeNode, ...], *, flat: bool = False) -> None:
    """Write a tree to a JSON file, skipping the write if contents are unchanged."""
    contents = dump_tree(tree, flat=flat)
    if path.exists() and path.read_text() == contents:
        logger.debug("Unchanged: {}", path)
        return
    path.write_text(contents)
    logger.info("Wrote {}", path)
