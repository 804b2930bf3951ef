"""Render trees as indented markdown outlines."""

import io

from sortable_tree.core.drag.permissions import PermissionGate
from sortable_tree.core.tree.codec import flatten
from sortable_tree.core.tree.navigation import count_tree_items
from sortable_tree.core.tree.visibility import collapsed_ids, remove_children_of
from sortable_tree.models.node import NodeId, TreeNode


def render_tree_as_markdown(
    tree: tuple[TreeNode, ...],
    *,
    gate: PermissionGate | None = None,
    expand_all: bool = False,
    highlight_id: NodeId | None = None,
    show_ids: bool = False,
) -> str:
    """Render the visible part of a tree as a bullet list.

    Args:
        tree: The tree to render.
        gate: Used to mark non-draggable nodes with a lock.
        expand_all: Ignore collapsed flags and render every node.
        highlight_id: Node to mark with an arrow, e.g. the one being dragged.
        show_ids: Append each node's id.

    Returns:
        Markdown string with one bullet per visible node.
    """
    gate = gate or PermissionGate()
    items = flatten(tree)
    if not expand_all:
        items = remove_children_of(items, collapsed_ids(items))

    out = io.StringIO()
    for item in items:
        indent = "    " * item.depth
        marker = "- "
        if item.children:
            marker = "- [+] " if item.collapsed and not expand_all else "- [-] "

        suffix = ""
        if not gate.is_draggable(item):
            suffix += " (locked)"
        if show_ids:
            suffix += f"  [id={item.id}]"
        if item.id == highlight_id:
            suffix += "  <--"

        lines = item.title.split("\n")
        out.write(f"{indent}{marker}{lines[0]}{suffix}\n")
        for line in lines[1:]:
            out.write(f"{indent}  {line}\n")

        # Summary line for hidden descendants
        if item.collapsed and item.children and not expand_all:
            hidden = count_tree_items(item.children)
            noun = "item" if hidden == 1 else "items"
            out.write(f"{indent}    - ... ({hidden} hidden {noun})\n")

    return out.getvalue()
