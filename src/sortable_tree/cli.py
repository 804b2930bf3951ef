"""CLI for sortable trees: inspect outlines and simulate drags."""

import json
from pathlib import Path
from typing import Annotated

import typer
from loguru import logger

from sortable_tree.config import DEFAULT_INDENTATION_WIDTH, TreeConfig
from sortable_tree.core.drag.projector import get_projection
from sortable_tree.core.drag.session import DragSession
from sortable_tree.core.importer.json_reader import dump_tree, read_tree_file, write_tree_file
from sortable_tree.core.tree.codec import flatten
from sortable_tree.core.tree.markdown import render_tree_as_markdown
from sortable_tree.core.tree.navigation import find_item_by_id
from sortable_tree.core.tree.visibility import visible_items
from sortable_tree.errors import StructuralError
from sortable_tree.logging_config import configure_logging
from sortable_tree.models.node import NodeId, TreeNode

app = typer.Typer(help="Sortable tree: inspect outlines and simulate drag-and-drop moves.")

TreeFile = Annotated[Path, typer.Argument(help="Tree JSON file (nested or flat records)")]
Offset = Annotated[
    float, typer.Option("--offset", "-x", help="Horizontal pointer offset since drag start")
]
Indent = Annotated[
    int, typer.Option("--indent", "-i", help="Width of one nesting level")
]


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    configure_logging(verbose=verbose)


def _load(path: Path) -> tuple[TreeNode, ...]:
    """Load a tree file, exiting with a clear message on bad input."""
    if not path.exists():
        logger.error("Tree file not found: {}", path)
        raise typer.Exit(1)
    try:
        return read_tree_file(path)
    except (StructuralError, json.JSONDecodeError) as e:
        logger.error("Invalid tree in {}: {}", path, e)
        raise typer.Exit(2) from e


def _resolve_id(tree: tuple[TreeNode, ...], raw: str) -> NodeId:
    """Map a command-line id to the node's id, which may be an int in the file."""
    if find_item_by_id(tree, raw) is not None:
        return raw
    for item in flatten(tree):
        if str(item.id) == raw:
            return item.id
    typer.echo(f"Node '{raw}' not found.")
    raise typer.Exit(1)


def _make_config(**kwargs: object) -> TreeConfig:
    """Build a TreeConfig, exiting with code 2 on invalid values."""
    try:
        return TreeConfig(**kwargs)  # type: ignore[arg-type]
    except ValueError as e:
        typer.echo(str(e))
        raise typer.Exit(2) from e


@app.command()
def show(
    path: TreeFile,
    expand_all: bool = typer.Option(False, "--all", "-a", help="Expand collapsed nodes"),
    show_ids: bool = typer.Option(False, "--ids", help="Show node ids"),
) -> None:
    """Render a tree as an indented outline."""
    tree = _load(path)
    typer.echo(render_tree_as_markdown(tree, expand_all=expand_all, show_ids=show_ids), nl=False)


@app.command(name="flatten")
def flatten_cmd(
    path: TreeFile,
    output_json: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
) -> None:
    """Print the flat pre-order projection of a tree."""
    items = flatten(_load(path))
    if output_json:
        data = [
            {
                "id": item.id,
                "title": item.title,
                "parent_id": item.parent_id,
                "depth": item.depth,
                "index": item.index,
                "path": item.path,
            }
            for item in items
        ]
        typer.echo(json.dumps(data, indent=2))
        return
    for item in items:
        typer.echo(f"{item.path:<12} {'  ' * item.depth}{item.title}  [id={item.id}]")


@app.command()
def project(
    path: TreeFile,
    active: str = typer.Argument(..., help="Id of the dragged node"),
    over: str = typer.Argument(..., help="Id of the node under the pointer"),
    offset: Offset = 0.0,
    indent: Indent = DEFAULT_INDENTATION_WIDTH,
) -> None:
    """Show where a node would land without changing anything."""
    config = _make_config(indentation_width=indent)
    tree = _load(path)
    active_id = _resolve_id(tree, active)
    over_id = _resolve_id(tree, over)

    projection = get_projection(
        visible_items(tree, active_id=active_id),
        active_id=active_id,
        over_id=over_id,
        offset=offset,
        indentation_width=config.indentation_width,
    )
    if projection is None:
        typer.echo("No valid projection.")
        raise typer.Exit(1)
    typer.echo(
        f"depth={projection.depth} parent={projection.parent_id} "
        f"(allowed depth {projection.min_depth}..{projection.max_depth})"
    )


@app.command()
def move(
    path: TreeFile,
    active: str = typer.Argument(..., help="Id of the dragged node"),
    over: str = typer.Argument(..., help="Id of the node to drop over"),
    offset: Offset = 0.0,
    indent: Indent = DEFAULT_INDENTATION_WIDTH,
    max_depth: Annotated[
        int | None,
        typer.Option("--max-depth", "-m", help="Deepest allowed nesting level"),
    ] = None,
    reparent: bool = typer.Option(
        True, "--reparent/--no-reparent", help="Allow moving to a different parent"
    ),
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write the new tree here instead of stdout"),
    ] = None,
    flat: bool = typer.Option(False, "--flat", help="Write flat parent/order records"),
) -> None:
    """Drag ACTIVE over OVER and drop it, printing or writing the new tree."""
    tree = _load(path)
    active_id = _resolve_id(tree, active)
    over_id = _resolve_id(tree, over)

    config = _make_config(indentation_width=indent, max_depth=max_depth, can_change_parent=reparent)

    session = DragSession(tree, config=config)
    if not session.start(active_id):
        typer.echo(f"Node '{active}' cannot be dragged.")
        raise typer.Exit(1)
    session.move(over_id, offset)

    try:
        result = session.commit(over_id)
    except StructuralError as e:
        logger.error("Move failed: {}", e)
        raise typer.Exit(2) from e

    if not result.accepted:
        reason = result.reason.value if result.reason else "unknown"
        typer.echo(f"Drop rejected: {reason}")
        raise typer.Exit(1)

    if output is not None:
        write_tree_file(output, result.tree, flat=flat)
        typer.echo(f"Moved '{active}' to depth {result.projection.depth} -> {output}")
    else:
        typer.echo(dump_tree(result.tree, flat=flat), nl=False)
