"""Drag lifecycle: start, move, then exactly one of commit or cancel."""

import copy
from collections.abc import Callable
from dataclasses import replace

from loguru import logger

from sortable_tree.config import TreeConfig
from sortable_tree.core.drag.permissions import PermissionGate
from sortable_tree.core.drag.projector import get_projection, move_item
from sortable_tree.core.tree.codec import build, flatten
from sortable_tree.core.tree.navigation import find_item_by_id, get_item_path, toggle_property
from sortable_tree.core.tree.visibility import visible_items
from sortable_tree.models.node import (
    DragPhase,
    DragState,
    DropResult,
    FlattenedNode,
    NodeId,
    Projection,
    RejectReason,
    TreeNode,
)


class DragSession:
    """Owns a tree between drags and applies at most one structural change per drag.

    The session is reusable: after commit or cancel it is Idle again and a new
    drag may start. Events that arrive in the wrong phase are ignored.

    Args:
        tree: The initial tree.
        config: Indentation width, depth limit and reparent policy.
        gate: Drag/drop predicates. Reparenting is allowed only if both the
            gate and ``config`` allow it.
        on_projection: Called with the new projection after every move.
    """

    def __init__(
        self,
        tree: tuple[TreeNode, ...],
        *,
        config: TreeConfig | None = None,
        gate: PermissionGate | None = None,
        on_projection: Callable[[Projection | None], None] | None = None,
    ) -> None:
        self.config = config or TreeConfig()
        gate = gate or PermissionGate()
        self.gate = replace(
            gate, can_change_parent=gate.can_change_parent and self.config.can_change_parent
        )
        self.on_projection = on_projection
        self._tree = tuple(tree)
        # Fail fast on duplicate ids.
        flatten(self._tree)
        self._state: DragState | None = None
        self._projection: Projection | None = None

    @property
    def tree(self) -> tuple[TreeNode, ...]:
        return self._tree

    @property
    def phase(self) -> DragPhase:
        return DragPhase.IDLE if self._state is None else DragPhase.DRAGGING

    @property
    def state(self) -> DragState | None:
        return self._state

    @property
    def projection(self) -> Projection | None:
        """Projection from the latest move, None when idle or indeterminate."""
        return self._projection

    @property
    def drop_allowed(self) -> bool:
        """Whether dropping at the current pointer position would be accepted."""
        if self._state is None:
            return False
        _, reason = self._evaluate(self._state)
        return reason is None

    def visible_items(self) -> list[FlattenedNode]:
        """Flat sequence with collapsed subtrees and the dragged subtree hidden."""
        return visible_items(
            self._tree,
            active_id=self._state.active_id if self._state else None,
            max_depth=self.config.max_depth,
        )

    def is_draggable(self, node_id: NodeId) -> bool:
        node = find_item_by_id(self._tree, node_id)
        return node is not None and self.gate.is_draggable(node)

    def start(self, node_id: NodeId) -> bool:
        """Pick up a node. Returns False if the drag was refused."""
        if self._state is not None:
            logger.debug("Ignoring start({!r}): already dragging {!r}", node_id, self._state.active_id)
            return False

        path = get_item_path(self._tree, node_id)
        if not path:
            logger.debug("Ignoring start({!r}): no such node", node_id)
            return False
        if not self.is_draggable(node_id):
            logger.debug("Drag refused for locked node {!r}", node_id)
            return False

        self._state = DragState(
            active_id=node_id,
            over_id=node_id,
            horizontal_offset=0,
            anchor_parent_id=path[-2] if len(path) > 1 else None,
        )
        self._projection = self._project(self._state)
        logger.debug("Drag started: {!r} (parent {!r})", node_id, self._state.anchor_parent_id)
        return True

    def move(self, over_id: NodeId | None, offset: float) -> Projection | None:
        """Update pointer state and recompute the projection. Never changes the tree."""
        if self._state is None:
            logger.debug("Ignoring move over {!r}: not dragging", over_id)
            return None

        self._state = replace(self._state, over_id=over_id, horizontal_offset=offset)
        self._projection = self._project(self._state)
        if self.on_projection is not None:
            self.on_projection(self._projection)
        return self._projection

    def commit(self, over_id: NodeId | None) -> DropResult:
        """Drop the active node over ``over_id`` and end the drag.

        A refused drop is not an error: the result carries the reason and the
        tree is left untouched. StructuralError from rebuilding propagates, also
        leaving the tree untouched.
        """
        if self._state is None:
            logger.debug("Ignoring commit over {!r}: not dragging", over_id)
            return DropResult(accepted=False, tree=self._tree, reason=RejectReason.NOT_DRAGGING)

        state = replace(self._state, over_id=over_id)
        try:
            projection, reason = self._evaluate(state)
            if reason is not None or projection is None:
                logger.info("Drop of {!r} over {!r} rejected: {}", state.active_id, over_id, reason.value)
                return DropResult(accepted=False, tree=self._tree, projection=projection, reason=reason)

            new_tree = self._apply(state, projection)
        finally:
            self._reset()

        self._tree = new_tree
        logger.debug(
            "Dropped {!r} at depth {} under {!r}", state.active_id, projection.depth, projection.parent_id
        )
        return DropResult(accepted=True, tree=new_tree, projection=projection)

    def cancel(self) -> bool:
        """Abort the drag. Returns whether a drag was in progress."""
        was_dragging = self._state is not None
        if was_dragging:
            logger.debug("Drag of {!r} cancelled", self._state.active_id)
        self._reset()
        return was_dragging

    def toggle_collapsed(self, node_id: NodeId) -> bool:
        """Flip a node's collapsed flag while idle. Returns whether the tree changed."""
        if self._state is not None or not self.config.allow_collapse:
            return False
        new_tree = toggle_property(self._tree, node_id, "collapsed")
        changed = new_tree is not self._tree
        self._tree = new_tree
        return changed

    def _project(self, state: DragState) -> Projection | None:
        return get_projection(
            visible_items(self._tree, active_id=state.active_id, max_depth=self.config.max_depth),
            active_id=state.active_id,
            over_id=state.over_id,
            offset=state.horizontal_offset,
            indentation_width=self.config.indentation_width,
        )

    def _evaluate(self, state: DragState) -> tuple[Projection | None, RejectReason | None]:
        projection = self._project(state)
        if projection is None or state.over_id is None:
            return None, RejectReason.NO_PROJECTION
        if not self.gate.allows_parent(state.anchor_parent_id, projection.parent_id):
            return projection, RejectReason.PARENT_CHANGE
        if self.config.max_depth is not None and projection.depth > self.config.max_depth:
            return projection, RejectReason.MAX_DEPTH

        source = find_item_by_id(self._tree, state.active_id)
        target = find_item_by_id(self._tree, state.over_id)
        if source is None or target is None or not self.gate.allows_drop(source, target):
            return projection, RejectReason.DROP_DENIED
        return projection, None

    def _apply(self, state: DragState, projection: Projection) -> tuple[TreeNode, ...]:
        # Work on a private copy so nothing can alias back into the current tree.
        items = copy.deepcopy(flatten(self._tree))
        index_of = {item.id: i for i, item in enumerate(items)}
        active_index = index_of[state.active_id]
        over_index = index_of[state.over_id]

        items[active_index] = items[active_index].replace(
            depth=projection.depth, parent_id=projection.parent_id
        )
        return build(move_item(items, active_index, over_index))

    def _reset(self) -> None:
        self._state = None
        self._projection = None
