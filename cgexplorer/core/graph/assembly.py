"""Assemble a bounded exploration graph around a focal function."""

from __future__ import annotations

from collections.abc import Sequence

from cgexplorer.core.graph.budget import (
    BudgetOptions,
    filter_nodes,
    select_transitive,
    split_budget,
    transitive_pool,
)
from cgexplorer.core.graph.models import EdgeKind, GraphModel, NodeTag
from cgexplorer.core.models import Direction, FunctionNode, TraversalNode

_RELATION_TAGS = {Direction.CALLER: NodeTag.CALLER, Direction.CALLEE: NodeTag.CALLEE}


def assemble(
    focal: FunctionNode | None,
    neighborhood: Sequence[TraversalNode],
    callees: Sequence[TraversalNode],
    callers: Sequence[TraversalNode],
    node_budget: int,
    options: BudgetOptions | None = None,
) -> GraphModel:
    """Merge the direct neighborhood and the transitive layers into one model.

    The direct layer is always shown in full. Transitive callers and callees
    share what is left of ``node_budget`` and are ranked by proximity to the
    focal function.

    Transitive edges are a layered fan: every node at depth d is linked to
    every node of the same relation at depth d-1, because the traversal rows
    carry depths but not the call edges between them.
    """
    model = GraphModel()
    if focal is None or not focal.function_id:
        return model
    options = options or BudgetOptions()
    focal_id = focal.function_id

    direct = [
        node
        for node in filter_nodes(neighborhood, options.source_extension)
        if node.function_id != focal_id
    ]
    direct_ids = {node.function_id for node in direct}
    excluded = direct_ids | {focal_id}

    caller_pool = transitive_pool(
        filter_nodes(callers, options.source_extension), Direction.CALLER, excluded
    )
    callee_pool = transitive_pool(
        filter_nodes(callees, options.source_extension), Direction.CALLEE, excluded
    )
    split = split_budget(node_budget, len(direct_ids))
    selection = select_transitive(
        caller_pool, callee_pool, focal, split, options.external_id_prefix
    )

    for node in direct:
        tags = {NodeTag.DIRECT}
        if node.direction is not None:
            tags.add(_RELATION_TAGS[node.direction])
        model.merge_node(node, tags, depth=1)
    for relation, chosen in (
        (Direction.CALLER, selection.callers),
        (Direction.CALLEE, selection.callees),
    ):
        for node in chosen:
            model.merge_node(node, {NodeTag.TRANSITIVE, _RELATION_TAGS[relation]}, node.depth)
    model.merge_node(focal, {NodeTag.FOCUS}, depth=0)

    for node in direct:
        if node.direction is not None:
            _link(model, focal_id, node.function_id, node.direction, EdgeKind.DIRECT)

    _link_layers(model, focal_id, direct, selection.callers, Direction.CALLER)
    _link_layers(model, focal_id, direct, selection.callees, Direction.CALLEE)
    return model


def _link(
    model: GraphModel, near_id: str, far_id: str, relation: Direction, kind: EdgeKind
) -> None:
    """Add an edge oriented by relation: callers point at the node they call."""
    if relation is Direction.CALLER:
        model.add_edge(far_id, near_id, kind, relation)
    else:
        model.add_edge(near_id, far_id, kind, relation)


def _link_layers(
    model: GraphModel,
    focal_id: str,
    direct: Sequence[TraversalNode],
    chosen: Sequence[TraversalNode],
    relation: Direction,
) -> None:
    layers: dict[int, list[str]] = {}
    for node in direct:
        if node.direction is relation:
            _append_unique(layers.setdefault(1, []), node.function_id)
    for node in chosen:
        _append_unique(layers.setdefault(node.depth, []), node.function_id)

    for node in chosen:
        for parent_id in _parent_layer(layers, node.depth, focal_id):
            _link(model, parent_id, node.function_id, relation, EdgeKind.TRANSITIVE)


def _parent_layer(layers: dict[int, list[str]], depth: int, focal_id: str) -> list[str]:
    """Nodes one layer closer to the focal function.

    Depth 1 hangs off the focal node. An empty d-1 layer yields no parents.
    """
    if depth <= 1:
        return [focal_id]
    return layers.get(depth - 1, [])


def _append_unique(items: list[str], item: str) -> None:
    if item not in items:
        items.append(item)
