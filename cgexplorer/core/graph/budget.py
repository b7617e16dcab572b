"""Candidate filtering, ranking and budget selection for transitive layers."""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import PurePosixPath
from typing import TYPE_CHECKING

from cgexplorer.core.config import DEFAULT_EXTERNAL_ID_PREFIX, DEFAULT_SOURCE_EXTENSION
from cgexplorer.core.models import Direction

if TYPE_CHECKING:
    from cgexplorer.core.models import FunctionNode, TraversalNode

_DEPTH_WEIGHT = 100
_SAME_PACKAGE_BONUS = 20
_SAME_FILE_BONUS = 10
_HAS_FILE_BONUS = 5
_EXTERNAL_PENALTY = 15


@dataclass(frozen=True)
class BudgetOptions:
    """Knobs of the filtering and ranking heuristics."""

    source_extension: str = DEFAULT_SOURCE_EXTENSION
    external_id_prefix: str = DEFAULT_EXTERNAL_ID_PREFIX


@dataclass(frozen=True)
class BudgetSplit:
    remaining: int
    caller_budget: int
    callee_budget: int


@dataclass
class Selection:
    """Transitive nodes chosen for each relation, in rank order."""

    callers: list[TraversalNode] = field(default_factory=list)
    callees: list[TraversalNode] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.callers) + len(self.callees)


def keep_node(node: TraversalNode, source_extension: str) -> bool:
    """Keep nodes with an id that are unattributed or in the tracked language."""
    if not node.function_id:
        return False
    if not node.file:
        return True
    return PurePosixPath(node.file.replace("\\", "/")).suffix == source_extension


def filter_nodes(nodes: Iterable[TraversalNode], source_extension: str) -> list[TraversalNode]:
    return [node for node in nodes if keep_node(node, source_extension)]


def is_external_id(function_id: str, prefix: str = DEFAULT_EXTERNAL_ID_PREFIX) -> bool:
    return bool(prefix) and function_id.startswith(prefix)


def score(
    node: TraversalNode, focal: FunctionNode, external_id_prefix: str = DEFAULT_EXTERNAL_ID_PREFIX
) -> int:
    """Relevance score; lower is better.

    Depth dominates. Locality to the focal function (same package, same file)
    and having a known file pull a node forward; external symbols are pushed back.
    """
    same_package = bool(node.package) and node.package == focal.package
    same_file = bool(node.file) and node.file == focal.file
    return (
        node.depth * _DEPTH_WEIGHT
        - _SAME_PACKAGE_BONUS * same_package
        - _SAME_FILE_BONUS * same_file
        - _HAS_FILE_BONUS * bool(node.file)
        + _EXTERNAL_PENALTY * is_external_id(node.function_id, external_id_prefix)
    )


def rank(
    candidates: Iterable[TraversalNode],
    focal: FunctionNode,
    external_id_prefix: str = DEFAULT_EXTERNAL_ID_PREFIX,
) -> list[TraversalNode]:
    """Sort by score, then name, then id."""
    return sorted(
        candidates,
        key=lambda n: (score(n, focal, external_id_prefix), n.name, n.function_id),
    )


def split_budget(node_budget: int, direct_count: int) -> BudgetSplit:
    """Split what is left after the focal node and the direct layer.

    A single leftover slot is not spent; fewer than two remaining slots leaves
    both transitive layers empty.
    """
    remaining = node_budget - 1 - direct_count
    if remaining <= 1:
        return BudgetSplit(remaining=0, caller_budget=0, callee_budget=0)
    caller_budget = remaining // 2
    return BudgetSplit(
        remaining=remaining,
        caller_budget=caller_budget,
        callee_budget=remaining - caller_budget,
    )


def transitive_pool(
    nodes: Iterable[TraversalNode], direction: Direction, exclude: set[str]
) -> list[TraversalNode]:
    """Candidates of one relation: excluded ids dropped, one entry per id.

    A node reached at several depths keeps the shallowest one.
    """
    pool: dict[str, TraversalNode] = {}
    for node in nodes:
        if node.function_id in exclude:
            continue
        current = pool.get(node.function_id)
        if current is None or node.depth < current.depth:
            pool[node.function_id] = dataclasses.replace(node, direction=direction)
    return list(pool.values())


def select_transitive(
    callers: list[TraversalNode],
    callees: list[TraversalNode],
    focal: FunctionNode,
    split: BudgetSplit,
    external_id_prefix: str = DEFAULT_EXTERNAL_ID_PREFIX,
) -> Selection:
    """Pick the best callers and callees within their budgets.

    Capacity one side cannot use is handed to the best remaining candidates
    of either side, each staying in the relation it came from.
    """
    if split.remaining <= 0:
        return Selection()

    ranked_callers = rank(callers, focal, external_id_prefix)
    ranked_callees = rank(callees, focal, external_id_prefix)
    selection = Selection(
        callers=ranked_callers[: split.caller_budget],
        callees=ranked_callees[: split.callee_budget],
    )

    leftover = split.remaining - len(selection)
    if leftover > 0:
        unselected = ranked_callers[split.caller_budget :] + ranked_callees[split.callee_budget :]
        for node in rank(unselected, focal, external_id_prefix)[:leftover]:
            if node.direction is Direction.CALLER:
                selection.callers.append(node)
            else:
                selection.callees.append(node)

    return selection
