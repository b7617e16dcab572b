"""
Exploration graph assembly and budgeting.

Data Structures:
    - GraphModel: Node table keyed by id plus directed edges
    - GraphNode / GraphEdge: Merged display attributes and edges
    - NodeTag: focus, caller, callee, direct, transitive

Algorithms:
    - budget: extension filtering, relevance scoring, budget split and
      leftover redistribution
    - assembly: assemble() merges focal, direct and transitive layers and
      synthesizes layered edges
"""

from cgexplorer.core.graph.assembly import assemble
from cgexplorer.core.graph.budget import BudgetOptions, rank, score, split_budget
from cgexplorer.core.graph.models import EdgeKind, GraphEdge, GraphModel, GraphNode, NodeTag

__all__ = [
    "BudgetOptions",
    "EdgeKind",
    "GraphEdge",
    "GraphModel",
    "GraphNode",
    "NodeTag",
    "assemble",
    "rank",
    "score",
    "split_budget",
]
