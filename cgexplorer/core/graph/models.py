"""Data models for the assembled exploration graph."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from cgexplorer.core.models import Direction, FunctionNode


class NodeTag(Enum):
    """Relation tags a node acquires while being merged into the model."""

    FOCUS = "focus"
    CALLER = "caller"
    CALLEE = "callee"
    DIRECT = "direct"
    TRANSITIVE = "transitive"


class EdgeKind(Enum):
    DIRECT = "direct"
    TRANSITIVE = "transitive"


@dataclass
class GraphNode:
    """Display attributes of one node, merged across layers."""

    id: str
    name: str
    file: str | None
    line: int | None
    end_line: int | None
    package: str | None
    depth: int
    tags: set[NodeTag] = field(default_factory=set)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "file": self.file,
            "line": self.line,
            "end_line": self.end_line,
            "package": self.package,
            "depth": self.depth,
            "tags": sorted(tag.value for tag in self.tags),
        }


@dataclass(frozen=True)
class GraphEdge:
    """A directed edge, always pointing from caller to callee."""

    source: str
    target: str
    kind: EdgeKind
    relation: Direction

    def to_dict(self) -> dict[str, str]:
        return {
            "source": self.source,
            "target": self.target,
            "kind": self.kind.value,
            "relation": self.relation.value,
        }


class GraphModel:
    """Node table keyed by id plus the edges between those nodes.

    Edges are only accepted between nodes already in the table, and at most
    one edge exists per (source, target) pair.
    """

    __slots__ = ("_nodes", "_edges", "_edge_keys")

    def __init__(self) -> None:
        self._nodes: dict[str, GraphNode] = {}
        self._edges: list[GraphEdge] = []
        self._edge_keys: set[tuple[str, str]] = set()

    def merge_node(self, node: FunctionNode, tags: Iterable[NodeTag], depth: int) -> GraphNode:
        """Insert a node or overwrite its data, keeping the union of tags."""
        existing = self._nodes.get(node.function_id)
        merged = GraphNode(
            id=node.function_id,
            name=node.name,
            file=node.file,
            line=node.line,
            end_line=node.end_line,
            package=node.package,
            depth=depth,
            tags=set(existing.tags) if existing else set(),
        )
        merged.tags.update(tags)
        self._nodes[node.function_id] = merged
        return merged

    def add_edge(self, source: str, target: str, kind: EdgeKind, relation: Direction) -> bool:
        """Add an edge between known nodes. Returns False if it was skipped."""
        if source == target or source not in self._nodes or target not in self._nodes:
            return False
        key = (source, target)
        if key in self._edge_keys:
            return False
        self._edge_keys.add(key)
        self._edges.append(GraphEdge(source=source, target=target, kind=kind, relation=relation))
        return True

    def with_tag(self, tag: NodeTag) -> list[GraphNode]:
        return [node for node in self._nodes.values() if tag in node.tags]

    @property
    def nodes(self) -> dict[str, GraphNode]:
        return self._nodes

    @property
    def edges(self) -> list[GraphEdge]:
        return self._edges

    def edge_set(self) -> set[tuple[str, str]]:
        return set(self._edge_keys)

    def to_dict(self) -> dict[str, Any]:
        return {
            "nodes": [node.to_dict() for node in self._nodes.values()],
            "edges": [edge.to_dict() for edge in self._edges],
        }

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    def __iter__(self) -> Iterator[GraphNode]:
        return iter(self._nodes.values())

    def __len__(self) -> int:
        return len(self._nodes)

    def __bool__(self) -> bool:
        return bool(self._nodes)

    def __repr__(self) -> str:
        return f"GraphModel(nodes={len(self._nodes)}, edges={len(self._edges)})"
