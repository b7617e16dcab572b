"""Data models for CallGraph Explorer."""

from __future__ import annotations

import sqlite3
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any


class Direction(Enum):
    """Which side of the focal function a traversal node sits on."""

    CALLER = "caller"
    CALLEE = "callee"


class EntryType(Enum):
    """Kinds of entries in the file browser."""

    DIRECTORY = "directory"
    FILE = "file"


@dataclass(frozen=True)
class QueryDefinition:
    """A named query stored in the graph store."""

    name: str
    description: str
    text: str | None = None

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> QueryDefinition:
        """Create a QueryDefinition from a database row."""
        return cls(
            name=row["name"],
            description=row["description"] or "",
            text=row["sql"] if "sql" in row.keys() else None,
        )

    def to_dict(self) -> dict[str, str]:
        result = {"name": self.name, "description": self.description}
        if self.text is not None:
            result["sql"] = self.text
        return result


@dataclass(frozen=True)
class FunctionNode:
    """A function of the call graph."""

    function_id: str
    name: str
    file: str | None = None
    line: int | None = None
    end_line: int | None = None
    package: str | None = None
    parent_function: str | None = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> FunctionNode:
        """Create a FunctionNode from a query row (sqlite3.Row or dict)."""
        return cls(**_function_fields(row))

    def to_dict(self) -> dict[str, Any]:
        return {
            "function_id": self.function_id,
            "name": self.name,
            "file": self.file,
            "line": self.line,
            "end_line": self.end_line,
            "package": self.package,
            "parent_function": self.parent_function,
        }


@dataclass(frozen=True)
class TraversalNode(FunctionNode):
    """A function reached from the focal function by a traversal query.

    ``depth`` is the distance from the focal function; 1 is a direct neighbor.
    """

    direction: Direction | None = None
    depth: int = 1

    @classmethod
    def from_row(
        cls, row: Mapping[str, Any], default_direction: Direction | None = None
    ) -> TraversalNode:
        """Create a TraversalNode from a query row.

        Rows of the transitive queries do not always carry a direction column;
        ``default_direction`` fills it in.
        """
        keys = _keys(row)
        raw_direction = row["direction"] if "direction" in keys else None
        try:
            direction = Direction(raw_direction) if raw_direction else default_direction
        except ValueError:
            direction = default_direction
        raw_depth = row["depth"] if "depth" in keys else None
        return cls(
            **_function_fields(row),
            direction=direction,
            depth=int(raw_depth) if raw_depth is not None else 1,
        )

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["direction"] = self.direction.value if self.direction else None
        result["depth"] = self.depth
        return result


@dataclass(frozen=True)
class SourceFile:
    """A source file and its content."""

    file: str
    package: str | None
    content: str

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> SourceFile:
        """Create a SourceFile from a database row."""
        return cls(file=row["file"], package=row["package"], content=row["content"] or "")


@dataclass(frozen=True)
class DirectoryEntry:
    """An entry of the file browser; directories are synthesized from file paths."""

    type: EntryType
    name: str
    path: str
    package: str | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"type": self.type.value, "name": self.name, "path": self.path}
        if self.type is EntryType.FILE:
            result["package"] = self.package
        return result


def _keys(row: Mapping[str, Any]) -> set[str]:
    return set(row.keys())


def _function_fields(row: Mapping[str, Any]) -> dict[str, Any]:
    """Extract FunctionNode fields; ids may come as ``function_id`` or ``id``."""
    keys = _keys(row)

    def get(name: str) -> Any:
        return row[name] if name in keys else None

    function_id = get("function_id")
    if function_id is None:
        function_id = get("id")
    return {
        "function_id": str(function_id) if function_id is not None else "",
        "name": get("name") or "",
        "file": get("file") or None,
        "line": get("line"),
        "end_line": get("end_line"),
        "package": get("package"),
        "parent_function": get("parent_function"),
    }
