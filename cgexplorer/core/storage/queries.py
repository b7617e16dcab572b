"""Named query registry.

Query text lives in the ``queries`` table of the graph store. Callers only ever
pass a query *name*; the text is looked up, compiled once, and cached for the
lifetime of the registry.
"""

from __future__ import annotations

import logging
import re
import sqlite3
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from cgexplorer.core.exceptions import UnknownQueryError, ValidationError
from cgexplorer.core.models import QueryDefinition

logger = logging.getLogger(__name__)

# String literals and comments are blanked out before scanning for placeholders.
_LITERAL_OR_COMMENT = re.compile(r"'(?:[^']|'')*'|\"(?:[^\"]|\"\")*\"|--[^\n]*|/\*.*?\*/", re.S)
_NAMED_PLACEHOLDER = re.compile(r"(?<![\w:@$])[:@$]([A-Za-z_]\w*)")


@dataclass(frozen=True)
class CompiledQuery:
    """Executable form of a stored query."""

    name: str
    text: str
    parameters: tuple[str, ...]

    @classmethod
    def compile(cls, name: str, text: str) -> CompiledQuery:
        scannable = _LITERAL_OR_COMMENT.sub(" ", text)
        seen: dict[str, None] = {}
        for match in _NAMED_PLACEHOLDER.finditer(scannable):
            seen.setdefault(match.group(1), None)
        return cls(name=name, text=text, parameters=tuple(seen))

    def bind(
        self, params: Mapping[str, Any] | Sequence[Any] | None
    ) -> Mapping[str, Any] | Sequence[Any]:
        """Select the values this query declares; extra keys are ignored."""
        if params is None:
            params = {}
        if not isinstance(params, Mapping):
            return tuple(params)
        missing = [p for p in self.parameters if p not in params]
        if missing:
            raise ValidationError(
                f"Query '{self.name}' is missing parameter(s): {', '.join(missing)}"
            )
        return {p: params[p] for p in self.parameters}


class QueryRegistry:
    """Lookup, compile and execute queries stored by name."""

    def __init__(self, get_connection: Callable[[], sqlite3.Connection]) -> None:
        self._get_connection = get_connection
        self._compiled: dict[str, CompiledQuery] = {}

    def list(self, include_text: bool = False) -> list[QueryDefinition]:
        """List registered queries ordered by name; text only when requested."""
        conn = self._get_connection()
        columns = "name, description, sql" if include_text else "name, description"
        cursor = conn.execute(f"SELECT {columns} FROM queries ORDER BY name")
        return [QueryDefinition.from_row(row) for row in cursor.fetchall()]

    def get(self, name: str) -> CompiledQuery:
        """Return the compiled query for a name, compiling it on first use."""
        compiled = self._compiled.get(name)
        if compiled is not None:
            return compiled

        conn = self._get_connection()
        row = conn.execute("SELECT sql FROM queries WHERE name = ?", (name,)).fetchone()
        if row is None or not row["sql"]:
            raise UnknownQueryError(f"Unknown query: {name}")

        compiled = CompiledQuery.compile(name, row["sql"])
        logger.debug("Compiled query %s (parameters: %s)", name, ", ".join(compiled.parameters))
        self._compiled[name] = compiled
        return compiled

    def execute(
        self, name: str, params: Mapping[str, Any] | Sequence[Any] | None = None
    ) -> list[sqlite3.Row]:
        """Execute a registered query by name and return all rows."""
        compiled = self.get(name)
        conn = self._get_connection()
        cursor = conn.execute(compiled.text, compiled.bind(params))
        return cursor.fetchall()

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, str):
            return False
        try:
            self.get(name)
        except UnknownQueryError:
            return False
        return True

    @property
    def compiled_names(self) -> list[str]:
        return sorted(self._compiled)
