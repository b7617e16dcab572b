"""Call graph operations shared by the HTTP API, the CLI and the MCP server."""

from __future__ import annotations

from typing import Any

from cgexplorer.core.config import Settings
from cgexplorer.core.exceptions import NotFoundError, ValidationError
from cgexplorer.core.files import FileBrowserIndex, SourcePathResolver, normalize_browse_path
from cgexplorer.core.graph import BudgetOptions, GraphModel, assemble
from cgexplorer.core.models import Direction, FunctionNode, TraversalNode
from cgexplorer.core.storage import GraphStore

NEIGHBORHOOD_QUERY = "function_neighborhood"
CALL_CHAIN_QUERY = "call_chain"
CALLERS_QUERY = "callers_of"
PATHFINDER_QUERY = "call_chain_pathfinder"
SYMBOL_SEARCH_QUERY = "symbol_search"

DEFAULT_SEARCH_LIMIT = 25
MAX_SEARCH_LIMIT = 50


def require_param(value: object, name: str) -> str:
    """Return a trimmed required string parameter or raise ValidationError."""
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f'Query parameter "{name}" is required')
    return value.strip()


def clamp_limit(raw: object) -> int:
    """Integral limits, numeric strings included, are clamped to 1..50.

    Anything else (fractions, non-numbers) means the default.
    """
    if isinstance(raw, bool):
        return DEFAULT_SEARCH_LIMIT
    if isinstance(raw, int):
        return min(max(raw, 1), MAX_SEARCH_LIMIT)
    if isinstance(raw, str):
        try:
            number = float(raw.strip())
        except ValueError:
            return DEFAULT_SEARCH_LIMIT
    elif isinstance(raw, float):
        number = raw
    else:
        return DEFAULT_SEARCH_LIMIT
    if not number.is_integer():
        return DEFAULT_SEARCH_LIMIT
    return min(max(int(number), 1), MAX_SEARCH_LIMIT)


class CallGraphService:
    """Validated, payload-shaped operations over a GraphStore."""

    def __init__(self, store: GraphStore, settings: Settings | None = None) -> None:
        self.store = store
        self.settings = settings or Settings()
        self.resolver = SourcePathResolver(
            store.sources.exists,
            store.sources.find_by_suffix,
            self.settings.min_suffix_length,
        )
        self._browser_index: FileBrowserIndex | None = None

    @property
    def browser_index(self) -> FileBrowserIndex:
        """Directory index, built from the store on first use."""
        if self._browser_index is None:
            self._browser_index = FileBrowserIndex.build(self.store.sources.list_files())
        return self._browser_index

    @property
    def budget_options(self) -> BudgetOptions:
        return BudgetOptions(
            source_extension=self.settings.source_extension,
            external_id_prefix=self.settings.external_id_prefix,
        )

    def list_queries(self, include_sql: bool = False) -> dict[str, Any]:
        queries = [q.to_dict() for q in self.store.queries.list(include_text=include_sql)]
        return {"count": len(queries), "includeSql": include_sql, "queries": queries}

    def search(self, q: str | None, limit: object = None) -> dict[str, Any]:
        query = require_param(q, "q")
        rows = self.store.queries.execute(SYMBOL_SEARCH_QUERY, {"pattern": f"%{query}%"})
        functions = [dict(row) for row in rows]
        functions = [f for f in functions if f.get("kind") == "function"][: clamp_limit(limit)]
        return {"query": query, "count": len(functions), "functions": functions}

    def function_detail(self, function_id: str | None) -> dict[str, Any]:
        fid = require_param(function_id, "functionId")
        detail = self.store.functions.get_detail(fid)
        if detail is None:
            raise NotFoundError(f"Function not found: {fid}")
        return detail

    def source(self, function_id: str | None) -> dict[str, Any]:
        detail = self.function_detail(function_id)
        source = self.store.sources.get(detail["file"])
        if source is None:
            raise NotFoundError(f"Source file not found: {detail['file']}")
        return {
            "functionId": detail["function_id"],
            "name": detail["name"],
            "file": detail["file"],
            "package": detail["package"],
            "line": detail["line"],
            "endLine": detail["end_line"],
            "content": source.content,
        }

    def resolve_file(self, file: str | None) -> tuple[str, str]:
        """Return (requested, resolved) or raise NotFoundError."""
        requested = require_param(file, "file")
        resolved = self.resolver.resolve(requested)
        if resolved is None:
            raise NotFoundError(f"Source file not found: {requested}")
        return requested, resolved

    def file(self, file: str | None) -> dict[str, Any]:
        requested, resolved = self.resolve_file(file)
        source = self.store.sources.get(resolved)
        if source is None:
            raise NotFoundError(f"Source file not found: {requested}")
        return {
            "fileRequested": requested,
            "fileResolved": resolved,
            "package": source.package,
            "content": source.content,
        }

    def file_functions(self, file: str | None) -> dict[str, Any]:
        requested, resolved = self.resolve_file(file)
        functions = self.store.functions.in_file(resolved)
        return {
            "fileRequested": requested,
            "fileResolved": resolved,
            "count": len(functions),
            "functions": functions,
        }

    def list_directory(self, path: str | None = None) -> dict[str, Any]:
        browse_path = normalize_browse_path(path)
        index = self.browser_index
        if not index.has_directory(browse_path):
            raise NotFoundError(f"Directory not found: {browse_path or '/'}")
        entries = [entry.to_dict() for entry in index.list_directory(browse_path)]
        return {"path": browse_path, "count": len(entries), "entries": entries}

    def _traversal(self, query_name: str, function_id: str | None) -> dict[str, Any]:
        fid = require_param(function_id, "functionId")
        rows = self.store.queries.execute(query_name, {"function_id": fid})
        nodes = [dict(row) for row in rows]
        return {"functionId": fid, "count": len(nodes), "nodes": nodes}

    def neighborhood(self, function_id: str | None) -> dict[str, Any]:
        return self._traversal(NEIGHBORHOOD_QUERY, function_id)

    def call_chain(self, function_id: str | None) -> dict[str, Any]:
        return self._traversal(CALL_CHAIN_QUERY, function_id)

    def callers(self, function_id: str | None) -> dict[str, Any]:
        return self._traversal(CALLERS_QUERY, function_id)

    def paths(self, start_function_id: str | None, end_function_id: str | None) -> dict[str, Any]:
        start = require_param(start_function_id, "startFunctionId")
        end = require_param(end_function_id, "endFunctionId")
        rows = self.store.queries.execute(PATHFINDER_QUERY, {"start": start, "end": end})
        paths = [dict(row) for row in rows]
        return {
            "startFunctionId": start,
            "endFunctionId": end,
            "count": len(paths),
            "paths": paths,
        }

    def explore(self, function_id: str | None, node_budget: int | None = None) -> GraphModel:
        """Assemble the bounded exploration graph of a function in-process."""
        focal = FunctionNode.from_row(self.function_detail(function_id))
        budget = self.settings.node_budget if node_budget is None else node_budget
        neighborhood = traversal_nodes(self.neighborhood(focal.function_id)["nodes"])
        callees = traversal_nodes(self.call_chain(focal.function_id)["nodes"], Direction.CALLEE)
        callers = traversal_nodes(self.callers(focal.function_id)["nodes"], Direction.CALLER)
        return assemble(focal, neighborhood, callees, callers, budget, self.budget_options)


def traversal_nodes(
    rows: list[dict[str, Any]], direction: Direction | None = None
) -> list[TraversalNode]:
    """Convert traversal rows, filling in the direction when rows omit it."""
    return [TraversalNode.from_row(row, default_direction=direction) for row in rows]
