"""Client-side exploration state: concurrent fetches, assembly, stale-result guard."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable
from dataclasses import dataclass, field
from typing import Any

from cgexplorer.client.http import ExplorerClient
from cgexplorer.core.config import DEFAULT_NODE_BUDGET
from cgexplorer.core.graph import BudgetOptions, GraphModel, assemble
from cgexplorer.core.models import Direction, FunctionNode, TraversalNode

logger = logging.getLogger(__name__)


@dataclass
class LoadedFile:
    """A source file joined with the functions it declares."""

    file_requested: str
    file_resolved: str
    package: str | None
    content: str
    functions: list[dict[str, Any]] = field(default_factory=list)

    @property
    def line_count(self) -> int:
        return len(self.content.split("\n"))


class GraphExplorer:
    """Holds the model of the current focal function.

    Every load is tagged with a generation number. A batch that resolves after
    a newer load has started is dropped instead of overwriting newer state.
    """

    def __init__(
        self,
        client: ExplorerClient,
        node_budget: int = DEFAULT_NODE_BUDGET,
        options: BudgetOptions | None = None,
    ) -> None:
        self._client = client
        self.node_budget = node_budget
        self.options = options or BudgetOptions()
        self._generation = 0
        self._file_generation = 0
        self.focal: FunctionNode | None = None
        self.model: GraphModel | None = None
        self.file: LoadedFile | None = None

    @property
    def generation(self) -> int:
        return self._generation

    async def explore(self, focal: FunctionNode) -> GraphModel | None:
        """Load and assemble the graph around ``focal``.

        Returns the published model, or None when the batch went stale. If
        any of the three fetches fails, nothing is published and the error
        propagates.
        """
        self._generation += 1
        generation = self._generation
        fid = focal.function_id

        try:
            neighborhood, callees, callers = await _join(
                self._client.neighborhood(fid),
                self._client.call_chain(fid),
                self._client.callers(fid),
            )
        except Exception:
            if generation == self._generation:
                self.focal = None
                self.model = None
            raise

        if generation != self._generation:
            logger.debug("Discarding stale graph for %s (generation %d)", fid, generation)
            return None

        model = assemble(
            focal,
            _nodes(neighborhood),
            _nodes(callees, Direction.CALLEE),
            _nodes(callers, Direction.CALLER),
            self.node_budget,
            self.options,
        )
        self.focal = focal
        self.model = model
        return model

    async def explore_id(self, function_id: str) -> GraphModel | None:
        """Look up a function by id, then explore it."""
        self._generation += 1
        generation = self._generation
        detail = await self._client.function_detail(function_id)
        if generation != self._generation:
            logger.debug("Discarding stale detail for %s", function_id)
            return None
        return await self.explore(FunctionNode.from_row(detail))

    async def load_file(self, file: str) -> LoadedFile | None:
        """Fetch a file and its function list together; None when superseded.

        A failed fetch unpublishes the current file and propagates.
        """
        self._file_generation += 1
        generation = self._file_generation

        try:
            file_payload, functions_payload = await _join(
                self._client.file(file),
                self._client.file_functions(file),
            )
        except Exception:
            if generation == self._file_generation:
                self.file = None
            raise

        if generation != self._file_generation:
            logger.debug("Discarding stale file load for %s", file)
            return None

        loaded = LoadedFile(
            file_requested=file_payload.get("fileRequested") or file,
            file_resolved=file_payload.get("fileResolved") or file,
            package=file_payload.get("package"),
            content=file_payload.get("content") or "",
            functions=list(functions_payload.get("functions") or []),
        )
        self.file = loaded
        return loaded


async def _join(*fetches: Awaitable[Any]) -> list[Any]:
    """Await all fetches; on the first failure cancel and reap the rest."""
    tasks = [asyncio.ensure_future(fetch) for fetch in fetches]
    try:
        return await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


def _nodes(payload: dict[str, Any], direction: Direction | None = None) -> list[TraversalNode]:
    return [
        TraversalNode.from_row(row, default_direction=direction)
        for row in payload.get("nodes") or []
    ]
