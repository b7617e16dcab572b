"""
Async client for the CallGraph Explorer API.

    - ExplorerClient: One coroutine per endpoint (httpx)
    - GraphExplorer: Concurrent neighborhood/callee/caller loads feeding the
      budgeting engine, with stale batches discarded by generation
"""

from cgexplorer.client.explorer import GraphExplorer, LoadedFile
from cgexplorer.client.http import ExplorerClient

__all__ = ["ExplorerClient", "GraphExplorer", "LoadedFile"]
