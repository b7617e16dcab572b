"""
Storage layer: read-only SQLite access to the pre-built call graph.

Components:
    - GraphStore: Facade that owns the connection and the storages below
    - QueryRegistry: Named queries stored in the ``queries`` table
    - FunctionStorage: Function detail lookups
    - SourceStorage: Source files and path suffix lookups

Tables and views read:
    queries: name, description, sql
    sources: file, package, content
    dashboard_function_detail: function_id, name, file, line, end_line, package, ...

The database is opened with ``mode=ro``; nothing in this package writes to it.
"""

from cgexplorer.core.storage.functions import FunctionStorage
from cgexplorer.core.storage.queries import CompiledQuery, QueryRegistry
from cgexplorer.core.storage.repository import GraphStore
from cgexplorer.core.storage.sources import SourceStorage

__all__ = [
    "GraphStore",
    "QueryRegistry",
    "CompiledQuery",
    "FunctionStorage",
    "SourceStorage",
]
