"""
Core module: data models, exceptions, configuration and storage.

Models (models.py):
    - FunctionNode / TraversalNode: Functions returned by lookups and traversals
    - QueryDefinition: A named query stored in the graph store
    - SourceFile / DirectoryEntry: Source browsing
    - Direction/EntryType: Enums for categorization

Exceptions (exceptions.py):
    - ExplorerError: Base exception; carries the HTTP status it maps to
    - ValidationError, NotFoundError, ServiceUnavailableError, UnknownQueryError

Storage (storage/):
    - GraphStore: Read-only facade over the SQLite call graph

Service (service.py):
    - CallGraphService: The operations behind every endpoint
"""

from cgexplorer.core.config import Settings
from cgexplorer.core.exceptions import (
    ExplorerError,
    NotFoundError,
    ServiceUnavailableError,
    UnknownQueryError,
    ValidationError,
)
from cgexplorer.core.models import (
    DirectoryEntry,
    Direction,
    EntryType,
    FunctionNode,
    QueryDefinition,
    SourceFile,
    TraversalNode,
)
from cgexplorer.core.storage import GraphStore

__all__ = [
    # Models
    "FunctionNode",
    "TraversalNode",
    "QueryDefinition",
    "SourceFile",
    "DirectoryEntry",
    "Direction",
    "EntryType",
    # Exceptions
    "ExplorerError",
    "ValidationError",
    "NotFoundError",
    "ServiceUnavailableError",
    "UnknownQueryError",
    # Storage and configuration
    "GraphStore",
    "Settings",
]
