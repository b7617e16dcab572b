"""
HTTP API for CallGraph Explorer.

Read-only JSON endpoints over the graph store, served by uvicorn.

Usage:
    cgexplorer serve --db cp_graph.db
"""

from cgexplorer.api.app import create_app

__all__ = ["create_app"]
