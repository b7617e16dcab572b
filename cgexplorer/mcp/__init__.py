"""
MCP server for CallGraph Explorer.

Exposes call graph exploration to LLMs via the Model Context Protocol.

Tools:
    - callgraph_search: Find functions by name
    - callgraph_explore: Bounded exploration graph around a function
    - callgraph_path: Call paths between two functions
    - callgraph_queries: List the named queries of the store

Usage:
    Run: SQLITE_PATH=cp_graph.db mcp-server-cgexplorer
"""

import asyncio

from cgexplorer.mcp.server import serve as _serve


def serve() -> None:
    """Entry point for the MCP server."""
    asyncio.run(_serve())


__all__ = ["serve"]
