"""MCP server implementation for CallGraph Explorer."""

from __future__ import annotations

import json
from typing import Any

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from cgexplorer.core.config import Settings
from cgexplorer.core.exceptions import ExplorerError
from cgexplorer.core.service import CallGraphService
from cgexplorer.core.storage import GraphStore

server = Server("cgexplorer")

_service: CallGraphService | None = None


def _get_service() -> CallGraphService:
    """Get the service for the configured store, opening it on first use."""
    global _service
    if _service is None:
        settings = Settings.from_env()
        _service = CallGraphService(GraphStore.from_settings(settings), settings)
    return _service


@server.list_tools()  # type: ignore[no-untyped-call, untyped-decorator]
async def list_tools() -> list[Tool]:
    """List available tools."""
    return [
        Tool(
            name="callgraph_search",
            description=(
                "Search for functions by name (partial match). "
                "Returns function ids usable by the other tools."
            ),
            inputSchema={
                "type": "object",
                "properties": {
                    "query": {
                        "type": "string",
                        "description": "Search query (partial name match)",
                    },
                    "limit": {
                        "type": "integer",
                        "description": "Maximum results, 1-50 (default: 25)",
                        "default": 25,
                    },
                },
                "required": ["query"],
            },
        ),
        Tool(
            name="callgraph_explore",
            description=(
                "Build the exploration graph around a function: its direct callers "
                "and callees plus the most relevant transitive ones, bounded by a "
                "node budget. Returns nodes with relation tags and directed edges."
            ),
            inputSchema={
                "type": "object",
                "properties": {
                    "function_id": {
                        "type": "string",
                        "description": "Id of the focal function",
                    },
                    "node_budget": {
                        "type": "integer",
                        "description": "Maximum number of nodes to include",
                    },
                },
                "required": ["function_id"],
            },
        ),
        Tool(
            name="callgraph_path",
            description="Find call paths from one function to another.",
            inputSchema={
                "type": "object",
                "properties": {
                    "start_function_id": {
                        "type": "string",
                        "description": "Id of the calling function",
                    },
                    "end_function_id": {
                        "type": "string",
                        "description": "Id of the called function",
                    },
                },
                "required": ["start_function_id", "end_function_id"],
            },
        ),
        Tool(
            name="callgraph_queries",
            description="List the named queries registered in the graph store.",
            inputSchema={
                "type": "object",
                "properties": {},
            },
        ),
    ]


@server.call_tool()  # type: ignore[untyped-decorator]
async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
    """Handle tool calls."""
    try:
        result = handle_tool(name, arguments)
    except ExplorerError as e:
        result = {"error": str(e)}
    return [TextContent(type="text", text=json.dumps(result, indent=2))]


def handle_tool(
    name: str, arguments: dict[str, Any], service: CallGraphService | None = None
) -> dict[str, Any]:
    """Dispatch a tool call to the service."""
    service = service or _get_service()
    if name == "callgraph_search":
        return service.search(arguments.get("query"), arguments.get("limit"))
    if name == "callgraph_explore":
        model = service.explore(arguments.get("function_id"), arguments.get("node_budget"))
        return {"function_id": arguments["function_id"], **model.to_dict()}
    if name == "callgraph_path":
        return service.paths(arguments.get("start_function_id"), arguments.get("end_function_id"))
    if name == "callgraph_queries":
        return service.list_queries()
    return {"error": f"Unknown tool: {name}"}


async def serve() -> None:
    """Run the MCP server."""
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())
