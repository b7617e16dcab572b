"""CLI entry point for CallGraph Explorer."""

import dataclasses
import json
import logging
from typing import Annotated, NoReturn

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from cgexplorer.core.config import Settings
from cgexplorer.core.exceptions import ExplorerError
from cgexplorer.core.graph import GraphModel, GraphNode, NodeTag
from cgexplorer.core.service import CallGraphService
from cgexplorer.core.storage import GraphStore

app = typer.Typer(
    name="cgexplorer",
    help="Explore a pre-built call graph stored in SQLite.",
    no_args_is_help=True,
)
console = Console()

DbOption = Annotated[
    str | None,
    typer.Option("--db", envvar="SQLITE_PATH", help="Path to the call graph database"),
]
JsonOption = Annotated[bool, typer.Option("--json", "-j", help="Output as JSON")]


def configure_logging(level: str) -> None:
    """Route log records through rich."""
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
        force=True,
    )


def get_settings(db: str | None) -> Settings:
    settings = Settings.from_env()
    if db is not None:
        settings = dataclasses.replace(settings, sqlite_path=db)
    return settings


def get_service(db: str | None) -> CallGraphService:
    """Open the store for the given path (or SQLITE_PATH)."""
    settings = get_settings(db)
    return CallGraphService(GraphStore.from_settings(settings), settings)


def fail(error: ExplorerError) -> NoReturn:
    console.print(f"[red]{error}[/red]")
    raise typer.Exit(code=1)


@app.command()
def serve(
    db: DbOption = None,
    host: Annotated[str | None, typer.Option("--host", help="Bind address")] = None,
    port: Annotated[int | None, typer.Option("--port", "-p", help="Bind port")] = None,
    log_level: Annotated[
        str | None, typer.Option("--log-level", envvar="LOG_LEVEL", help="Logging level")
    ] = None,
) -> None:
    """Serve the JSON API."""
    import uvicorn

    from cgexplorer.api import create_app

    settings = get_settings(db)
    settings = dataclasses.replace(
        settings,
        host=host or settings.host,
        port=port or settings.port,
        log_level=log_level or settings.log_level,
    )
    configure_logging(settings.log_level)
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        log_config=None,
    )


@app.command()
def queries(
    db: DbOption = None,
    include_sql: Annotated[bool, typer.Option("--sql", help="Include query text")] = False,
    output_json: JsonOption = False,
) -> None:
    """List the named queries registered in the store."""
    service = get_service(db)
    with service.store:
        try:
            result = service.list_queries(include_sql)
        except ExplorerError as e:
            fail(e)

        if output_json:
            print(json.dumps(result))
            return
        for query in result["queries"]:
            console.print(f"[cyan]{query['name']}[/cyan]  [dim]{query['description']}[/dim]")
            if include_sql:
                console.print(f"  {query['sql']}")


@app.command()
def search(
    query: Annotated[str, typer.Argument(help="Name to search for")],
    db: DbOption = None,
    limit: Annotated[int, typer.Option("--limit", "-n", help="Maximum results (1-50)")] = 25,
    output_json: JsonOption = False,
) -> None:
    """Search for functions by name."""
    service = get_service(db)
    with service.store:
        try:
            result = service.search(query, limit)
        except ExplorerError as e:
            fail(e)

        if output_json:
            print(json.dumps(result))
            return
        if not result["functions"]:
            console.print(f"No matches for '[cyan]{query}[/cyan]'")
            return
        for function in result["functions"]:
            fid = function.get("function_id") or function.get("id")
            console.print(f"[cyan]{function.get('name')}[/cyan] [dim]{fid}[/dim]")
            if function.get("file"):
                console.print(f"  {function['file']}:{function.get('line')}")


@app.command()
def resolve(
    path: Annotated[str, typer.Argument(help="File path, possibly from another checkout")],
    db: DbOption = None,
) -> None:
    """Resolve a file path to the canonical stored path."""
    service = get_service(db)
    with service.store:
        try:
            _, resolved = service.resolve_file(path)
        except ExplorerError as e:
            fail(e)
        console.print(resolved)


@app.command()
def files(
    path: Annotated[str, typer.Argument(help="Directory to list")] = "",
    db: DbOption = None,
    output_json: JsonOption = False,
) -> None:
    """List a directory of the source tree."""
    service = get_service(db)
    with service.store:
        try:
            result = service.list_directory(path)
        except ExplorerError as e:
            fail(e)

        if output_json:
            print(json.dumps(result))
            return
        console.print(f"[bold]{result['path'] or '/'}[/] [dim]({result['count']} entries)[/]")
        for entry in result["entries"]:
            if entry["type"] == "directory":
                console.print(f"  [blue]{entry['name']}/[/]")
            else:
                console.print(f"  {entry['name']} [dim]{entry.get('package') or ''}[/]")


@app.command()
def explore(
    function_id: Annotated[str, typer.Argument(help="Id of the focal function")],
    db: DbOption = None,
    budget: Annotated[
        int | None, typer.Option("--budget", "-b", help="Maximum nodes to show")
    ] = None,
    output_json: JsonOption = False,
) -> None:
    """Show the bounded exploration graph around a function."""
    service = get_service(db)
    with service.store:
        try:
            model = service.explore(function_id, budget)
        except ExplorerError as e:
            fail(e)

        if output_json:
            print(json.dumps(model.to_dict()))
            return
        print_model(model)


def print_model(model: GraphModel) -> None:
    """Print nodes grouped by relation and depth."""
    focus = model.with_tag(NodeTag.FOCUS)
    if focus:
        node = focus[0]
        console.print(f"\n[bold yellow]▶ {node.name}[/] [yellow]◀ selected[/]")
        console.print(f"[dim]{node.file}:{node.line}[/]\n")

    table = Table(show_header=True, header_style="bold")
    table.add_column("Relation")
    table.add_column("Depth", justify="right")
    table.add_column("Name", style="cyan")
    table.add_column("Location", style="dim")

    def sort_key(n: GraphNode) -> tuple[int, int, str]:
        return (0 if NodeTag.CALLER in n.tags else 1, n.depth, n.name)

    for node in sorted(model, key=sort_key):
        if NodeTag.FOCUS in node.tags:
            continue
        relation = ", ".join(
            tag.value for tag in (NodeTag.CALLER, NodeTag.CALLEE) if tag in node.tags
        )
        location = f"{node.file}:{node.line}" if node.file else "external"
        table.add_row(relation, str(node.depth), node.name, location)

    console.print(table)
    console.print(f"\n[dim]Nodes: {len(model)} | Edges: {len(model.edges)}[/]")


@app.command()
def path(
    start_function_id: Annotated[str, typer.Argument(help="Calling function id")],
    end_function_id: Annotated[str, typer.Argument(help="Called function id")],
    db: DbOption = None,
    output_json: JsonOption = False,
) -> None:
    """Find call paths between two functions."""
    service = get_service(db)
    with service.store:
        try:
            result = service.paths(start_function_id, end_function_id)
        except ExplorerError as e:
            fail(e)

        if output_json:
            print(json.dumps(result))
            return
        if not result["paths"]:
            console.print("[dim]No path found[/]")
            return
        for row in result["paths"]:
            console.print("  ".join(f"{key}={value}" for key, value in row.items()))


if __name__ == "__main__":
    app()
