"""FastAPI application serving the call graph over read-only JSON endpoints."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from http import HTTPStatus
from typing import Any

from fastapi import FastAPI, Query, Request
from fastapi.responses import JSONResponse

from cgexplorer import __version__
from cgexplorer.core.config import Settings
from cgexplorer.core.exceptions import ExplorerError
from cgexplorer.core.service import CallGraphService
from cgexplorer.core.storage import GraphStore

logger = logging.getLogger(__name__)

SERVICE_NAME = "cgexplorer"

ENDPOINTS = [
    "/health",
    "/health/db",
    "/queries",
    "/call-graph/search?q=<query>",
    "/call-graph/function-detail?functionId=<id>",
    "/call-graph/source?functionId=<id>",
    "/call-graph/file?file=<path>",
    "/call-graph/files?path=<dir>",
    "/call-graph/file-functions?file=<path>",
    "/call-graph/neighborhood?functionId=<id>",
    "/call-graph/call-chain?functionId=<id>",
    "/call-graph/callers?functionId=<id>",
    "/call-graph/path?startFunctionId=<id>&endFunctionId=<id>",
]


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def error_body(status_code: int, message: str) -> dict[str, Any]:
    """JSON error payload: status, reason phrase and the triggering condition."""
    return {
        "statusCode": status_code,
        "error": HTTPStatus(status_code).phrase,
        "message": message,
    }


def create_app(settings: Settings | None = None, store: GraphStore | None = None) -> FastAPI:
    """Build the API around a store (opened from settings when not given)."""
    settings = settings or Settings.from_env()
    store = store if store is not None else GraphStore.from_settings(settings)
    service = CallGraphService(store, settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info("Serving call graph from %s", store.db_path or "<not configured>")
        yield
        store.close()

    app = FastAPI(title="CallGraph Explorer", version=__version__, lifespan=lifespan)
    app.state.service = service

    @app.exception_handler(ExplorerError)
    async def explorer_error_handler(request: Request, exc: ExplorerError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc)
        return JSONResponse(
            status_code=exc.status_code, content=error_body(exc.status_code, str(exc))
        )

    @app.get("/")
    def index() -> dict[str, Any]:
        return {"name": "CallGraph Explorer backend", "endpoints": ENDPOINTS}

    @app.get("/health")
    def health() -> dict[str, Any]:
        db_status = store.ping()
        return {
            "status": "ok" if db_status["ok"] or not store.configured else "degraded",
            "service": SERVICE_NAME,
            "dbConfigured": store.configured,
            "timestamp": _timestamp(),
        }

    @app.get("/health/db")
    def health_db() -> dict[str, Any]:
        db_status = store.ping()
        return {
            "status": "ok" if db_status["ok"] else "unavailable",
            "configured": store.configured,
            "dbPath": str(store.db_path) if store.db_path else None,
            **db_status,
            "timestamp": _timestamp(),
        }

    @app.get("/queries")
    def list_queries(
        include_sql: str | None = Query(None, alias="includeSql"),
    ) -> dict[str, Any]:
        return service.list_queries((include_sql or "").lower() == "true")

    @app.get("/call-graph/search")
    def search(
        q: str | None = Query(None), limit: str | None = Query(None)
    ) -> dict[str, Any]:
        return service.search(q, limit)

    @app.get("/call-graph/function-detail")
    def function_detail(
        function_id: str | None = Query(None, alias="functionId"),
    ) -> dict[str, Any]:
        return service.function_detail(function_id)

    @app.get("/call-graph/source")
    def source(function_id: str | None = Query(None, alias="functionId")) -> dict[str, Any]:
        return service.source(function_id)

    @app.get("/call-graph/file")
    def file(file: str | None = Query(None)) -> dict[str, Any]:
        return service.file(file)

    @app.get("/call-graph/file-functions")
    def file_functions(file: str | None = Query(None)) -> dict[str, Any]:
        return service.file_functions(file)

    @app.get("/call-graph/files")
    def files(path: str | None = Query(None)) -> dict[str, Any]:
        return service.list_directory(path)

    @app.get("/call-graph/neighborhood")
    def neighborhood(
        function_id: str | None = Query(None, alias="functionId"),
    ) -> dict[str, Any]:
        return service.neighborhood(function_id)

    @app.get("/call-graph/call-chain")
    def call_chain(
        function_id: str | None = Query(None, alias="functionId"),
    ) -> dict[str, Any]:
        return service.call_chain(function_id)

    @app.get("/call-graph/callers")
    def callers(function_id: str | None = Query(None, alias="functionId")) -> dict[str, Any]:
        return service.callers(function_id)

    @app.get("/call-graph/path")
    def path(
        start_function_id: str | None = Query(None, alias="startFunctionId"),
        end_function_id: str | None = Query(None, alias="endFunctionId"),
    ) -> dict[str, Any]:
        return service.paths(start_function_id, end_function_id)

    return app
