"""Async HTTP client for the CallGraph Explorer API."""

from __future__ import annotations

from typing import Any

import httpx

from cgexplorer.core.exceptions import (
    ExplorerError,
    NotFoundError,
    ServiceUnavailableError,
    ValidationError,
)

DEFAULT_BASE_URL = "http://localhost:3000"

_STATUS_ERRORS: dict[int, type[ExplorerError]] = {
    400: ValidationError,
    404: NotFoundError,
    503: ServiceUnavailableError,
}


def _error_from_response(response: httpx.Response) -> ExplorerError:
    """Map an error response back to the exception taxonomy."""
    try:
        payload = response.json()
    except ValueError:
        payload = None
    message = payload.get("message") if isinstance(payload, dict) else None
    message = message or response.text
    error_cls = _STATUS_ERRORS.get(response.status_code, ExplorerError)
    return error_cls(f"{response.status_code} {response.reason_phrase}: {message}")


class ExplorerClient:
    """One coroutine per API endpoint.

    Can be used as an async context manager; an externally supplied
    ``httpx.AsyncClient`` is left open on exit.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(base_url=base_url)

    async def __aenter__(self) -> ExplorerClient:
        return self

    async def __aexit__(
        self, exc_type: type | None, exc_val: Exception | None, exc_tb: object
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._http.aclose()

    async def _get(self, path: str, **params: Any) -> dict[str, Any]:
        query = {key: value for key, value in params.items() if value is not None}
        response = await self._http.get(path, params=query)
        if response.is_error:
            raise _error_from_response(response)
        return response.json()

    async def queries(self, include_sql: bool = False) -> dict[str, Any]:
        return await self._get("/queries", includeSql="true" if include_sql else None)

    async def search(self, q: str, limit: int | None = None) -> dict[str, Any]:
        return await self._get("/call-graph/search", q=q, limit=limit)

    async def function_detail(self, function_id: str) -> dict[str, Any]:
        return await self._get("/call-graph/function-detail", functionId=function_id)

    async def source(self, function_id: str) -> dict[str, Any]:
        return await self._get("/call-graph/source", functionId=function_id)

    async def file(self, file: str) -> dict[str, Any]:
        return await self._get("/call-graph/file", file=file)

    async def file_functions(self, file: str) -> dict[str, Any]:
        return await self._get("/call-graph/file-functions", file=file)

    async def files(self, path: str = "") -> dict[str, Any]:
        return await self._get("/call-graph/files", path=path or None)

    async def neighborhood(self, function_id: str) -> dict[str, Any]:
        return await self._get("/call-graph/neighborhood", functionId=function_id)

    async def call_chain(self, function_id: str) -> dict[str, Any]:
        return await self._get("/call-graph/call-chain", functionId=function_id)

    async def callers(self, function_id: str) -> dict[str, Any]:
        return await self._get("/call-graph/callers", functionId=function_id)

    async def path(self, start_function_id: str, end_function_id: str) -> dict[str, Any]:
        return await self._get(
            "/call-graph/path",
            startFunctionId=start_function_id,
            endFunctionId=end_function_id,
        )
