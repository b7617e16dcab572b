"""Function detail lookups."""

from __future__ import annotations

import sqlite3
from collections.abc import Callable
from typing import Any

from cgexplorer.core.models import FunctionNode


class FunctionStorage:
    """Read-only access to the ``dashboard_function_detail`` view."""

    def __init__(self, get_connection: Callable[[], sqlite3.Connection]) -> None:
        self._get_connection = get_connection

    def get_detail(self, function_id: str) -> dict[str, Any] | None:
        """Get the full detail row of a function, or None if unknown.

        Columns beyond the FunctionNode fields are passed through untouched.
        """
        conn = self._get_connection()
        cursor = conn.execute(
            "SELECT * FROM dashboard_function_detail WHERE function_id = ?", (function_id,)
        )
        row = cursor.fetchone()
        if row is None:
            return None
        return dict(row)

    def get(self, function_id: str) -> FunctionNode | None:
        """Get a function as a FunctionNode, or None if unknown."""
        detail = self.get_detail(function_id)
        if detail is None:
            return None
        return FunctionNode.from_row(detail)

    def in_file(self, file: str) -> list[dict[str, Any]]:
        """Get all functions declared in a file, ordered by line."""
        conn = self._get_connection()
        cursor = conn.execute(
            """
            SELECT function_id, name, file, line, end_line, package
            FROM dashboard_function_detail
            WHERE file = ?
            ORDER BY line, name
            """,
            (file,),
        )
        return [dict(row) for row in cursor.fetchall()]
