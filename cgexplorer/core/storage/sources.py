"""Source file storage operations."""

from __future__ import annotations

import sqlite3
from collections.abc import Callable

from cgexplorer.core.models import SourceFile


class SourceStorage:
    """Read-only access to the ``sources`` table."""

    def __init__(self, get_connection: Callable[[], sqlite3.Connection]) -> None:
        self._get_connection = get_connection

    def get(self, file: str) -> SourceFile | None:
        """Get a source file by canonical path, or None if unknown."""
        conn = self._get_connection()
        cursor = conn.execute("SELECT file, package, content FROM sources WHERE file = ?", (file,))
        row = cursor.fetchone()
        if row is None:
            return None
        return SourceFile.from_row(row)

    def exists(self, file: str) -> bool:
        """Check whether a canonical path is stored."""
        conn = self._get_connection()
        cursor = conn.execute("SELECT 1 FROM sources WHERE file = ? LIMIT 1", (file,))
        return cursor.fetchone() is not None

    def find_by_suffix(self, suffix: str, limit: int = 2) -> list[str]:
        """Get up to ``limit`` canonical paths ending with ``suffix``."""
        conn = self._get_connection()
        cursor = conn.execute(
            """
            SELECT file FROM sources
            WHERE length(file) >= ? AND substr(file, -?) = ?
            ORDER BY file
            LIMIT ?
            """,
            (len(suffix), len(suffix), suffix, limit),
        )
        return [row["file"] for row in cursor.fetchall()]

    def list_files(self) -> list[tuple[str, str | None]]:
        """List every (file, package) pair, ordered by path."""
        conn = self._get_connection()
        cursor = conn.execute("SELECT file, package FROM sources ORDER BY file")
        return [(row["file"], row["package"]) for row in cursor.fetchall()]
