"""Read-only graph store that coordinates all storage operations."""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import TYPE_CHECKING, Any

from cgexplorer.core.exceptions import ServiceUnavailableError
from cgexplorer.core.storage.functions import FunctionStorage
from cgexplorer.core.storage.queries import QueryRegistry
from cgexplorer.core.storage.sources import SourceStorage

if TYPE_CHECKING:
    from cgexplorer.core.config import Settings

logger = logging.getLogger(__name__)


class GraphStore:
    """Facade over the read-only SQLite call graph.

    The connection is opened lazily and shared by every request; the store is
    never written to.
    """

    def __init__(self, db_path: Path | None) -> None:
        self._db_path = db_path
        self._conn: sqlite3.Connection | None = None

        self.queries = QueryRegistry(self._get_connection)
        self.functions = FunctionStorage(self._get_connection)
        self.sources = SourceStorage(self._get_connection)

    @classmethod
    def from_settings(cls, settings: Settings) -> GraphStore:
        """Create a store for the configured path (None when unconfigured)."""
        return cls(settings.resolved_db_path())

    @property
    def configured(self) -> bool:
        return self._db_path is not None

    @property
    def db_path(self) -> Path | None:
        return self._db_path

    def _get_connection(self) -> sqlite3.Connection:
        """Get or open the read-only database connection."""
        if self._conn is None:
            if self._db_path is None:
                raise ServiceUnavailableError("SQLite database is not configured")
            if not self._db_path.exists():
                raise ServiceUnavailableError(
                    f"SQLite database file does not exist: {self._db_path}"
                )
            uri = f"{self._db_path.resolve().as_uri()}?mode=ro"
            try:
                self._conn = sqlite3.connect(uri, uri=True, check_same_thread=False)
            except sqlite3.Error as e:
                raise ServiceUnavailableError(f"Cannot open {self._db_path}: {e}") from e
            self._conn.row_factory = sqlite3.Row
            logger.info("Opened graph store %s (read-only)", self._db_path)
        return self._conn

    def close(self) -> None:
        """Close the database connection."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None
            logger.info("Closed graph store %s", self._db_path)

    def __enter__(self) -> GraphStore:
        return self

    def __exit__(self, exc_type: type | None, exc_val: Exception | None, exc_tb: object) -> None:
        self.close()

    def ping(self) -> dict[str, Any]:
        """Check that the store answers queries."""
        if not self.configured:
            return {"ok": False, "reason": "SQLITE_PATH is not configured"}
        try:
            conn = self._get_connection()
            ok = conn.execute("SELECT 1 AS ok").fetchone()["ok"] == 1
            table_count = conn.execute(
                "SELECT COUNT(*) AS count FROM sqlite_master WHERE type = 'table'"
            ).fetchone()["count"]
        except (ServiceUnavailableError, sqlite3.Error) as e:
            return {"ok": False, "reason": str(e)}
        return {"ok": ok, "tableCount": table_count}
