"""Process configuration read from the environment."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

DEFAULT_SQLITE_PATH = "../cp_graph.db"
DEFAULT_NODE_BUDGET = 60
DEFAULT_SOURCE_EXTENSION = ".go"
DEFAULT_MIN_SUFFIX_LENGTH = 8
DEFAULT_EXTERNAL_ID_PREFIX = "ext:"


@dataclass(frozen=True)
class Settings:
    """Settings shared by the API, CLI and MCP server."""

    sqlite_path: str = DEFAULT_SQLITE_PATH
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "info"
    node_budget: int = DEFAULT_NODE_BUDGET
    source_extension: str = DEFAULT_SOURCE_EXTENSION
    min_suffix_length: int = DEFAULT_MIN_SUFFIX_LENGTH
    external_id_prefix: str = DEFAULT_EXTERNAL_ID_PREFIX

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        """Build settings from environment variables, falling back to defaults."""
        env = os.environ if environ is None else environ
        return cls(
            sqlite_path=env.get("SQLITE_PATH", DEFAULT_SQLITE_PATH),
            host=env.get("HOST", "0.0.0.0"),
            port=int(env.get("PORT", "3000")),
            log_level=env.get("LOG_LEVEL", "info"),
            node_budget=int(env.get("CGX_NODE_BUDGET", str(DEFAULT_NODE_BUDGET))),
            source_extension=env.get("CGX_SOURCE_EXTENSION", DEFAULT_SOURCE_EXTENSION),
            min_suffix_length=int(
                env.get("CGX_MIN_SUFFIX_LENGTH", str(DEFAULT_MIN_SUFFIX_LENGTH))
            ),
            external_id_prefix=env.get("CGX_EXTERNAL_ID_PREFIX", DEFAULT_EXTERNAL_ID_PREFIX),
        )

    def resolved_db_path(self) -> Path | None:
        """Absolute store path, or None when no store is configured."""
        if not self.sqlite_path:
            return None
        path = Path(self.sqlite_path)
        return path if path.is_absolute() else Path.cwd() / path
