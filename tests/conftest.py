"""Shared fixtures: a small call graph store of a Go project."""

import sqlite3
from collections.abc import Iterator
from pathlib import Path

import pytest

from cgexplorer.core.config import Settings
from cgexplorer.core.service import CallGraphService
from cgexplorer.core.storage import GraphStore

SCHEMA = """
CREATE TABLE functions (
    function_id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    file TEXT,
    line INTEGER,
    end_line INTEGER,
    package TEXT,
    parent_function TEXT
);

CREATE TABLE types (
    name TEXT NOT NULL,
    file TEXT,
    line INTEGER,
    package TEXT
);

CREATE TABLE calls (
    caller_id TEXT NOT NULL,
    callee_id TEXT NOT NULL
);

CREATE TABLE sources (
    file TEXT PRIMARY KEY,
    package TEXT,
    content TEXT
);

CREATE TABLE queries (
    name TEXT PRIMARY KEY,
    description TEXT,
    sql TEXT NOT NULL
);

CREATE VIEW dashboard_function_detail AS
SELECT f.function_id, f.name, f.file, f.line, f.end_line, f.package, f.parent_function,
       (SELECT COUNT(*) FROM calls c WHERE c.callee_id = f.function_id) AS caller_count,
       (SELECT COUNT(*) FROM calls c WHERE c.caller_id = f.function_id) AS callee_count
FROM functions f;
"""

QUERIES = {
    "function_neighborhood": (
        "Direct callers and callees of a function",
        """
        SELECT f.function_id AS id, f.name, f.file, f.line, f.package,
               'callee' AS direction, 1 AS depth
        FROM calls c JOIN functions f ON f.function_id = c.callee_id
        WHERE c.caller_id = :function_id
        UNION ALL
        SELECT f.function_id AS id, f.name, f.file, f.line, f.package,
               'caller' AS direction, 1 AS depth
        FROM calls c JOIN functions f ON f.function_id = c.caller_id
        WHERE c.callee_id = :function_id
        """,
    ),
    "call_chain": (
        "Transitive callees of a function",
        """
        WITH RECURSIVE chain(id, depth) AS (
            SELECT callee_id, 1 FROM calls WHERE caller_id = :function_id
            UNION
            SELECT c.callee_id, chain.depth + 1
            FROM calls c JOIN chain ON c.caller_id = chain.id
            WHERE chain.depth < 6
        )
        SELECT f.function_id AS id, f.name, f.file, f.line, f.package,
               'callee' AS direction, MIN(chain.depth) AS depth
        FROM chain JOIN functions f ON f.function_id = chain.id
        GROUP BY f.function_id
        ORDER BY depth, f.name
        """,
    ),
    "callers_of": (
        "Transitive callers of a function",
        """
        WITH RECURSIVE chain(id, depth) AS (
            SELECT caller_id, 1 FROM calls WHERE callee_id = :function_id
            UNION
            SELECT c.caller_id, chain.depth + 1
            FROM calls c JOIN chain ON c.callee_id = chain.id
            WHERE chain.depth < 6
        )
        SELECT f.function_id AS id, f.name, f.file, f.line, f.package,
               'caller' AS direction, MIN(chain.depth) AS depth
        FROM chain JOIN functions f ON f.function_id = chain.id
        GROUP BY f.function_id
        ORDER BY depth, f.name
        """,
    ),
    "call_chain_pathfinder": (
        "Call paths between two functions",
        """
        WITH RECURSIVE walk(id, path, depth) AS (
            SELECT :start, :start, 0
            UNION ALL
            SELECT c.callee_id, walk.path || ' -> ' || c.callee_id, walk.depth + 1
            FROM calls c JOIN walk ON c.caller_id = walk.id
            WHERE walk.depth < 6 AND instr(walk.path, c.callee_id) = 0
        )
        SELECT path, depth FROM walk WHERE id = :end ORDER BY depth, path
        """,
    ),
    "symbol_search": (
        "Functions and types whose name matches a LIKE pattern",
        """
        SELECT function_id, name, file, line, package, 'function' AS kind
        FROM functions WHERE name LIKE :pattern
        UNION ALL
        SELECT 'type:' || name, name, file, line, package, 'type' AS kind
        FROM types WHERE name LIKE :pattern
        ORDER BY name
        """,
    ),
}

API_FILE = "prometheus/web/api/v1/api.go"
MAIN_FILE = "prometheus/cmd/prometheus/main.go"
WEB_FILE = "prometheus/web/web.go"
VENDOR_WEB_FILE = "vendor/github.com/other/web/web.go"
STRCONV_FILE = "prometheus/util/strutil/strconv.go"

SOURCES = [
    (MAIN_FILE, "main", "package main\n\nfunc main() {\n\tweb.New().Run()\n}\n"),
    (WEB_FILE, "web", "package web\n\nfunc New() *Handler {\n\treturn nil\n}\n"),
    (VENDOR_WEB_FILE, "web", "package web\n"),
    (API_FILE, "v1", "package v1\n\nfunc NewAPI() *API {\n\treturn &API{}\n}\n"),
    (STRCONV_FILE, "strutil", "package strutil\n"),
    ("prometheus/web/ui/app.js", "ui", "console.log('ui');\n"),
]

FUNCTIONS = [
    ("main.main", "main", MAIN_FILE, 3, 5, "main"),
    ("web.New", "New", WEB_FILE, 3, 5, "web"),
    ("web.Run", "Run", WEB_FILE, 10, 20, "web"),
    ("v1.NewAPI", "NewAPI", API_FILE, 3, 5, "v1"),
    ("v1.Register", "Register", API_FILE, 10, 30, "v1"),
    ("v1.serveQuery", "serveQuery", API_FILE, 40, 60, "v1"),
    ("strutil.Quote", "Quote", STRCONV_FILE, 5, 9, "strutil"),
    ("ext:fmt.Sprintf", "Sprintf", None, None, None, "fmt"),
    ("ui.render", "render", "prometheus/web/ui/app.js", 1, 1, "ui"),
    ("v1.FooHandler", "FooHandler", API_FILE, 70, 80, "v1"),
    ("v1.parseFoo", "parseFoo", API_FILE, 90, 95, "v1"),
    ("v1.FooBar", "FooBar", API_FILE, 100, 110, "v1"),
    ("v1.newFoo", "newFoo", API_FILE, 120, 125, "v1"),
    ("v1.FooQuery", "FooQuery", API_FILE, 130, 140, "v1"),
]

TYPES = [
    ("FooType", API_FILE, 150, "v1"),
]

CALLS = [
    ("main.main", "web.New"),
    ("main.main", "web.Run"),
    ("web.New", "v1.NewAPI"),
    ("web.Run", "v1.serveQuery"),
    ("v1.NewAPI", "v1.Register"),
    ("v1.Register", "v1.serveQuery"),
    ("v1.serveQuery", "strutil.Quote"),
    ("v1.serveQuery", "ext:fmt.Sprintf"),
    ("v1.serveQuery", "ui.render"),
]


def build_graph_db(db_path: Path) -> Path:
    """Write the sample call graph to a SQLite file."""
    conn = sqlite3.connect(db_path)
    try:
        conn.executescript(SCHEMA)
        conn.executemany("INSERT INTO sources VALUES (?, ?, ?)", SOURCES)
        conn.executemany("INSERT INTO functions VALUES (?, ?, ?, ?, ?, ?, NULL)", FUNCTIONS)
        conn.executemany("INSERT INTO types VALUES (?, ?, ?, ?)", TYPES)
        conn.executemany("INSERT INTO calls VALUES (?, ?)", CALLS)
        conn.executemany(
            "INSERT INTO queries VALUES (?, ?, ?)",
            [(name, description, sql) for name, (description, sql) in QUERIES.items()],
        )
        conn.commit()
    finally:
        conn.close()
    return db_path


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    """Path of a freshly built sample store."""
    return build_graph_db(tmp_path / "cp_graph.db")


@pytest.fixture
def settings(db_path: Path) -> Settings:
    return Settings(sqlite_path=str(db_path), node_budget=60)


@pytest.fixture
def store(settings: Settings) -> Iterator[GraphStore]:
    """Read-only store over the sample database."""
    with GraphStore.from_settings(settings) as graph_store:
        yield graph_store


@pytest.fixture
def service(store: GraphStore, settings: Settings) -> CallGraphService:
    return CallGraphService(store, settings)
