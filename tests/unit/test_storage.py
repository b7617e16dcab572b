"""Tests for the read-only graph store."""

import sqlite3
from pathlib import Path

import pytest

from cgexplorer.core.exceptions import ServiceUnavailableError, UnknownQueryError, ValidationError
from cgexplorer.core.storage import CompiledQuery, GraphStore

API_FILE = "prometheus/web/api/v1/api.go"
WEB_FILE = "prometheus/web/web.go"
VENDOR_WEB_FILE = "vendor/github.com/other/web/web.go"


class TestCompiledQuery:
    """Tests for placeholder discovery and binding."""

    def test_finds_named_placeholders_in_order(self) -> None:
        query = CompiledQuery.compile("q", "SELECT * FROM t WHERE a = :first AND b = @second")
        assert query.parameters == ("first", "second")

    def test_repeated_placeholder_listed_once(self) -> None:
        query = CompiledQuery.compile("q", "SELECT :x UNION SELECT :x")
        assert query.parameters == ("x",)

    def test_ignores_literals_and_comments(self) -> None:
        text = "SELECT ':fake', \"$col\" -- :comment\nFROM t /* @block */ WHERE id = $real"
        assert CompiledQuery.compile("q", text).parameters == ("real",)

    def test_binds_only_declared_parameters(self) -> None:
        query = CompiledQuery.compile("q", "SELECT :a")
        assert query.bind({"a": 1, "extra": 2}) == {"a": 1}

    def test_missing_parameter(self) -> None:
        query = CompiledQuery.compile("q", "SELECT :a, :b")
        with pytest.raises(ValidationError) as exc_info:
            query.bind({"a": 1})
        assert "b" in str(exc_info.value)


class TestQueryRegistry:
    """Tests for executing queries by name."""

    def test_unknown_query(self, store: GraphStore) -> None:
        with pytest.raises(UnknownQueryError) as exc_info:
            store.queries.execute("nonexistent_query")
        assert "nonexistent_query" in str(exc_info.value)

    def test_compiles_once(self, store: GraphStore) -> None:
        first = store.queries.get("call_chain")
        second = store.queries.get("call_chain")
        assert first is second
        assert store.queries.compiled_names == ["call_chain"]

    def test_execute_binds_parameters(self, store: GraphStore) -> None:
        rows = store.queries.execute("callers_of", {"function_id": "v1.Register", "unused": 1})
        assert [row["id"] for row in rows] == ["v1.NewAPI", "web.New", "main.main"]

    def test_list_without_text(self, store: GraphStore) -> None:
        definitions = store.queries.list()
        assert [d.name for d in definitions] == sorted(d.name for d in definitions)
        assert all(d.text is None for d in definitions)
        assert "sql" not in definitions[0].to_dict()

    def test_list_with_text(self, store: GraphStore) -> None:
        definitions = store.queries.list(include_text=True)
        assert all(d.text for d in definitions)
        assert "sql" in definitions[0].to_dict()

    def test_contains(self, store: GraphStore) -> None:
        assert "symbol_search" in store.queries
        assert "nonexistent_query" not in store.queries


class TestSourceStorage:
    """Tests for source lookups."""

    def test_get(self, store: GraphStore) -> None:
        source = store.sources.get(API_FILE)
        assert source is not None
        assert source.package == "v1"
        assert source.content.startswith("package v1")

    def test_get_missing(self, store: GraphStore) -> None:
        assert store.sources.get("nope.go") is None

    def test_find_by_suffix_unique(self, store: GraphStore) -> None:
        assert store.sources.find_by_suffix("api/v1/api.go") == [API_FILE]

    def test_find_by_suffix_ambiguous(self, store: GraphStore) -> None:
        matches = store.sources.find_by_suffix("web/web.go", 5)
        assert matches == sorted([WEB_FILE, VENDOR_WEB_FILE])

    def test_find_by_suffix_is_literal(self, store: GraphStore) -> None:
        assert store.sources.find_by_suffix("%.go") == []
        assert store.sources.find_by_suffix("API/V1/API.GO") == []


class TestFunctionStorage:
    """Tests for function detail lookups."""

    def test_detail_includes_view_columns(self, store: GraphStore) -> None:
        detail = store.functions.get_detail("v1.serveQuery")
        assert detail is not None
        assert detail["caller_count"] == 2
        assert detail["callee_count"] == 3

    def test_get_as_node(self, store: GraphStore) -> None:
        node = store.functions.get("web.Run")
        assert node is not None
        assert (node.name, node.file, node.line) == ("Run", WEB_FILE, 10)

    def test_get_missing(self, store: GraphStore) -> None:
        assert store.functions.get("missing") is None

    def test_in_file_ordered_by_line(self, store: GraphStore) -> None:
        lines = [f["line"] for f in store.functions.in_file(API_FILE)]
        assert lines == sorted(lines)
        assert len(lines) == 8


class TestGraphStore:
    """Tests for opening and health-checking the store."""

    def test_unconfigured(self) -> None:
        store = GraphStore(None)
        assert store.configured is False
        with pytest.raises(ServiceUnavailableError):
            store.queries.list()
        assert store.ping()["ok"] is False

    def test_missing_file(self, tmp_path: Path) -> None:
        store = GraphStore(tmp_path / "absent.db")
        with pytest.raises(ServiceUnavailableError) as exc_info:
            store.sources.get(API_FILE)
        assert "does not exist" in str(exc_info.value)
        assert not (tmp_path / "absent.db").exists()

    def test_ping(self, store: GraphStore) -> None:
        status = store.ping()
        assert status["ok"] is True
        assert status["tableCount"] == 5

    def test_read_only(self, store: GraphStore) -> None:
        conn = store._get_connection()
        with pytest.raises(sqlite3.OperationalError):
            conn.execute("DELETE FROM sources")

    def test_close_and_reopen(self, store: GraphStore) -> None:
        store.close()
        assert store.sources.exists(API_FILE) is True
