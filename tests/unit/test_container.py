"""Tests for the composition root."""

import duckdb
import pytest
from conftest import MOCK_DDL, MOCK_MODEL

from statkit.container import Container
from statkit.errors import UnknownFilterKeyError
from statkit.models import TableModel
from statkit.repositories import CacheRepository, MemoryStore, db


@pytest.fixture
def app():
    conn = duckdb.connect(":memory:")
    conn.execute(MOCK_DDL)
    conn.execute("INSERT INTO mock_models (id, user_id, blah) VALUES (1, 7, 'x'), (2, 8, 'y')")
    container = Container()
    container.reset()
    container.init(conn=conn, store=MemoryStore())
    yield container
    container.reset()
    conn.close()


class TestContainer:
    def test_singleton(self):
        assert Container() is Container()

    def test_registry_created_once(self, app):
        assert app.statistics(MOCK_MODEL) is app.statistics(MOCK_MODEL)
        assert list(app.registries()) == ["MockModel"]

    def test_registries_per_model(self, app):
        other = TableModel(name="Other", table="mock_models")
        app.statistics(MOCK_MODEL).define("Basic Count", count="all")
        assert app.statistics(other).names() == []

    def test_default_filter_rules(self, app):
        stats = app.statistics(MOCK_MODEL)
        stats.define("Basic Count", count="all")
        with pytest.raises(UnknownFilterKeyError):
            stats.get("Basic Count", {"blah": "x"})

        app.default_filter_rules({"blah": "blah = ?"})
        assert stats.get("Basic Count", {"blah": "x"}) == 1

    def test_model_rule_overrides_default(self, app):
        app.default_filter_rules({"user_id": "user_id = -1"})
        stats = app.statistics(MOCK_MODEL)
        stats.define("Basic Count", count="all")
        assert stats.get("Basic Count", {"user_id": 7}) == 0
        stats.filter_all_on("user_id", "default")
        assert stats.get("Basic Count", {"user_id": 7}) == 1

    def test_duckdb_cache_store(self):
        conn = duckdb.connect(":memory:")
        conn.execute(MOCK_DDL)
        container = Container()
        container.reset()
        container.init(conn=conn, store=CacheRepository(read_only=False, conn=conn))
        stats = container.statistics(MOCK_MODEL)
        stats.define("Cached Count", count="all", cache_for=60)
        assert stats.get("Cached Count") == 0
        conn.execute("INSERT INTO mock_models (id) VALUES (1)")
        assert stats.get("Cached Count") == 0
        assert stats.get_fresh("Cached Count") == 1
        container.reset()
        conn.close()

    def test_reset_closes_owned_connection(self, monkeypatch):
        monkeypatch.setattr(db, "DB_PATH", ":memory:")
        container = Container()
        container.reset()
        container.init(store=MemoryStore())
        assert db._local.conn is not None
        container.reset()
        assert db._local.conn is None

    def test_reset_keeps_injected_connection(self):
        conn = duckdb.connect(":memory:")
        container = Container()
        container.reset()
        container.init(conn=conn, store=MemoryStore())
        container.reset()
        assert conn.execute("SELECT 1").fetchone() == (1,)
        conn.close()
