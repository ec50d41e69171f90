"""
Tests for the query executor.

Tests cover:
- Positional parameter binding
- Failure mapping to StoreError / IntegrityViolation
- Connection release on success and error paths
"""

import pytest
from sqlalchemy import create_engine, text

from cardex.core.errors import IntegrityViolation, StoreError
from cardex.db import QueryExecutor, bind_positional, create_db_and_tables, placeholder


@pytest.fixture
def pooled_executor(tmp_path):
    """Executor over a file-backed SQLite engine with a real (queue) pool."""
    engine = create_engine(f"sqlite:///{tmp_path / 'cardex.db'}")
    create_db_and_tables(engine)
    yield QueryExecutor(engine)
    engine.dispose()


class TestBinding:
    def test_placeholder_names(self):
        assert placeholder(0) == ":p0"
        assert placeholder(11) == ":p11"

    def test_bind_positional(self):
        assert bind_positional(["a", 2, None]) == {"p0": "a", "p1": 2, "p2": None}


class TestQueryExecutor:
    """Tests for QueryExecutor against a pooled engine."""

    def test_fetch_all_returns_mappings(self, pooled_executor):
        pooled_executor.execute("INSERT INTO card (name, type) VALUES (:p0, :p1)", ["Kuriboh", "Effect Monster"])

        rows = pooled_executor.fetch_all("SELECT name, type FROM card WHERE name = :p0", ["Kuriboh"])

        assert rows == [{"name": "Kuriboh", "type": "Effect Monster"}]

    def test_execute_returns_rowcount(self, pooled_executor):
        pooled_executor.execute("INSERT INTO card (name) VALUES (:p0)", ["Kuriboh"])
        pooled_executor.execute("INSERT INTO card (name) VALUES (:p0)", ["Winged Kuriboh"])

        assert pooled_executor.execute("DELETE FROM card WHERE name LIKE :p0", ["%Kuriboh"]) == 2

    def test_bad_statement_raises_store_error(self, pooled_executor):
        with pytest.raises(StoreError):
            pooled_executor.fetch_all("SELECT * FROM no_such_table")

    def test_unique_violation_raises_integrity_violation(self, pooled_executor):
        sql = "INSERT INTO app_user (username, hashed_password, created_at) VALUES (:p0, :p1, CURRENT_TIMESTAMP)"
        pooled_executor.execute(sql, ["kaiba", "x"])

        with pytest.raises(IntegrityViolation):
            pooled_executor.execute(sql, ["kaiba", "y"])

    def test_failed_write_is_rolled_back(self, pooled_executor):
        with pytest.raises(StoreError):
            with pooled_executor.connection(write=True) as conn:
                conn.execute(text("INSERT INTO card (name) VALUES ('Kuriboh')"))
                conn.execute(text("INSERT INTO missing_table VALUES (1)"))

        assert pooled_executor.fetch_all("SELECT * FROM card") == []

    def test_connection_released_after_success(self, pooled_executor):
        pooled_executor.fetch_all("SELECT 1")

        assert pooled_executor.engine.pool.checkedout() == 0

    def test_connection_released_after_error(self, pooled_executor):
        with pytest.raises(StoreError):
            pooled_executor.fetch_all("SELECT * FROM no_such_table")
        with pytest.raises(StoreError):
            pooled_executor.execute("UPDATE no_such_table SET x = 1")

        assert pooled_executor.engine.pool.checkedout() == 0
