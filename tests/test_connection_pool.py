"""
Tests for the SQLite connection pool.
"""

import sqlite3
from pathlib import Path

import pytest

from character_catalog.core.database import PoolConfig, SQLiteConnectionPool


@pytest.fixture
def pool(temp_dir: Path):
    pool = SQLiteConnectionPool(str(temp_dir / "pool.db"), PoolConfig(max_connections=2))
    with pool.transaction() as conn:
        conn.execute("CREATE TABLE items (id INTEGER PRIMARY KEY, label TEXT)")
    yield pool
    pool.close_all()


class TestSQLiteConnectionPool:
    """Test connection reuse and transactions."""

    def test_connections_are_reused(self, pool: SQLiteConnectionPool) -> None:
        with pool.get_connection() as first:
            pass
        with pool.get_connection() as second:
            assert second is first
        assert pool.get_stats()["total_connections"] == 1

    def test_stats_track_usage(self, pool: SQLiteConnectionPool) -> None:
        with pool.get_connection():
            with pool.get_connection():
                stats = pool.get_stats()
                assert stats["in_use_connections"] == 2
                assert stats["available_connections"] == 0
        assert pool.get_stats()["in_use_connections"] == 0

    def test_transaction_commits(self, pool: SQLiteConnectionPool) -> None:
        with pool.transaction() as conn:
            conn.execute("INSERT INTO items (label) VALUES (?)", ["sword"])
        with pool.get_connection() as conn:
            assert conn.execute("SELECT COUNT(*) FROM items").fetchone()[0] == 1

    def test_transaction_rolls_back_on_error(self, pool: SQLiteConnectionPool) -> None:
        with pytest.raises(sqlite3.IntegrityError):
            with pool.transaction() as conn:
                conn.execute("INSERT INTO items (id, label) VALUES (1, 'a')")
                conn.execute("INSERT INTO items (id, label) VALUES (1, 'b')")
        with pool.get_connection() as conn:
            assert conn.execute("SELECT COUNT(*) FROM items").fetchone()[0] == 0

    def test_exhausted_pool_times_out(self, temp_dir: Path) -> None:
        pool = SQLiteConnectionPool(
            str(temp_dir / "tiny.db"),
            PoolConfig(max_connections=1, connection_timeout=0.05),
        )
        try:
            with pool.get_connection():
                with pytest.raises(RuntimeError):
                    with pool.get_connection():
                        pass
        finally:
            pool.close_all()

    def test_casefold_function_registered(self, pool: SQLiteConnectionPool) -> None:
        """Every pooled connection can fold non-ASCII case in SQL."""
        with pool.transaction() as conn:
            row = conn.execute("SELECT casefold('ÉLISE'), casefold(NULL)").fetchone()
        assert tuple(row) == ("élise", None)
