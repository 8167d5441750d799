"""
Database connection pool for SQLite operations.

Provides connection pooling and transaction management for the
SQLite-backed character store.
"""

import logging
import sqlite3
import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Generator, List, Optional

from ..config.runtime import DatabaseConfig

logger = logging.getLogger(__name__)


def casefold(value: Optional[str]) -> Optional[str]:
    """Unicode-aware case folding, registered as the SQL function CASEFOLD."""
    return value.casefold() if value is not None else None


@dataclass
class PoolConfig:
    """Configuration for database connection pool."""

    max_connections: int = 5
    connection_timeout: float = 30.0
    idle_timeout: float = 300.0  # 5 minutes
    enable_wal_mode: bool = True
    enable_foreign_keys: bool = True

    @classmethod
    def from_database_config(cls, config: DatabaseConfig) -> "PoolConfig":
        """Build pool settings from the database section of the app config."""
        return cls(
            max_connections=config.max_connections,
            connection_timeout=config.connection_timeout,
            enable_wal_mode=config.enable_wal_mode,
        )


class SQLiteConnectionPool:
    """Thread-safe SQLite connection pool."""

    def __init__(self, db_path: str, config: Optional[PoolConfig] = None):
        """Initialize connection pool."""
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        self.config = config or PoolConfig()
        self._connections: List[sqlite3.Connection] = []
        self._in_use: set = set()
        self._lock = threading.RLock()
        self._last_used: Dict[sqlite3.Connection, float] = {}

        self._init_database()

    def _init_database(self) -> None:
        """Initialize database with optimized settings."""
        with self.transaction() as conn:
            if self.config.enable_wal_mode:
                conn.execute("PRAGMA journal_mode=WAL")

            conn.execute("PRAGMA synchronous=NORMAL")
            conn.execute("PRAGMA temp_store=MEMORY")

    def _create_connection(self) -> sqlite3.Connection:
        """Create a new database connection."""
        conn = sqlite3.connect(
            str(self.db_path),
            timeout=self.config.connection_timeout,
            check_same_thread=False,
        )

        # Set row factory for easier data access
        conn.row_factory = sqlite3.Row

        # SQLite's LOWER() only folds ASCII
        conn.create_function("casefold", 1, casefold, deterministic=True)

        if self.config.enable_foreign_keys:
            conn.execute("PRAGMA foreign_keys=ON")

        return conn

    def _get_connection(self) -> sqlite3.Connection:
        """Get a connection from the pool."""
        with self._lock:
            self._cleanup_idle_connections()

            for conn in self._connections:
                if conn not in self._in_use:
                    self._in_use.add(conn)
                    self._last_used[conn] = time.time()
                    return conn

            if len(self._connections) < self.config.max_connections:
                conn = self._create_connection()
                self._connections.append(conn)
                self._in_use.add(conn)
                self._last_used[conn] = time.time()
                return conn

        # Wait for a connection to become available
        start_time = time.time()
        while time.time() - start_time < self.config.connection_timeout:
            with self._lock:
                for conn in self._connections:
                    if conn not in self._in_use:
                        self._in_use.add(conn)
                        self._last_used[conn] = time.time()
                        return conn

            time.sleep(0.01)

        raise RuntimeError(
            f"Could not get connection within {self.config.connection_timeout}s"
        )

    def _return_connection(self, conn: sqlite3.Connection) -> None:
        """Return a connection to the pool."""
        with self._lock:
            if conn in self._in_use:
                self._in_use.remove(conn)
                self._last_used[conn] = time.time()

    def _cleanup_idle_connections(self) -> None:
        """Clean up idle connections."""
        current_time = time.time()
        to_remove = [
            conn
            for conn in self._connections
            if conn not in self._in_use
            and current_time - self._last_used.get(conn, 0) > self.config.idle_timeout
        ]

        for conn in to_remove:
            try:
                conn.close()
            except sqlite3.Error as e:
                logger.warning(f"Error closing idle connection: {e}")
            self._connections.remove(conn)
            self._last_used.pop(conn, None)

    @contextmanager
    def get_connection(self) -> Generator[sqlite3.Connection, None, None]:
        """Get a connection from the pool with automatic cleanup."""
        conn = None
        try:
            conn = self._get_connection()
            yield conn
        finally:
            if conn:
                self._return_connection(conn)

    @contextmanager
    def transaction(self) -> Generator[sqlite3.Connection, None, None]:
        """Execute operations within a transaction."""
        with self.get_connection() as conn:
            try:
                yield conn
                conn.commit()
            except Exception:
                conn.rollback()
                raise

    def close_all(self) -> None:
        """Close all connections in the pool."""
        with self._lock:
            for conn in self._connections:
                try:
                    conn.close()
                except sqlite3.Error as e:
                    logger.warning(f"Error closing connection: {e}")

            self._connections.clear()
            self._in_use.clear()
            self._last_used.clear()

    def get_stats(self) -> Dict[str, Any]:
        """Get connection pool statistics."""
        with self._lock:
            return {
                "total_connections": len(self._connections),
                "in_use_connections": len(self._in_use),
                "available_connections": len(self._connections) - len(self._in_use),
                "max_connections": self.config.max_connections,
            }

    def __del__(self) -> None:
        """Cleanup on destruction."""
        self.close_all()
