"""
Database utilities for the Character Catalog.
"""

from .connection_pool import PoolConfig, SQLiteConnectionPool

__all__ = ["PoolConfig", "SQLiteConnectionPool"]
