"""
SQLite-backed character store.

Persists characters in a single ``character_classes`` table through the
pooled SQLite connections. Predicates are compiled to parameterised WHERE
clauses; sort columns come from a fixed whitelist.
"""

import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Generator, List, Optional, Tuple, Union

from ..core.database import PoolConfig, SQLiteConnectionPool
from ..core.exceptions import CharacterNotFoundError, StorageError
from ..core.logging import get_logger
from .enums import CharacterClassification, CharacterType
from .models import Character, apply_stat_defaults, utcnow
from .pagination import PageRequest
from .predicates import CHARACTER_COLUMNS, Predicate, to_db_value, visible
from .store import CharacterStore

logger = get_logger(__name__)

TABLE_NAME = "character_classes"

SCHEMA = f"""
CREATE TABLE IF NOT EXISTS {TABLE_NAME} (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name VARCHAR(50) NOT NULL,
    description TEXT,
    type VARCHAR(50) NOT NULL,
    classification VARCHAR(50),
    sprite_path VARCHAR(255),
    base_health INTEGER NOT NULL DEFAULT 100,
    base_attack INTEGER NOT NULL DEFAULT 10,
    base_magic INTEGER NOT NULL DEFAULT 10,
    base_physical_defense INTEGER NOT NULL DEFAULT 5,
    base_magical_defense INTEGER NOT NULL DEFAULT 5,
    base_speed INTEGER NOT NULL DEFAULT 10,
    is_deleted INTEGER NOT NULL DEFAULT 0,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
)
"""

# Columns written on insert/update, in statement order
_WRITABLE_COLUMNS = (
    "name",
    "description",
    "type",
    "classification",
    "sprite_path",
    "base_health",
    "base_attack",
    "base_magic",
    "base_physical_defense",
    "base_magical_defense",
    "base_speed",
    "is_deleted",
)

# Fixed-width so lexical order equals chronological order
_TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S.%f+00:00"


def _format_timestamp(value: datetime) -> str:
    return value.astimezone(timezone.utc).strftime(_TIMESTAMP_FORMAT)


def _parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None


def _row_to_character(row: sqlite3.Row) -> Character:
    return Character(
        id=row["id"],
        name=row["name"],
        description=row["description"],
        type=CharacterType(row["type"]),
        classification=CharacterClassification.parse(row["classification"]),
        sprite_path=row["sprite_path"],
        base_health=row["base_health"],
        base_attack=row["base_attack"],
        base_magic=row["base_magic"],
        base_physical_defense=row["base_physical_defense"],
        base_magical_defense=row["base_magical_defense"],
        base_speed=row["base_speed"],
        is_deleted=bool(row["is_deleted"]),
        created_at=_parse_timestamp(row["created_at"]),
        updated_at=_parse_timestamp(row["updated_at"]),
    )


def _order_by(request: PageRequest) -> str:
    if request.sort_field not in CHARACTER_COLUMNS:
        raise ValueError(f"Unknown character column: {request.sort_field}")

    direction = "DESC" if request.descending else "ASC"
    if request.sort_field == "id":
        return f"ORDER BY id {direction}"
    return f"ORDER BY {request.sort_field} {direction}, id ASC"


class SQLiteCharacterStore(CharacterStore):
    """Character store persisted in a SQLite database file."""

    def __init__(
        self,
        db_path: Union[str, Path],
        pool_config: Optional[PoolConfig] = None,
    ):
        try:
            self.pool = SQLiteConnectionPool(str(db_path), pool_config)
            with self.pool.transaction() as conn:
                conn.execute(SCHEMA)
        except sqlite3.Error as e:
            raise StorageError(
                f"Could not initialise character database at {db_path}: {e}",
                component="SQLiteCharacterStore",
            ) from e
        logger.info("SQLite character store ready", db_path=str(db_path))

    @contextmanager
    def _transaction(self, operation: str) -> Generator[sqlite3.Connection, None, None]:
        """Run a unit of work, translating driver failures into StorageError."""
        try:
            with self.pool.transaction() as conn:
                yield conn
        except (sqlite3.Error, RuntimeError) as e:
            logger.error(
                "Character store operation failed", operation=operation, error=str(e)
            )
            raise StorageError(
                f"Character store failed during {operation}: {e}",
                component="SQLiteCharacterStore",
            ) from e

    def find_all_visible(self) -> List[Character]:
        where, params = visible().to_sql()
        with self._transaction("find_all_visible") as conn:
            rows = conn.execute(
                f"SELECT * FROM {TABLE_NAME} WHERE {where} ORDER BY id ASC", params
            ).fetchall()
        return [_row_to_character(row) for row in rows]

    def find_visible_page(
        self, predicate: Predicate, request: PageRequest
    ) -> Tuple[List[Character], int]:
        where, params = predicate.to_sql()
        order_by = _order_by(request)

        with self._transaction("find_visible_page") as conn:
            total = conn.execute(
                f"SELECT COUNT(*) FROM {TABLE_NAME} WHERE {where}", params
            ).fetchone()[0]
            rows = conn.execute(
                f"SELECT * FROM {TABLE_NAME} WHERE {where} {order_by} LIMIT ? OFFSET ?",
                [*params, request.size, request.offset],
            ).fetchall()

        return [_row_to_character(row) for row in rows], int(total)

    def find_visible_by_id(self, character_id: int) -> Optional[Character]:
        with self._transaction("find_visible_by_id") as conn:
            row = conn.execute(
                f"SELECT * FROM {TABLE_NAME} WHERE id = ? AND is_deleted = 0",
                [character_id],
            ).fetchone()
        return _row_to_character(row) if row else None

    def save(self, character: Character) -> Character:
        now = utcnow()
        if character.id is None:
            return self._insert(apply_stat_defaults(character.copy()), now)
        return self._update(character.copy(), now)

    def _values(self, character: Character) -> Dict[str, Any]:
        return {
            column: to_db_value(getattr(character, column))
            for column in _WRITABLE_COLUMNS
        }

    def _insert(self, character: Character, now: datetime) -> Character:
        values = self._values(character)
        columns = [*values.keys(), "created_at", "updated_at"]
        placeholders = ", ".join("?" for _ in columns)
        params = [*values.values(), _format_timestamp(now), _format_timestamp(now)]

        with self._transaction("insert") as conn:
            cursor = conn.execute(
                f"INSERT INTO {TABLE_NAME} ({', '.join(columns)}) VALUES ({placeholders})",
                params,
            )
            character.id = cursor.lastrowid

        character.created_at = now
        character.updated_at = now
        logger.debug("Inserted character row", character_id=character.id)
        return character

    def _update(self, character: Character, now: datetime) -> Character:
        values = self._values(character)
        assignments = ", ".join(f"{column} = ?" for column in values)

        with self._transaction("update") as conn:
            cursor = conn.execute(
                f"UPDATE {TABLE_NAME} SET {assignments}, updated_at = ? WHERE id = ?",
                [*values.values(), _format_timestamp(now), character.id],
            )
            if cursor.rowcount == 0:
                raise CharacterNotFoundError(
                    character.id, component="SQLiteCharacterStore"
                )
            created_at = conn.execute(
                f"SELECT created_at FROM {TABLE_NAME} WHERE id = ?", [character.id]
            ).fetchone()[0]

        character.created_at = _parse_timestamp(created_at)
        character.updated_at = now
        return character

    def exists_by_id(self, character_id: int) -> bool:
        with self._transaction("exists_by_id") as conn:
            row = conn.execute(
                f"SELECT 1 FROM {TABLE_NAME} WHERE id = ?", [character_id]
            ).fetchone()
        return row is not None

    def delete_by_id(self, character_id: int) -> None:
        with self._transaction("delete_by_id") as conn:
            conn.execute(f"DELETE FROM {TABLE_NAME} WHERE id = ?", [character_id])

    def count_visible(self) -> int:
        where, params = visible().to_sql()
        with self._transaction("count_visible") as conn:
            total = conn.execute(
                f"SELECT COUNT(*) FROM {TABLE_NAME} WHERE {where}", params
            ).fetchone()[0]
        return int(total)

    def close(self) -> None:
        self.pool.close_all()
