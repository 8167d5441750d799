"""
Character persistence abstraction.

Defines the CharacterStore interface the catalog talks to and an in-memory
implementation used for tests and embedded use.
"""

import threading
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from ..core.exceptions import CharacterNotFoundError
from ..core.logging import get_logger
from .models import Character, apply_stat_defaults, utcnow
from .pagination import PageRequest
from .predicates import Predicate, visible

logger = get_logger(__name__)


class CharacterStore(ABC):
    """Durable storage and retrieval of character records.

    Visibility-aware lookups skip soft-deleted rows; ``exists_by_id`` and
    ``delete_by_id`` deliberately ignore the soft-delete flag.
    """

    @abstractmethod
    def find_all_visible(self) -> List[Character]:
        """All characters that are not soft-deleted, ordered by id."""

    @abstractmethod
    def find_visible_page(
        self, predicate: Predicate, request: PageRequest
    ) -> Tuple[List[Character], int]:
        """One page of characters matching ``predicate`` plus the total match count.

        Rows are ordered by ``request.sort_field`` in the requested direction,
        ties broken by ascending id.
        """

    @abstractmethod
    def find_visible_by_id(self, character_id: int) -> Optional[Character]:
        """The character with this id unless it is absent or soft-deleted."""

    @abstractmethod
    def save(self, character: Character) -> Character:
        """Insert (no id yet) or update a character and return the stored state."""

    @abstractmethod
    def exists_by_id(self, character_id: int) -> bool:
        """Whether any row has this id, soft-deleted or not."""

    @abstractmethod
    def delete_by_id(self, character_id: int) -> None:
        """Physically remove the row with this id."""

    def count_visible(self) -> int:
        """Number of characters that are not soft-deleted."""
        return len(self.find_all_visible())

    def close(self) -> None:
        """Release any resources held by the store."""


def sort_key(value: Any) -> Tuple[int, Any]:
    """Ordering key placing missing values first, like SQL NULLs."""
    if value is None:
        return (0, 0)
    if isinstance(value, Enum):
        return (1, value.value)
    return (1, value)


def sort_characters(
    characters: List[Character], request: PageRequest
) -> List[Character]:
    """Sort by the requested field, then by ascending id."""
    by_id = sorted(characters, key=lambda c: c.id or 0)
    if request.sort_field == "id":
        return list(reversed(by_id)) if request.descending else by_id
    # sorted() is stable with reverse=True, so ties keep their id order
    return sorted(
        by_id,
        key=lambda c: sort_key(getattr(c, request.sort_field)),
        reverse=request.descending,
    )


class InMemoryCharacterStore(CharacterStore):
    """Thread-safe dictionary-backed character store."""

    def __init__(self) -> None:
        self._rows: Dict[int, Character] = {}
        self._next_id = 1
        self._lock = threading.RLock()

    def find_all_visible(self) -> List[Character]:
        predicate = visible()
        with self._lock:
            rows = [c.copy() for c in self._rows.values() if predicate.matches(c)]
        return sorted(rows, key=lambda c: c.id or 0)

    def find_visible_page(
        self, predicate: Predicate, request: PageRequest
    ) -> Tuple[List[Character], int]:
        with self._lock:
            matching = [c.copy() for c in self._rows.values() if predicate.matches(c)]

        ordered = sort_characters(matching, request)
        page = ordered[request.offset : request.offset + request.size]
        return page, len(ordered)

    def find_visible_by_id(self, character_id: int) -> Optional[Character]:
        with self._lock:
            character = self._rows.get(character_id)
            if character is None or character.is_deleted:
                return None
            return character.copy()

    def save(self, character: Character) -> Character:
        with self._lock:
            now = utcnow()
            if character.id is None:
                stored = apply_stat_defaults(character.copy())
                stored.id = self._next_id
                stored.created_at = now
                stored.updated_at = now
                self._next_id += 1
                logger.debug("Inserted character row", character_id=stored.id)
            else:
                existing = self._rows.get(character.id)
                if existing is None:
                    raise CharacterNotFoundError(character.id, component="CharacterStore")
                stored = character.copy(created_at=existing.created_at, updated_at=now)

            self._rows[stored.id] = stored  # type: ignore[index]
            return stored.copy()

    def exists_by_id(self, character_id: int) -> bool:
        with self._lock:
            return character_id in self._rows

    def delete_by_id(self, character_id: int) -> None:
        with self._lock:
            self._rows.pop(character_id, None)
