"""
Pagination and sorting contract for character listings.

Resolves caller-supplied sort fields against the real character attributes
(failing fast on unknown ones) and carries page results back to callers.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Generic, List, Optional, TypeVar

from ..core.exceptions import InvalidInputError, InvalidSortFieldError

T = TypeVar("T")

DEFAULT_SORT_FIELD = "id"
DEFAULT_SORT_DIRECTION = "asc"

# Every sortable attribute, keyed by the names callers may use for it
SORTABLE_FIELDS: Dict[str, str] = {
    "id": "id",
    "name": "name",
    "description": "description",
    "type": "type",
    "classification": "classification",
    "sprite_path": "sprite_path",
    "spritePath": "sprite_path",
    "base_health": "base_health",
    "baseHealth": "base_health",
    "base_attack": "base_attack",
    "baseAttack": "base_attack",
    "base_magic": "base_magic",
    "baseMagic": "base_magic",
    "base_physical_defense": "base_physical_defense",
    "basePhysicalDefense": "base_physical_defense",
    "base_magical_defense": "base_magical_defense",
    "baseMagicalDefense": "base_magical_defense",
    "base_speed": "base_speed",
    "baseSpeed": "base_speed",
    "created_at": "created_at",
    "createdAt": "created_at",
    "updated_at": "updated_at",
    "updatedAt": "updated_at",
}


class SortDirection(Enum):
    """Sort direction; anything unrecognised sorts ascending."""

    ASC = "asc"
    DESC = "desc"

    @classmethod
    def parse(cls, value: Optional[str]) -> "SortDirection":
        if value is not None and value.strip().lower() == "desc":
            return cls.DESC
        return cls.ASC


def resolve_sort_field(sort_by: Optional[str]) -> str:
    """Map a caller-facing sort field to the character attribute name."""
    if sort_by is None or not sort_by.strip():
        return DEFAULT_SORT_FIELD
    try:
        return SORTABLE_FIELDS[sort_by.strip()]
    except KeyError:
        raise InvalidSortFieldError(sort_by) from None


@dataclass(frozen=True)
class PageRequest:
    """Offset pagination request with a single sort key."""

    page: int = 0
    size: int = 10
    sort_field: str = DEFAULT_SORT_FIELD
    direction: SortDirection = SortDirection.ASC

    @property
    def offset(self) -> int:
        return self.page * self.size

    @property
    def descending(self) -> bool:
        return self.direction is SortDirection.DESC

    @classmethod
    def of(
        cls,
        page: int,
        size: int,
        sort_by: Optional[str] = DEFAULT_SORT_FIELD,
        sort_direction: Optional[str] = DEFAULT_SORT_DIRECTION,
        max_size: Optional[int] = None,
    ) -> "PageRequest":
        """Validate raw paging parameters and build a request.

        Raises:
            InvalidInputError: page is negative or size is not positive
            InvalidSortFieldError: sort_by names no character attribute
        """
        if page < 0:
            raise InvalidInputError(
                "Page index must not be less than zero", field="page", value=page
            )
        if size < 1:
            raise InvalidInputError(
                "Page size must not be less than one", field="size", value=size
            )
        if max_size is not None:
            size = min(size, max_size)

        return cls(
            page=page,
            size=size,
            sort_field=resolve_sort_field(sort_by),
            direction=SortDirection.parse(sort_direction),
        )


@dataclass
class Page(Generic[T]):
    """A page of results plus the total number of matches."""

    items: List[T] = field(default_factory=list)
    page: int = 0
    size: int = 10
    total_elements: int = 0

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_elements / self.size) if self.size else 0

    @property
    def first(self) -> bool:
        return self.page == 0

    @property
    def last(self) -> bool:
        return self.page + 1 >= self.total_pages

    @classmethod
    def of(cls, items: List[T], request: PageRequest, total: int) -> "Page[T]":
        return cls(
            items=list(items),
            page=request.page,
            size=request.size,
            total_elements=total,
        )
