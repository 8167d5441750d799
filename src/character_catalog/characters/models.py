"""
Character data model.

Contains the persisted Character entity, the base-stat defaults applied at
creation time and the FilterSpec value object used by searches.
"""

from dataclasses import dataclass, fields, replace
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, Optional, Tuple

from .enums import CharacterClassification, CharacterType

# Base stats, in display order
STAT_FIELDS: Tuple[str, ...] = (
    "base_health",
    "base_attack",
    "base_magic",
    "base_physical_defense",
    "base_magical_defense",
    "base_speed",
)

STAT_DEFAULTS: Dict[str, int] = {
    "base_health": 100,
    "base_attack": 10,
    "base_magic": 10,
    "base_physical_defense": 5,
    "base_magical_defense": 5,
    "base_speed": 10,
}

NAME_MAX_LENGTH = 50
SPRITE_PATH_MAX_LENGTH = 255


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


@dataclass
class Character:
    """A catalogued game character."""

    name: str
    type: CharacterType = CharacterType.NPC
    description: Optional[str] = None
    classification: Optional[CharacterClassification] = None
    sprite_path: Optional[str] = None

    # Base stats; None only until apply_stat_defaults runs on creation
    base_health: Optional[int] = None
    base_attack: Optional[int] = None
    base_magic: Optional[int] = None
    base_physical_defense: Optional[int] = None
    base_magical_defense: Optional[int] = None
    base_speed: Optional[int] = None

    is_deleted: bool = False
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def stats(self) -> Dict[str, Optional[int]]:
        """Get the six base stats keyed by field name."""
        return {stat: getattr(self, stat) for stat in STAT_FIELDS}

    def copy(self, **changes: Any) -> "Character":
        """Return a detached copy, optionally with some fields replaced."""
        return replace(self, **changes)


def apply_stat_defaults(character: Character) -> Character:
    """Fill every unset base stat with its documented default.

    Only called while creating a character; updates never reach this path.
    """
    for stat, default in STAT_DEFAULTS.items():
        if getattr(character, stat) is None:
            setattr(character, stat, default)
    return character


@dataclass(frozen=True)
class FilterSpec:
    """Optional search criteria; every bound is inclusive."""

    name: Optional[str] = None
    type: Any = None
    classification: Any = None

    min_base_health: Optional[int] = None
    max_base_health: Optional[int] = None
    min_base_attack: Optional[int] = None
    max_base_attack: Optional[int] = None
    min_base_magic: Optional[int] = None
    max_base_magic: Optional[int] = None
    min_base_physical_defense: Optional[int] = None
    max_base_physical_defense: Optional[int] = None
    min_base_magical_defense: Optional[int] = None
    max_base_magical_defense: Optional[int] = None
    min_base_speed: Optional[int] = None
    max_base_speed: Optional[int] = None

    def stat_bounds(self) -> Iterator[Tuple[str, Optional[int], Optional[int]]]:
        """Yield ``(stat, minimum, maximum)`` for each base stat."""
        for stat in STAT_FIELDS:
            yield stat, getattr(self, f"min_{stat}"), getattr(self, f"max_{stat}")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FilterSpec":
        """Build a filter from a mapping, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})
