"""
Character enums and enumeration types.

Contains the character type (role in the game) and classification
(species/category) enums.
"""

from enum import Enum
from typing import Any, Optional, Type, TypeVar

E = TypeVar("E", bound="LenientEnum")


class LenientEnum(Enum):
    """Enum with case-insensitive, non-raising parsing."""

    @classmethod
    def parse(cls: Type[E], value: Any) -> Optional[E]:
        """Return the member matching ``value``, or None when nothing matches."""
        if value is None:
            return None
        if isinstance(value, cls):
            return value
        if isinstance(value, Enum):
            value = value.value
        if not isinstance(value, str):
            return None

        wanted = value.strip().lower()
        for member in cls:
            if member.value.lower() == wanted or member.name.lower() == wanted:
                return member
        return None

    @classmethod
    def _missing_(cls, value: object) -> Any:
        # Lets pydantic and Enum(...) accept "hero" / "human" as well.
        if isinstance(value, str):
            wanted = value.strip().lower()
            for member in cls:
                if member.value.lower() == wanted:
                    return member
        return None


class CharacterType(LenientEnum):
    """Role of a character in the game."""

    HERO = "HERO"
    VILLAIN = "VILLAIN"
    NPC = "NPC"


class CharacterClassification(LenientEnum):
    """Species or nature of a character."""

    HUMAN = "Human"
    ELF = "Elf"
    DWARF = "Dwarf"
    ORC = "Orc"
    GOBLIN = "Goblin"
    UNDEAD = "Undead"
    DRAGON = "Dragon"
    BEAST = "Beast"
    DEMON = "Demon"
    ANGEL = "Angel"
