"""
Request and read models for characters.

Pydantic models describing what callers send to the catalog (create and
update payloads) and the projection they get back.
"""

from datetime import datetime
from typing import Any, Dict, FrozenSet, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .enums import CharacterClassification, CharacterType
from .models import NAME_MAX_LENGTH, SPRITE_PATH_MAX_LENGTH

# Fields an update request may carry but which are never copied onto the record
IMMUTABLE_FIELDS: FrozenSet[str] = frozenset(
    {"id", "is_deleted", "created_at", "updated_at"}
)


class CharacterCreate(BaseModel):
    """Payload for creating a character."""

    model_config = ConfigDict(extra="ignore")

    name: str = Field(
        ..., min_length=1, max_length=NAME_MAX_LENGTH, description="Display name"
    )
    description: Optional[str] = Field(None, description="Free-form description")
    type: Optional[CharacterType] = Field(
        None, description="HERO, VILLAIN or NPC; NPC when omitted"
    )
    classification: Optional[CharacterClassification] = Field(
        None, description="Species or nature of the character"
    )
    sprite_path: Optional[str] = Field(None, max_length=SPRITE_PATH_MAX_LENGTH)

    base_health: Optional[int] = Field(None, description="Defaults to 100")
    base_attack: Optional[int] = Field(None, description="Defaults to 10")
    base_magic: Optional[int] = Field(None, description="Defaults to 10")
    base_physical_defense: Optional[int] = Field(None, description="Defaults to 5")
    base_magical_defense: Optional[int] = Field(None, description="Defaults to 5")
    base_speed: Optional[int] = Field(None, description="Defaults to 10")


class CharacterUpdate(BaseModel):
    """Partial update payload.

    Only the fields actually present in the payload are applied, so an
    explicit ``"description": null`` clears the description while an omitted
    description leaves it untouched. ``id``, ``is_deleted`` and the
    timestamps are accepted but never applied.
    """

    model_config = ConfigDict(extra="ignore")

    id: Optional[int] = None
    name: Optional[str] = Field(None, min_length=1, max_length=NAME_MAX_LENGTH)
    description: Optional[str] = None
    type: Optional[CharacterType] = None
    classification: Optional[CharacterClassification] = None
    sprite_path: Optional[str] = Field(None, max_length=SPRITE_PATH_MAX_LENGTH)

    base_health: Optional[int] = None
    base_attack: Optional[int] = None
    base_magic: Optional[int] = None
    base_physical_defense: Optional[int] = None
    base_magical_defense: Optional[int] = None
    base_speed: Optional[int] = None

    is_deleted: Optional[bool] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def changes(self) -> Dict[str, Any]:
        """Fields explicitly present in the payload, minus the immutable ones."""
        return {
            name: getattr(self, name)
            for name in self.model_fields_set
            if name not in IMMUTABLE_FIELDS
        }


class CharacterRead(BaseModel):
    """Externally visible shape of a character."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: Optional[str] = None
    type: CharacterType
    classification: Optional[CharacterClassification] = None
    sprite_path: Optional[str] = None

    base_health: int
    base_attack: int
    base_magic: int
    base_physical_defense: int
    base_magical_defense: int
    base_speed: int

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CharacterPage(BaseModel):
    """One page of characters plus paging metadata."""

    model_config = ConfigDict(from_attributes=True)

    items: List[CharacterRead]
    page: int
    size: int
    total_elements: int
    total_pages: int
    first: bool
    last: bool
