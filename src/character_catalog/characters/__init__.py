"""
Character catalog domain.

Data model, predicate builder, stores and the catalog service.
"""

from .catalog import CharacterCatalog, create_catalog, to_read_model
from .enums import CharacterClassification, CharacterType
from .models import STAT_DEFAULTS, STAT_FIELDS, Character, FilterSpec
from .pagination import Page, PageRequest, SortDirection
from .predicates import Predicate, build_character_predicate
from .schemas import CharacterCreate, CharacterPage, CharacterRead, CharacterUpdate
from .sqlite_store import SQLiteCharacterStore
from .store import CharacterStore, InMemoryCharacterStore

__all__ = [
    # Service
    "CharacterCatalog",
    "create_catalog",
    "to_read_model",
    # Enums
    "CharacterClassification",
    "CharacterType",
    # Model
    "Character",
    "FilterSpec",
    "STAT_DEFAULTS",
    "STAT_FIELDS",
    # Paging
    "Page",
    "PageRequest",
    "SortDirection",
    # Predicates
    "Predicate",
    "build_character_predicate",
    # Schemas
    "CharacterCreate",
    "CharacterPage",
    "CharacterRead",
    "CharacterUpdate",
    # Stores
    "CharacterStore",
    "InMemoryCharacterStore",
    "SQLiteCharacterStore",
]
