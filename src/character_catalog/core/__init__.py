"""
Core infrastructure for the Character Catalog.

Configuration, exceptions, logging, metrics and database utilities.
"""

from .exceptions import (
    AssetNotFoundError,
    AssetTooLargeError,
    CatalogError,
    CharacterNotFoundError,
    ConfigurationError,
    InvalidInputError,
    InvalidSortFieldError,
    NotFoundError,
    StorageError,
)

__all__ = [
    "AssetNotFoundError",
    "AssetTooLargeError",
    "CatalogError",
    "CharacterNotFoundError",
    "ConfigurationError",
    "InvalidInputError",
    "InvalidSortFieldError",
    "NotFoundError",
    "StorageError",
]
