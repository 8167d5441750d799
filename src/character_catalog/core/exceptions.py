"""
Exception hierarchy for the Character Catalog.

Provides structured error handling with specific error types for the
catalog, its stores and the asset storage backend. The transport layer maps
each family to a status code; nothing here knows about HTTP.
"""

from typing import Any, Dict, Optional


class CatalogError(Exception):
    """Base exception for all catalog-related errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        component: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.component = component

    def __str__(self) -> str:
        """String representation of the error."""
        base_msg = f"[{self.component or 'CharacterCatalog'}] {self.message}"
        if self.error_code:
            base_msg = f"[{self.error_code}] {base_msg}"
        return base_msg

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code,
            "component": self.component,
            "details": self.details,
        }


class ConfigurationError(CatalogError):
    """Exception raised when configuration is invalid or missing."""

    pass


class NotFoundError(CatalogError):
    """Exception raised when a requested resource does not exist."""

    pass


class InvalidInputError(CatalogError):
    """Exception raised when caller-supplied input is rejected."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Any = None,
        **kwargs: Any,
    ) -> None:
        kwargs.setdefault("error_code", "INVALID_INPUT")
        details = kwargs.pop("details", None) or {}
        if field is not None:
            details["field"] = field
            details["value"] = str(value)
        super().__init__(message, details=details, **kwargs)


class StorageError(CatalogError):
    """Exception raised when the character store or asset store fails."""

    def __init__(self, message: str, **kwargs: Any) -> None:
        kwargs.setdefault("error_code", "STORAGE_ERROR")
        super().__init__(message, **kwargs)


# Specific error types for common failure modes


class CharacterNotFoundError(NotFoundError):
    """Exception raised when a character is absent or soft-deleted."""

    def __init__(self, character_id: Any, **kwargs: Any) -> None:
        super().__init__(
            f"Character with id {character_id} not found",
            error_code="CHARACTER_NOT_FOUND",
            details={"character_id": character_id},
            **kwargs,
        )
        self.character_id = character_id


class AssetNotFoundError(NotFoundError):
    """Exception raised when a stored asset cannot be found."""

    def __init__(self, asset_name: str, **kwargs: Any) -> None:
        super().__init__(
            f"File not found {asset_name}",
            error_code="ASSET_NOT_FOUND",
            details={"asset_name": asset_name},
            **kwargs,
        )


class InvalidSortFieldError(InvalidInputError):
    """Exception raised when a sort field does not name a character attribute."""

    def __init__(self, sort_field: str, **kwargs: Any) -> None:
        super().__init__(
            f"Cannot sort by unknown field '{sort_field}'",
            field="sort_by",
            value=sort_field,
            error_code="INVALID_SORT_FIELD",
            **kwargs,
        )


class AssetTooLargeError(InvalidInputError):
    """Exception raised when an uploaded asset exceeds the size limit."""

    def __init__(self, size: int, limit: int, **kwargs: Any) -> None:
        super().__init__(
            f"Uploaded file of {size} bytes exceeds the maximum of {limit} bytes",
            error_code="ASSET_TOO_LARGE",
            details={"size": size, "limit": limit},
            **kwargs,
        )
