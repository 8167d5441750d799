"""
Tests for custom exceptions.
"""

from character_catalog.core.exceptions import (
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


class TestExceptions:
    """Test custom exception classes."""

    def test_catalog_error(self) -> None:
        """Test CatalogError."""
        error = CatalogError("Catalog failed")
        assert str(error) == "[CharacterCatalog] Catalog failed"

    def test_catalog_error_with_component(self) -> None:
        """Test CatalogError with component."""
        error = CatalogError("Test error", component="TestComponent")
        assert str(error) == "[TestComponent] Test error"

    def test_catalog_error_with_error_code(self) -> None:
        """Test CatalogError with error code."""
        error = CatalogError("Test error", error_code="ERR001")
        assert str(error) == "[ERR001] [CharacterCatalog] Test error"

    def test_catalog_error_to_dict(self) -> None:
        """Test CatalogError to_dict method."""
        error = CatalogError(
            "Test error", error_code="ERR001", component="TestComponent"
        )
        error_dict = error.to_dict()

        assert error_dict["error_type"] == "CatalogError"
        assert error_dict["message"] == "Test error"
        assert error_dict["error_code"] == "ERR001"
        assert error_dict["component"] == "TestComponent"
        assert error_dict["details"] == {}

    def test_configuration_error(self) -> None:
        """Test ConfigurationError."""
        error = ConfigurationError("Config invalid")
        assert str(error) == "[CharacterCatalog] Config invalid"

    def test_invalid_input_error(self) -> None:
        """Test InvalidInputError records the offending field."""
        error = InvalidInputError("Bad page", field="page", value=-1)
        assert error.error_code == "INVALID_INPUT"
        assert error.details == {"field": "page", "value": "-1"}

    def test_storage_error(self) -> None:
        """Test StorageError."""
        error = StorageError("Disk full", component="FileSystemAssetStore")
        assert str(error) == "[STORAGE_ERROR] [FileSystemAssetStore] Disk full"

    def test_character_not_found_error(self) -> None:
        """Test CharacterNotFoundError."""
        error = CharacterNotFoundError(7)
        assert isinstance(error, NotFoundError)
        assert error.message == "Character with id 7 not found"
        assert error.character_id == 7
        assert error.details == {"character_id": 7}

    def test_asset_not_found_error(self) -> None:
        """Test AssetNotFoundError."""
        error = AssetNotFoundError("x.png")
        assert isinstance(error, NotFoundError)
        assert error.error_code == "ASSET_NOT_FOUND"

    def test_invalid_sort_field_error(self) -> None:
        """Test InvalidSortFieldError is an input error."""
        error = InvalidSortFieldError("power")
        assert isinstance(error, InvalidInputError)
        assert error.details["field"] == "sort_by"
        assert "power" in error.message

    def test_asset_too_large_error(self) -> None:
        """Test AssetTooLargeError."""
        error = AssetTooLargeError(2048, 1024)
        assert isinstance(error, InvalidInputError)
        assert error.error_code == "ASSET_TOO_LARGE"
        assert error.details == {"size": 2048, "limit": 1024}
