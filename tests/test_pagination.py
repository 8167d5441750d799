"""
Tests for the pagination and sorting contract.
"""

import pytest

from character_catalog.characters import Page, PageRequest, SortDirection
from character_catalog.characters.pagination import resolve_sort_field
from character_catalog.core.exceptions import InvalidInputError, InvalidSortFieldError


class TestPageRequest:
    """Test PageRequest validation."""

    def test_defaults(self) -> None:
        """Sort defaults to ascending id."""
        request = PageRequest.of(0, 10)
        assert request.sort_field == "id"
        assert request.direction == SortDirection.ASC
        assert request.offset == 0

    def test_offset(self) -> None:
        """Offset is page times size."""
        assert PageRequest.of(3, 12).offset == 36

    @pytest.mark.parametrize("page", [-1, -10])
    def test_negative_page_rejected(self, page: int) -> None:
        """Negative page indexes are invalid input."""
        with pytest.raises(InvalidInputError) as exc_info:
            PageRequest.of(page, 10)
        assert exc_info.value.details["field"] == "page"

    @pytest.mark.parametrize("size", [0, -5])
    def test_non_positive_size_rejected(self, size: int) -> None:
        """Page sizes below one are invalid input."""
        with pytest.raises(InvalidInputError):
            PageRequest.of(0, size)

    def test_size_capped(self) -> None:
        """Sizes above the maximum are clamped."""
        assert PageRequest.of(0, 5000, max_size=100).size == 100
        assert PageRequest.of(0, 50, max_size=100).size == 50

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("desc", SortDirection.DESC),
            ("DESC", SortDirection.DESC),
            ("asc", SortDirection.ASC),
            ("sideways", SortDirection.ASC),
            (None, SortDirection.ASC),
        ],
    )
    def test_sort_direction_parsing(self, value, expected) -> None:
        """Anything other than desc sorts ascending."""
        assert SortDirection.parse(value) == expected


class TestResolveSortField:
    """Test sort field resolution."""

    @pytest.mark.parametrize(
        "sort_by,expected",
        [
            ("baseAttack", "base_attack"),
            ("base_attack", "base_attack"),
            ("createdAt", "created_at"),
            ("name", "name"),
            ("", "id"),
            (None, "id"),
        ],
    )
    def test_known_fields(self, sort_by, expected) -> None:
        """Both snake_case and camelCase names are accepted."""
        assert resolve_sort_field(sort_by) == expected

    def test_unknown_field(self) -> None:
        """Unknown fields raise InvalidSortFieldError, an InvalidInputError."""
        with pytest.raises(InvalidSortFieldError) as exc_info:
            resolve_sort_field("isDeleted")
        assert isinstance(exc_info.value, InvalidInputError)
        assert exc_info.value.error_code == "INVALID_SORT_FIELD"


class TestPage:
    """Test page metadata."""

    def test_metadata(self) -> None:
        page = Page.of(["a", "b"], PageRequest.of(1, 2), total=5)
        assert page.total_pages == 3
        assert not page.first
        assert not page.last

    def test_last_page(self) -> None:
        page = Page.of(["e"], PageRequest.of(2, 2), total=5)
        assert page.last

    def test_empty_result(self) -> None:
        page = Page.of([], PageRequest.of(0, 10), total=0)
        assert page.total_pages == 0
        assert page.first
        assert page.last
