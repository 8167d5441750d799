"""
Character management endpoints.

Thin HTTP adapter over CharacterCatalog: parses requests, delegates and
returns the read projections. Error translation lives in error_handlers.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, File, Response, UploadFile
from pydantic import BaseModel
from starlette.concurrency import run_in_threadpool

from ..characters import (
    CharacterCatalog,
    CharacterCreate,
    CharacterPage,
    CharacterRead,
    CharacterUpdate,
    FilterSpec,
)
from ..core.config import Config
from ..core.logging import set_request_context
from .dependencies import get_catalog, get_config

character_router = APIRouter(prefix="/api/v1/characters", tags=["characters"])


class FilterQuery(BaseModel):
    """Search criteria accepted as query parameters."""

    name: Optional[str] = None
    type: Optional[str] = None
    classification: Optional[str] = None

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

    def to_filter_spec(self) -> FilterSpec:
        return FilterSpec.from_dict(self.model_dump())


@character_router.get("", response_model=List[CharacterRead])
def list_characters(
    catalog: CharacterCatalog = Depends(get_catalog),
) -> List[CharacterRead]:
    """List every visible character."""
    return catalog.get_all()


@character_router.get("/paginated", response_model=CharacterPage)
def list_characters_paginated(
    page: int = 0,
    size: Optional[int] = None,
    sort_by: str = "id",
    sort_direction: str = "asc",
    catalog: CharacterCatalog = Depends(get_catalog),
    config: Config = Depends(get_config),
) -> CharacterPage:
    """List one page of visible characters."""
    result = catalog.get_page(
        page=page,
        size=size if size is not None else config.api.default_page_size,
        sort_by=sort_by,
        sort_direction=sort_direction,
    )
    return CharacterPage.model_validate(result)


@character_router.get("/search", response_model=CharacterPage)
def search_characters(
    search_term: Optional[str] = None,
    page: int = 0,
    size: Optional[int] = None,
    sort_by: str = "id",
    sort_direction: str = "asc",
    filters: FilterQuery = Depends(),
    catalog: CharacterCatalog = Depends(get_catalog),
    config: Config = Depends(get_config),
) -> CharacterPage:
    """Search visible characters by name and attribute criteria."""
    result = catalog.search(
        search_term=search_term,
        filter_spec=filters.to_filter_spec(),
        page=page,
        size=size if size is not None else config.api.search_page_size,
        sort_by=sort_by,
        sort_direction=sort_direction,
    )
    return CharacterPage.model_validate(result)


@character_router.get("/{character_id}", response_model=CharacterRead)
def get_character(
    character_id: int, catalog: CharacterCatalog = Depends(get_catalog)
) -> CharacterRead:
    """Get a visible character by id."""
    set_request_context(character_id=str(character_id))
    return catalog.get_by_id(character_id)


@character_router.post("", response_model=CharacterRead, status_code=201)
def create_character(
    request: CharacterCreate, catalog: CharacterCatalog = Depends(get_catalog)
) -> CharacterRead:
    """Create a character (type defaults to NPC)."""
    return catalog.create(request)


@character_router.post("/hero", response_model=CharacterRead, status_code=201)
def create_hero(
    request: CharacterCreate, catalog: CharacterCatalog = Depends(get_catalog)
) -> CharacterRead:
    """Create a character whose type is always HERO."""
    return catalog.create_hero(request)


@character_router.post("/villain", response_model=CharacterRead, status_code=201)
def create_villain(
    request: CharacterCreate, catalog: CharacterCatalog = Depends(get_catalog)
) -> CharacterRead:
    """Create a character whose type is always VILLAIN."""
    return catalog.create_villain(request)


@character_router.put("/{character_id}", response_model=CharacterRead)
def update_character(
    character_id: int,
    request: CharacterUpdate,
    catalog: CharacterCatalog = Depends(get_catalog),
) -> CharacterRead:
    """Apply a partial update; omitted fields keep their value."""
    set_request_context(character_id=str(character_id))
    return catalog.update(character_id, request)


@character_router.post("/{character_id}/sprite", response_model=CharacterRead)
async def upload_sprite(
    character_id: int,
    file: UploadFile = File(...),
    catalog: CharacterCatalog = Depends(get_catalog),
) -> CharacterRead:
    """Replace the character's sprite with the uploaded file."""
    set_request_context(character_id=str(character_id))
    data = await file.read()
    return await run_in_threadpool(
        catalog.update_sprite, character_id, data, file.filename
    )


@character_router.delete("/{character_id}", status_code=204, response_class=Response)
def delete_character(
    character_id: int, catalog: CharacterCatalog = Depends(get_catalog)
) -> Response:
    """Soft-delete a character."""
    set_request_context(character_id=str(character_id))
    catalog.soft_delete(character_id)
    return Response(status_code=204)


@character_router.delete(
    "/{character_id}/permanent", status_code=204, response_class=Response
)
def delete_character_permanently(
    character_id: int, catalog: CharacterCatalog = Depends(get_catalog)
) -> Response:
    """Remove a character for good, even if already soft-deleted."""
    set_request_context(character_id=str(character_id))
    catalog.hard_delete(character_id)
    return Response(status_code=204)
