"""
Request-scoped dependencies resolved from application state.
"""

from fastapi import Request

from ..assets import AssetStore
from ..characters import CharacterCatalog
from ..core.config import Config


def get_config(request: Request) -> Config:
    """Get the configuration the application was built with."""
    return request.app.state.config  # type: ignore[no-any-return]


def get_catalog(request: Request) -> CharacterCatalog:
    """Get the character catalog instance."""
    return request.app.state.catalog  # type: ignore[no-any-return]


def get_asset_store(request: Request) -> AssetStore:
    """Get the asset store backing the catalog."""
    return request.app.state.catalog.asset_store  # type: ignore[no-any-return]
