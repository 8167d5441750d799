"""
FastAPI application factory for the Character Catalog.

Wires configuration, the catalog service, middleware, exception handlers
and routers into one application.
"""

from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from .. import __version__
from ..assets import FileSystemAssetStore
from ..characters import CharacterCatalog, create_catalog
from ..core.config import Config
from ..core.logging import configure_logging, get_logger
from ..core.metrics import get_metrics_collector
from .character_api import character_router
from .error_handlers import register_error_handlers
from .files_api import files_router
from .health_api import health_router
from .logging_middleware import LoggingMiddleware

logger = get_logger(__name__)


def create_app(
    config: Optional[Config] = None, catalog: Optional[CharacterCatalog] = None
) -> FastAPI:
    """Build the HTTP application.

    Args:
        config: application configuration; loaded from file/env when omitted
        catalog: catalog to serve; built from ``config`` when omitted
    """
    config = config or Config.load()
    configure_logging(config.monitoring.log_level, config.monitoring.json_logs)
    catalog = catalog or create_catalog(config)

    app = FastAPI(
        title="Character Catalog API",
        version=__version__,
        description="Create, search, update and delete game characters",
        debug=config.debug,
    )
    app.state.config = config
    app.state.catalog = catalog

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.api.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    metrics = (
        get_metrics_collector() if config.monitoring.metrics_enabled else None
    )
    app.add_middleware(LoggingMiddleware, metrics=metrics)

    register_error_handlers(app)

    app.include_router(character_router)
    app.include_router(files_router)
    app.include_router(health_router)

    # Sprite URLs point here, so only mount when assets live on disk
    if isinstance(catalog.asset_store, FileSystemAssetStore):
        app.mount(
            config.storage.url_prefix.rstrip("/"),
            StaticFiles(directory=str(catalog.asset_store.upload_dir)),
            name="uploads",
        )

    @app.on_event("shutdown")
    def close_catalog() -> None:
        app.state.catalog.store.close()

    logger.info(
        "Character catalog API created",
        environment=config.environment.value,
        metrics_enabled=config.monitoring.metrics_enabled,
    )
    return app
