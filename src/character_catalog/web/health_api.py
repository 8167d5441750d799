"""
Health check and metrics endpoints.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from ..characters import CharacterCatalog
from ..core.config import Config
from ..core.logging import get_logger
from ..core.metrics import get_metrics_collector
from .dependencies import get_catalog, get_config

logger = get_logger(__name__)

health_router = APIRouter(tags=["health"])


@health_router.get("/health")
def health_check(catalog: CharacterCatalog = Depends(get_catalog)) -> Response:
    """Liveness of the character store and the asset directory."""
    status: Dict[str, Any] = catalog.health_check()
    healthy = status.pop("healthy")
    body = {"status": "healthy" if healthy else "unhealthy", "components": status}
    if not healthy:
        logger.warning("Health check reported unhealthy components", **status)
    return JSONResponse(content=body, status_code=200 if healthy else 503)


@health_router.get("/metrics")
def get_metrics(config: Config = Depends(get_config)) -> Response:
    """Get Prometheus metrics in text format."""
    if not config.monitoring.metrics_enabled:
        return PlainTextResponse(content="Metrics are disabled\n", status_code=404)

    metrics_data = get_metrics_collector().export()
    return PlainTextResponse(
        content=metrics_data.decode("utf-8"),
        media_type="text/plain; version=0.0.4; charset=utf-8",
    )
