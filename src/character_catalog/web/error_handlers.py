"""
Exception handlers translating catalog errors into HTTP responses.

Every handled error produces a body of the form
``{"timestamp": ..., "error": ..., "message": ...}``.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Tuple

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from ..core.exceptions import (
    AssetTooLargeError,
    CatalogError,
    InvalidInputError,
    NotFoundError,
    StorageError,
)
from ..core.logging import get_logger

logger = get_logger(__name__)


def error_status(error: CatalogError) -> Tuple[int, str]:
    """HTTP status code and error label for a catalog error."""
    if isinstance(error, NotFoundError):
        return 404, "Resource not found"
    if isinstance(error, AssetTooLargeError):
        return 413, "File too large"
    if isinstance(error, InvalidInputError):
        return 400, "Invalid request"
    if isinstance(error, StorageError):
        return 500, "Storage error"
    return 500, "Internal server error"


def error_body(error: str, message: str) -> Dict[str, Any]:
    return {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "error": error,
        "message": message,
    }


async def catalog_error_handler(request: Request, exc: CatalogError) -> JSONResponse:
    """Map a CatalogError onto its status code and the common error body."""
    status_code, label = error_status(exc)

    if status_code >= 500:
        logger.error(
            "Request failed with catalog error",
            path=request.url.path,
            method=request.method,
            error_code=exc.error_code,
            error=str(exc),
        )
    else:
        logger.info(
            "Request rejected",
            path=request.url.path,
            method=request.method,
            status_code=status_code,
            error_code=exc.error_code,
        )

    return JSONResponse(status_code=status_code, content=error_body(label, exc.message))


def register_error_handlers(app: FastAPI) -> None:
    """Install the catalog exception handlers on ``app``."""
    app.add_exception_handler(
        CatalogError, catalog_error_handler  # type: ignore[arg-type]
    )
