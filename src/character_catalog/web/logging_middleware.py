"""
FastAPI middleware for request/trace ID correlation and structured logging.

Provides automatic request ID generation, correlation tracking, structured
logging and request metrics for all API requests and responses.
"""

import time
from typing import Callable, Optional

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.routing import Match
from starlette.types import ASGIApp

from ..core.logging import (
    clear_request_context,
    generate_correlation_id,
    get_logger,
    set_request_context,
)
from ..core.metrics import MetricsCollector

UNMATCHED_ENDPOINT = "unmatched"


def endpoint_label(request: Request) -> str:
    """Route template or mount path that served ``request``.

    Requests no route or mount claims share one label.
    """
    route = request.scope.get("route")
    if route is None:
        scope = {
            "type": "http",
            "path": request.url.path,
            "root_path": "",
            "method": request.method,
        }
        for candidate in request.app.routes:
            match, _ = candidate.matches(scope)
            if match != Match.NONE:
                route = candidate
                break
    return getattr(route, "path", None) or UNMATCHED_ENDPOINT


class LoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for request correlation and structured logging."""

    def __init__(self, app: ASGIApp, metrics: Optional[MetricsCollector] = None):
        super().__init__(app)
        self.logger = get_logger("api.middleware")
        self.metrics = metrics

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Process request with correlation IDs and structured logging."""

        # Honour an upstream request ID if one was sent
        request_id = request.headers.get("x-request-id") or generate_correlation_id()
        trace_id = generate_correlation_id()

        set_request_context(request_id=request_id, trace_id=trace_id)

        self.logger.debug(
            "Request started",
            method=request.method,
            url=str(request.url),
            client_ip=request.client.host if request.client else None,
            user_agent=request.headers.get("user-agent"),
        )

        start_time = time.time()

        try:
            response = await call_next(request)

            duration_s = time.time() - start_time

            self.logger.log_api_request(
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                duration_ms=duration_s * 1000,
                response_size=response.headers.get("content-length"),
            )
            if self.metrics is not None:
                self.metrics.record_api_request(
                    request.method,
                    endpoint_label(request),
                    response.status_code,
                    duration_s,
                )

            response.headers["X-Request-ID"] = request_id
            response.headers["X-Trace-ID"] = trace_id

            return response  # type: ignore

        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000

            self.logger.error(
                "Request failed",
                method=request.method,
                path=request.url.path,
                duration_ms=duration_ms,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise

        finally:
            clear_request_context()
