"""
Structured logging with request correlation.

Every event logged through a StructuredLogger carries the request id, trace
id and character id of the request being served, so one API call can be
followed from the middleware through the catalog into its stores.
"""

import logging
import time
import uuid
from contextvars import ContextVar
from typing import Any, Dict, List, Optional

import structlog
from structlog.stdlib import LoggerFactory

# Context variables for request correlation
request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
trace_id_var: ContextVar[Optional[str]] = ContextVar("trace_id", default=None)
character_id_var: ContextVar[Optional[str]] = ContextVar("character_id", default=None)

_CONTEXT_VARS = (
    ("request_id", request_id_var),
    ("trace_id", trace_id_var),
    ("character_id", character_id_var),
)


class StructuredLogger:
    """structlog logger that adds the current request context to each event."""

    def __init__(self, name: str):
        self.name = name
        self.logger = structlog.get_logger(name)

    def _with_context(self, kwargs: Dict[str, Any]) -> Dict[str, Any]:
        """Request context merged under the event's own fields."""
        context = {key: var.get() for key, var in _CONTEXT_VARS if var.get()}
        return {**context, **kwargs}

    def debug(self, message: str, **kwargs: Any) -> None:
        self.logger.debug(message, **self._with_context(kwargs))

    def info(self, message: str, **kwargs: Any) -> None:
        self.logger.info(message, **self._with_context(kwargs))

    def warning(self, message: str, **kwargs: Any) -> None:
        self.logger.warning(message, **self._with_context(kwargs))

    def error(self, message: str, **kwargs: Any) -> None:
        self.logger.error(message, **self._with_context(kwargs))

    def log_processing_step(
        self,
        step: str,
        component: str,
        duration_ms: Optional[float] = None,
        **kwargs: Any,
    ) -> None:
        """Log a timed step of a catalog operation at DEBUG."""
        if duration_ms is not None:
            kwargs["duration_ms"] = round(duration_ms, 3)
        self.debug(
            f"Processing step: {step}", step=step, component=component, **kwargs
        )

    def log_api_request(
        self,
        method: str,
        path: str,
        status_code: int,
        duration_ms: float,
        **kwargs: Any,
    ) -> None:
        """Log a completed API request with its status and latency."""
        self.info(
            f"API request: {method} {path}",
            method=method,
            path=path,
            status_code=status_code,
            duration_ms=round(duration_ms, 3),
            **kwargs,
        )

    def log_character_event(
        self, event_type: str, character_id: Any, **kwargs: Any
    ) -> None:
        """Log a character lifecycle event (created, updated, deleted...)."""
        self.info(
            f"Character {event_type}",
            event_type=event_type,
            character_id=character_id,
            **kwargs,
        )


def get_logger(name: str) -> StructuredLogger:
    """Get a structured logger instance."""
    return StructuredLogger(name)


def set_request_context(
    request_id: Optional[str] = None,
    trace_id: Optional[str] = None,
    character_id: Optional[str] = None,
) -> None:
    """Bind correlation values for the rest of the current request."""
    if request_id:
        request_id_var.set(request_id)
    if trace_id:
        trace_id_var.set(trace_id)
    if character_id:
        character_id_var.set(character_id)


def clear_request_context() -> None:
    for _, var in _CONTEXT_VARS:
        var.set(None)


def generate_correlation_id() -> str:
    """New random id for a request or trace."""
    return str(uuid.uuid4())


def configure_logging(level: str = "INFO", json_format: bool = True) -> None:
    """Configure structlog rendering on top of stdlib logging."""

    processors: List[Any] = [
        structlog.processors.TimeStamper(fmt="ISO"),
        structlog.processors.add_log_level,
    ]

    if json_format:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(level.upper())
        ),
        logger_factory=LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(message)s",
        handlers=[logging.StreamHandler()],
    )


class ProcessingTimer:
    """Context manager logging the start, end and duration of a step."""

    def __init__(self, logger: StructuredLogger, step: str, component: str):
        self.logger = logger
        self.step = step
        self.component = component
        self.duration_ms: Optional[float] = None

    def __enter__(self) -> "ProcessingTimer":
        self._started = time.perf_counter()
        self.logger.log_processing_step(f"{self.step}_start", self.component)
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.duration_ms = (time.perf_counter() - self._started) * 1000
        self.logger.log_processing_step(
            f"{self.step}_end",
            self.component,
            duration_ms=self.duration_ms,
            status="success" if exc_type is None else "error",
        )


configure_logging()
