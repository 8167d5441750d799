"""
Tests for structured logging and request correlation.
"""

from typing import Generator
from unittest.mock import MagicMock

import pytest
from structlog.testing import capture_logs

from character_catalog.core.logging import (
    ProcessingTimer,
    StructuredLogger,
    clear_request_context,
    configure_logging,
    get_logger,
    set_request_context,
)


@pytest.fixture(autouse=True)
def debug_logging() -> Generator[None, None, None]:
    """Log every level with an empty request context."""
    configure_logging("DEBUG", json_format=False)
    clear_request_context()
    yield
    clear_request_context()
    configure_logging()


class TestStructuredLogger:
    """Test context propagation into log events."""

    def test_request_context_is_attached(self) -> None:
        set_request_context(request_id="req-1", trace_id="trace-1")
        with capture_logs() as logs:
            get_logger("test.context").info("Looked up character", found=True)

        assert logs[0]["request_id"] == "req-1"
        assert logs[0]["trace_id"] == "trace-1"
        assert logs[0]["found"] is True

    def test_event_fields_win_over_context(self) -> None:
        """A character event inside a request bound to that character logs once."""
        set_request_context(character_id="7")
        with capture_logs() as logs:
            get_logger("test.event").log_character_event("updated", 7)

        assert logs[0]["character_id"] == 7
        assert logs[0]["event_type"] == "updated"

    def test_cleared_context_is_not_logged(self) -> None:
        set_request_context(request_id="req-1")
        clear_request_context()
        with capture_logs() as logs:
            get_logger("test.cleared").warning("Orphaned sprite")

        assert "request_id" not in logs[0]


class TestProcessingTimer:
    """Test step timing."""

    def test_logs_start_and_end(self) -> None:
        logger = MagicMock(spec=StructuredLogger)
        with ProcessingTimer(logger, "search", "Catalog") as timer:
            pass

        steps = [c.args[0] for c in logger.log_processing_step.call_args_list]
        assert steps == ["search_start", "search_end"]
        end = logger.log_processing_step.call_args_list[1]
        assert end.kwargs["status"] == "success"
        assert end.kwargs["duration_ms"] == timer.duration_ms

    def test_marks_failed_steps(self) -> None:
        logger = MagicMock(spec=StructuredLogger)
        with pytest.raises(RuntimeError):
            with ProcessingTimer(logger, "search", "Catalog"):
                raise RuntimeError("boom")

        assert logger.log_processing_step.call_args.kwargs["status"] == "error"
