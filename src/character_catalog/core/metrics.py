"""
Prometheus metrics collection for the Character Catalog.

Provides request latency and catalog operation counters for production
monitoring and alerting.
"""

from prometheus_client import REGISTRY, Counter, Histogram, generate_latest

from .logging import get_logger

logger = get_logger(__name__)


class MetricsCollector:
    """Centralized metrics collection for the catalog."""

    _instance = None
    _initialized = False

    def __new__(cls) -> "MetricsCollector":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self) -> None:
        if not MetricsCollector._initialized:
            self.registry = REGISTRY
            self._initialize_metrics()
            MetricsCollector._initialized = True

    def _initialize_metrics(self) -> None:
        """Initialize all Prometheus metrics."""

        # API Metrics
        self.api_requests_total = Counter(
            "catalog_api_requests_total",
            "Total number of API requests",
            ["method", "endpoint", "status_code"],
        )

        self.api_request_duration_seconds = Histogram(
            "catalog_api_request_duration_seconds",
            "API request duration in seconds",
            ["method", "endpoint"],
            buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5],
        )

        # Catalog Metrics
        self.catalog_operations_total = Counter(
            "catalog_operations_total",
            "Total catalog operations by outcome",
            ["operation", "outcome"],
        )

        logger.debug("Prometheus metrics initialized")

    def record_api_request(
        self, method: str, endpoint: str, status_code: int, duration_s: float
    ) -> None:
        """Record a completed API request."""
        self.api_requests_total.labels(
            method=method, endpoint=endpoint, status_code=str(status_code)
        ).inc()
        self.api_request_duration_seconds.labels(
            method=method, endpoint=endpoint
        ).observe(duration_s)

    def record_operation(self, operation: str, outcome: str = "success") -> None:
        """Record a catalog operation outcome."""
        self.catalog_operations_total.labels(
            operation=operation, outcome=outcome
        ).inc()

    def export(self) -> bytes:
        """Render all metrics in the Prometheus text exposition format."""
        return generate_latest(self.registry)


def get_metrics_collector() -> MetricsCollector:
    """Get the process-wide metrics collector."""
    return MetricsCollector()
