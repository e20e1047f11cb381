"""
Prometheus metrics for the imgixyz provider.

Defines and exposes metrics for:
- API request counts and latency per HTTP method
- Client error rates by error type
- Time spent waiting on the shared rate limiter
- Resource operation outcomes (create, read, update, delete, import)

Metrics are exposed via HTTP endpoint for Prometheus scraping when the
CLI is started with --metrics-port.
"""

import logging

from prometheus_client import (
    REGISTRY,
    Counter,
    Histogram,
    start_http_server,
)

from imgixyz.config.settings import get_settings

logger = logging.getLogger(__name__)

# Buckets for latency histograms (in seconds)
LATENCY_BUCKETS = (0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0)

# Rate limit waits are bounded by the limiter interval times queued callers
WAIT_BUCKETS = (0.0, 0.1, 0.5, 1.0, 2.0, 4.0, 8.0, 16.0, 32.0)


class MetricsCollector:
    """
    Prometheus metrics collector for the provider.

    Usage:
        metrics = get_metrics()
        metrics.record_request("PATCH", 200, latency=0.4)
        metrics.record_operation("update", "success")
    """

    def __init__(self):
        """Initialize Prometheus metrics."""

        self.api_requests = Counter(
            "imgixyz_api_requests_total",
            "Total requests sent to the imgix API",
            ["method", "status"],
        )

        self.api_request_latency = Histogram(
            "imgixyz_api_request_latency_seconds",
            "Round-trip latency of imgix API requests (excluding rate limit wait)",
            ["method"],
            buckets=LATENCY_BUCKETS,
        )

        self.api_errors = Counter(
            "imgixyz_api_errors_total",
            "Total imgix client errors",
            ["error_type"],  # transport, remote, decode, ambiguous, invalid_argument
        )

        self.rate_limit_wait = Histogram(
            "imgixyz_rate_limit_wait_seconds",
            "Time spent waiting for a rate limit permit",
            buckets=WAIT_BUCKETS,
        )

        self.resource_operations = Counter(
            "imgixyz_resource_operations_total",
            "Resource operations handled by the provider",
            ["operation", "outcome"],  # outcome: success, warning, error
        )

        logger.debug("Prometheus metrics initialized")

    def start_server(self, port: int | None = None) -> None:
        """
        Start Prometheus metrics HTTP server.

        Args:
            port: Port to expose metrics on (default from settings)
        """
        settings = get_settings()
        port = port or settings.metrics_port

        start_http_server(port, registry=REGISTRY)
        logger.info(f"Prometheus metrics server started on port {port}")

    # Convenience methods

    def record_request(
        self,
        method: str,
        status: int | str,
        latency: float | None = None,
    ) -> None:
        """
        Record a completed API request.

        Args:
            method: HTTP method
            status: HTTP status code, or "error" when no response arrived
            latency: Optional round-trip latency in seconds
        """
        self.api_requests.labels(method=method, status=str(status)).inc()

        if latency is not None:
            self.api_request_latency.labels(method=method).observe(latency)

    def record_error(self, error_type: str) -> None:
        """Record a client error by type."""
        self.api_errors.labels(error_type=error_type).inc()

    def record_rate_limit_wait(self, seconds: float) -> None:
        """Record time spent waiting on the rate limiter."""
        self.rate_limit_wait.observe(seconds)

    def record_operation(self, operation: str, outcome: str) -> None:
        """Record a resource operation outcome."""
        self.resource_operations.labels(operation=operation, outcome=outcome).inc()


# Global metrics instance
_metrics: MetricsCollector | None = None


def get_metrics() -> MetricsCollector:
    """Get global metrics collector instance."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsCollector()
    return _metrics
