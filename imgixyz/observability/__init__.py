"""Observability layer - logging and metrics."""

from imgixyz.observability.logging import setup_logging
from imgixyz.observability.metrics import MetricsCollector, get_metrics

__all__ = ["setup_logging", "MetricsCollector", "get_metrics"]
