"""Metrics collection for fetch operations."""

from ranking_fetch.metrics.collector import ErrorMetrics, MetricsCollector


__all__ = [
    "ErrorMetrics",
    "MetricsCollector",
]
