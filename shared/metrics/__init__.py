"""Metrics module using Prometheus."""

from .prometheus_metrics import (
    AuthMetrics,
    HTTPMetrics,
    setup_metrics,
    get_metrics_handler,
)

__all__ = [
    "AuthMetrics",
    "HTTPMetrics",
    "setup_metrics",
    "get_metrics_handler",
]
