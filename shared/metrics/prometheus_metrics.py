"""Prometheus metrics definitions and helpers.

Provides the HTTP and authentication metrics exposed by the books API.
"""

from typing import Callable

from prometheus_client import (
    Counter,
    Histogram,
    generate_latest,
    CollectorRegistry,
)


class HTTPMetrics:
    """Request metrics for the HTTP surface."""

    def __init__(self, registry: CollectorRegistry) -> None:
        """Initialize HTTP metrics.

        Args:
            registry: Prometheus registry to use
        """
        # Requests served
        self.requests_total = Counter(
            "http_requests_total",
            "Total HTTP requests",
            ["method", "route", "status"],
            registry=registry,
        )

        # Request duration
        self.request_duration = Histogram(
            "http_request_duration_seconds",
            "HTTP request duration in seconds",
            ["method", "route"],
            buckets=[0.005, 0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5],
            registry=registry,
        )


class AuthMetrics:
    """Authentication outcome metrics."""

    def __init__(self, registry: CollectorRegistry) -> None:
        """Initialize authentication metrics.

        Args:
            registry: Prometheus registry to use
        """
        self.attempts = Counter(
            "auth_attempts_total",
            "Authentication attempts by check and outcome",
            ["check", "outcome"],
            registry=registry,
        )


def setup_metrics(registry: CollectorRegistry) -> tuple[HTTPMetrics, AuthMetrics]:
    """Setup and return metric instances bound to one registry.

    Returns:
        Tuple of (HTTPMetrics, AuthMetrics)
    """
    return HTTPMetrics(registry), AuthMetrics(registry)


def get_metrics_handler(registry: CollectorRegistry) -> Callable[[], bytes]:
    """Get metrics handler for HTTP endpoint.

    Returns:
        Function that generates Prometheus metrics output
    """

    def metrics_handler() -> bytes:
        return generate_latest(registry)

    return metrics_handler
