"""Prometheus metrics definitions and helpers.

Provides the metric definitions for the holiday proxy.
"""

from typing import Callable

from prometheus_client import (
    Counter,
    Histogram,
    generate_latest,
    CollectorRegistry,
)


class ProxyMetrics:
    """Holiday proxy metrics."""

    def __init__(self, registry: CollectorRegistry) -> None:
        """Initialize proxy metrics.

        Args:
            registry: Prometheus registry to use
        """
        self.registry = registry

        # Inbound requests
        self.http_requests = Counter(
            "http_requests_total",
            "Total HTTP requests",
            ["method", "endpoint", "status"],
            registry=registry,
        )

        self.http_request_duration = Histogram(
            "http_request_duration_seconds",
            "HTTP request duration in seconds",
            ["method", "endpoint"],
            registry=registry,
        )

        # Outbound calls to the holiday provider
        self.upstream_requests = Counter(
            "upstream_requests_total",
            "Total requests sent to the upstream holiday API",
            ["resource", "outcome"],
            registry=registry,
        )

        self.upstream_request_duration = Histogram(
            "upstream_request_duration_seconds",
            "Time spent waiting on the upstream holiday API",
            ["resource"],
            buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
            registry=registry,
        )


def setup_metrics() -> ProxyMetrics:
    """Create metric instances bound to a fresh registry.

    Returns:
        ProxyMetrics with its own CollectorRegistry
    """
    return ProxyMetrics(CollectorRegistry())


def get_metrics_handler(metrics: ProxyMetrics) -> Callable[[], bytes]:
    """Get metrics handler for HTTP endpoint.

    Args:
        metrics: Metrics whose registry should be exposed

    Returns:
        Function that generates Prometheus metrics output
    """

    def metrics_handler() -> bytes:
        return generate_latest(metrics.registry)

    return metrics_handler
