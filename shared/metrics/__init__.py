"""Metrics module using Prometheus."""

from .prometheus_metrics import (
    ProxyMetrics,
    setup_metrics,
    get_metrics_handler,
)

__all__ = [
    "ProxyMetrics",
    "setup_metrics",
    "get_metrics_handler",
]
