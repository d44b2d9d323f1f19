"""Monitoring infrastructure for the quality engine."""

from .metrics_collector import MetricsCollector, MetricsConfig

__all__ = [
    "MetricsCollector",
    "MetricsConfig",
]
