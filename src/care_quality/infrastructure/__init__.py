"""Infrastructure layer for the care quality engine."""

from .health import HealthChecker, HealthCheckResult, HealthStatus
from .monitoring import MetricsCollector, MetricsConfig
from .storage import InMemoryDocumentStore

__all__ = [
    # Storage
    "InMemoryDocumentStore",
    # Monitoring
    "MetricsCollector",
    "MetricsConfig",
    # Health Checking
    "HealthChecker",
    "HealthCheckResult",
    "HealthStatus",
]
