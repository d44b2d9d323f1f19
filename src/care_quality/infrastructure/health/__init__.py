"""Health checking infrastructure for the quality engine."""

from .health_checker import CheckReport, HealthChecker, HealthCheckResult, HealthStatus

__all__ = [
    "CheckReport",
    "HealthChecker",
    "HealthStatus",
    "HealthCheckResult",
]
