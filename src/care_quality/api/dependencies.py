"""
FastAPI dependencies module.

Resolves services and use cases from the dependency-injection container
stored on the application state.
"""

from fastapi import Depends, Request

from ..application.use_cases import (
    CalculateCaregiverMetricsUseCase,
    CalculatePlatformMetricsUseCase,
    EscalateCriticalIncidentUseCase,
    MonitorLowRatingsUseCase,
    QualityMetricsBatchUseCase,
)
from ..core.container import Container
from ..infrastructure.health import HealthChecker
from ..infrastructure.monitoring import MetricsCollector


def get_container(request: Request) -> Container:
    """Dependency returning the application's container."""
    return request.app.state.container


def get_monitor_low_ratings(container: Container = Depends(get_container)) -> MonitorLowRatingsUseCase:
    return container.monitor_low_ratings()


def get_escalate_critical_incident(container: Container = Depends(get_container)) -> EscalateCriticalIncidentUseCase:
    return container.escalate_critical_incident()


def get_quality_metrics_batch(container: Container = Depends(get_container)) -> QualityMetricsBatchUseCase:
    return container.quality_metrics_batch()


def get_calculate_caregiver_metrics(container: Container = Depends(get_container)) -> CalculateCaregiverMetricsUseCase:
    return container.calculate_caregiver_metrics()


def get_calculate_platform_metrics(container: Container = Depends(get_container)) -> CalculatePlatformMetricsUseCase:
    return container.calculate_platform_metrics()


def get_health_checker(container: Container = Depends(get_container)) -> HealthChecker:
    return container.health_checker()


def get_metrics_collector(container: Container = Depends(get_container)) -> MetricsCollector:
    return container.metrics_collector()
