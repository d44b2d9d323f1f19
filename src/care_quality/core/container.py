"""Dependency injection container for the care quality engine.

The document store is constructed here, once, and injected into every
allocator, notifier and use case that needs it.
"""

from dependency_injector import containers, providers

from ..application.services import EscalationNotifier
from ..application.use_cases import (
    CalculateCaregiverMetricsUseCase,
    CalculatePlatformMetricsUseCase,
    EscalateCriticalIncidentUseCase,
    MonitorLowRatingsUseCase,
    QualityMetricsBatchUseCase,
)
from ..config import Settings
from ..domain.services import (
    CaregiverMetricsCalculator,
    IncidentNumberAllocator,
    LowRatingIncidentFactory,
    PlatformRollupCalculator,
)
from ..infrastructure.health import HealthChecker
from ..infrastructure.monitoring import MetricsCollector, MetricsConfig
from ..infrastructure.storage import InMemoryDocumentStore


class Container(containers.DeclarativeContainer):
    """Main DI container for the application."""

    config = providers.Configuration()

    # Infrastructure
    document_store = providers.Singleton(InMemoryDocumentStore)

    metrics_config = providers.Factory(
        MetricsConfig,
        enable_prometheus=config.enable_metrics,
        metric_prefix="care_quality",
    )
    metrics_collector = providers.Singleton(MetricsCollector, config=metrics_config)

    health_checker = providers.Singleton(HealthChecker, store=document_store, timeout_seconds=config.service_timeout)

    # Domain services
    incident_number_allocator = providers.Singleton(IncidentNumberAllocator, store=document_store)
    incident_factory = providers.Singleton(
        LowRatingIncidentFactory,
        low_rating_threshold=config.low_rating_threshold,
        high_severity_threshold=config.high_severity_threshold,
    )
    metrics_calculator = providers.Singleton(CaregiverMetricsCalculator)
    rollup_calculator = providers.Singleton(PlatformRollupCalculator)

    # Application services
    escalation_notifier = providers.Singleton(EscalationNotifier, store=document_store, metrics=metrics_collector)

    # Use cases
    monitor_low_ratings = providers.Factory(
        MonitorLowRatingsUseCase,
        store=document_store,
        allocator=incident_number_allocator,
        factory=incident_factory,
        notifier=escalation_notifier,
        metrics=metrics_collector,
    )
    escalate_critical_incident = providers.Factory(EscalateCriticalIncidentUseCase, notifier=escalation_notifier)
    calculate_caregiver_metrics = providers.Factory(
        CalculateCaregiverMetricsUseCase,
        store=document_store,
        calculator=metrics_calculator,
        metrics=metrics_collector,
        window_days=config.metrics_window_days,
    )
    calculate_platform_metrics = providers.Factory(
        CalculatePlatformMetricsUseCase,
        store=document_store,
        calculator=rollup_calculator,
        limit=config.platform_rollup_limit,
    )
    quality_metrics_batch = providers.Factory(
        QualityMetricsBatchUseCase,
        store=document_store,
        caregiver_metrics=calculate_caregiver_metrics,
        platform_metrics=calculate_platform_metrics,
        metrics=metrics_collector,
        window_days=config.metrics_window_days,
        max_concurrency=config.metrics_max_concurrency,
        task_timeout_seconds=config.metrics_task_timeout_seconds,
    )


def create_container(settings: Settings) -> Container:
    """Build a container configured from ``settings``."""
    container = Container()
    container.config.from_dict(settings.model_dump())
    return container
