"""Application use cases."""

from .calculate_caregiver_metrics import CalculateCaregiverMetricsUseCase
from .calculate_platform_metrics import DEFAULT_ROLLUP_LIMIT, CalculatePlatformMetricsUseCase
from .escalate_critical_incident import EscalateCriticalIncidentUseCase
from .monitor_low_ratings import MonitorLowRatingsUseCase
from .quality_metrics_batch import QualityMetricsBatchUseCase

__all__ = [
    "MonitorLowRatingsUseCase",
    "EscalateCriticalIncidentUseCase",
    "CalculateCaregiverMetricsUseCase",
    "CalculatePlatformMetricsUseCase",
    "QualityMetricsBatchUseCase",
    "DEFAULT_ROLLUP_LIMIT",
]
