"""Domain services: the pure rules of the quality engine."""

from .incident_factory import LowRatingIncidentFactory
from .incident_number_allocator import IncidentNumberAllocator, next_number_from_latest
from .metrics_calculator import CaregiverMetricsCalculator, star_bucket, star_distribution
from .platform_rollup import PlatformRollupCalculator, latest_per_caregiver
from .quality_scoring import (
    ScoreInputs,
    calculate_quality_score,
    classify_performance_tier,
    incident_penalty,
    needs_attention,
)

__all__ = [
    "IncidentNumberAllocator",
    "next_number_from_latest",
    "LowRatingIncidentFactory",
    "CaregiverMetricsCalculator",
    "star_bucket",
    "star_distribution",
    "PlatformRollupCalculator",
    "latest_per_caregiver",
    "ScoreInputs",
    "calculate_quality_score",
    "classify_performance_tier",
    "incident_penalty",
    "needs_attention",
]
