"""Quality metrics snapshots, per caregiver and platform-wide."""

from __future__ import annotations

from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from care_quality.domain.enums import PerformanceTier

from .base import Record, UtcDatetime

STAR_BUCKETS = ("1", "2", "3", "4", "5")


class QualityMetricsSnapshot(Record):
    """Metrics for one caregiver over one window.

    Snapshots are append-only: each recomputation stores a new one.
    """

    collection: ClassVar[str] = "quality_metrics"

    caregiver_id: str
    calculation_period_start: UtcDatetime
    calculation_period_end: UtcDatetime

    # Responsiveness
    average_response_time: float = 0.0
    acceptance_rate: float = Field(default=0.0, ge=0.0, le=100.0)

    # Reliability
    completion_rate: float = Field(default=0.0, ge=0.0, le=100.0)
    cancelled_by_caregiver: int = 0
    no_shows: int = 0
    total_bookings: int = 0
    completed_bookings: int = 0

    # Satisfaction
    average_rating: float = Field(default=0.0, ge=0.0, le=5.0)
    total_reviews: int = 0
    star_distribution: dict[str, int] = Field(default_factory=lambda: dict.fromkeys(STAR_BUCKETS, 0))

    # Issues
    total_incidents: int = 0
    critical_incidents: int = 0

    # Engagement
    total_hours_worked: float = 0.0
    unique_clients: int = 0
    repeat_clients: int = 0
    client_retention_rate: float = Field(default=0.0, ge=0.0, le=100.0)

    quality_score: float = Field(..., ge=0.0, le=100.0)
    performance_tier: PerformanceTier
    needs_attention: bool
    calculated_at: UtcDatetime | None = None

    @field_validator("star_distribution")
    @classmethod
    def validate_star_distribution(cls, v: dict[str, int]) -> dict[str, int]:
        """Star distribution must have exactly the five rating buckets."""
        if set(v) != set(STAR_BUCKETS):
            raise ValueError(f"star_distribution keys must be {list(STAR_BUCKETS)}")
        return v


class _Section(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class TierHistogram(_Section):
    """Number of caregivers in each performance tier."""

    excellent: int = 0
    very_good: int = 0
    good: int = 0
    satisfactory: int = 0
    needs_improvement: int = 0


class CaregiverStatistics(_Section):
    """Threshold counts across the platform."""

    high_performers: int = 0
    needing_attention: int = 0
    with_critical_incidents: int = 0


class PlatformMetricsSnapshot(Record):
    """Platform-wide rollup of the latest caregiver snapshots."""

    collection: ClassVar[str] = "platform_metrics"

    total_caregivers: int
    snapshots_considered: int
    average_quality_score: float
    average_rating: float
    average_completion_rate: float
    caregiver_performance_tiers: TierHistogram
    caregiver_statistics: CaregiverStatistics
    calculated_at: UtcDatetime | None = None
