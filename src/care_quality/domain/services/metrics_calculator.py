"""Derivation of a caregiver's quality metrics from raw records."""

from __future__ import annotations

import math
from collections import Counter
from collections.abc import Sequence

import structlog

from care_quality.domain.entities import (
    STAR_BUCKETS,
    Booking,
    Incident,
    QualityMetricsSnapshot,
    Review,
)
from care_quality.domain.enums import BookingStatus
from care_quality.domain.value_objects import MetricsWindow

from .quality_scoring import (
    ScoreInputs,
    calculate_quality_score,
    classify_performance_tier,
    needs_attention,
)

logger = structlog.get_logger(__name__)


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def _percentage(part: int, whole: int) -> float:
    return part / whole * 100 if whole else 0.0


def star_bucket(rating: float) -> str:
    """Round a rating half-up to a star bucket, clamped into 1..5.

    Ratings below 0.5 would round to 0 and are counted as one star.
    """
    star = math.floor(rating + 0.5)
    return str(min(5, max(1, star)))


def star_distribution(ratings: Sequence[float]) -> dict[str, int]:
    """Count ratings per star bucket; every bucket is present."""
    counts = Counter(star_bucket(rating) for rating in ratings)
    return {bucket: counts.get(bucket, 0) for bucket in STAR_BUCKETS}


class CaregiverMetricsCalculator:
    """
    Pure metrics derivation for one caregiver.

    The result depends only on the records passed in; fetching them and
    persisting the snapshot is the caller's job.
    """

    def calculate(
        self,
        caregiver_id: str,
        window: MetricsWindow,
        bookings: Sequence[Booking],
        reviews: Sequence[Review],
        incidents: Sequence[Incident],
    ) -> QualityMetricsSnapshot:
        """Build the metrics snapshot for ``caregiver_id`` over ``window``."""
        total_bookings = len(bookings)

        # Responsiveness
        response_times = [b.response_time_hours for b in bookings if b.response_time_hours is not None]
        average_response_time = _mean(response_times)
        accepted = sum(1 for b in bookings if not b.is_cancelled and b.accepted_at is not None)
        acceptance_rate = _percentage(accepted, total_bookings)

        # Reliability
        completed = [b for b in bookings if b.is_completed]
        completion_rate = _percentage(len(completed), total_bookings)
        cancelled_by_caregiver = sum(1 for b in bookings if b.is_cancelled and b.cancelled_by == caregiver_id)
        no_shows = sum(1 for b in bookings if b.status == BookingStatus.NO_SHOW)

        # Satisfaction
        ratings = [r.rating for r in reviews]
        average_rating = _mean(ratings)

        # Issues
        critical_incidents = sum(1 for i in incidents if i.is_critical)

        # Engagement
        total_hours_worked = sum(b.duration_hours for b in completed if b.duration_hours is not None)
        visits_per_client = Counter(b.client_id for b in completed if b.client_id is not None)
        unique_clients = len(visits_per_client)
        repeat_clients = sum(1 for visits in visits_per_client.values() if visits > 1)
        client_retention_rate = _percentage(repeat_clients, unique_clients)

        quality_score = calculate_quality_score(
            ScoreInputs(
                acceptance_rate=acceptance_rate,
                completion_rate=completion_rate,
                average_rating=average_rating,
                client_retention_rate=client_retention_rate,
                total_incidents=len(incidents),
                critical_incidents=critical_incidents,
            )
        )

        snapshot = QualityMetricsSnapshot(
            caregiver_id=caregiver_id,
            calculation_period_start=window.start,
            calculation_period_end=window.end,
            average_response_time=average_response_time,
            acceptance_rate=acceptance_rate,
            completion_rate=completion_rate,
            cancelled_by_caregiver=cancelled_by_caregiver,
            no_shows=no_shows,
            total_bookings=total_bookings,
            completed_bookings=len(completed),
            average_rating=average_rating,
            total_reviews=len(reviews),
            star_distribution=star_distribution(ratings),
            total_incidents=len(incidents),
            critical_incidents=critical_incidents,
            total_hours_worked=total_hours_worked,
            unique_clients=unique_clients,
            repeat_clients=repeat_clients,
            client_retention_rate=client_retention_rate,
            quality_score=quality_score,
            performance_tier=classify_performance_tier(quality_score),
            needs_attention=needs_attention(quality_score, average_rating, critical_incidents),
        )

        logger.debug(
            "Caregiver metrics derived",
            caregiver_id=caregiver_id,
            total_bookings=total_bookings,
            total_reviews=len(reviews),
            total_incidents=len(incidents),
            quality_score=quality_score,
        )
        return snapshot
