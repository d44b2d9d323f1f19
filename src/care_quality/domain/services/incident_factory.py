"""Builds automatic incidents from low-rating reviews."""

from __future__ import annotations

from datetime import datetime

from care_quality.domain.entities import Incident, Review, TimelineEntry
from care_quality.domain.enums import IncidentSeverity, IncidentStatus, IncidentType, UserRole
from care_quality.domain.value_objects import IncidentNumber

DEFAULT_LOW_RATING_THRESHOLD = 2.0
DEFAULT_HIGH_SEVERITY_THRESHOLD = 1.5

SYSTEM_REPORTER_ID = "system"
SYSTEM_REPORTER_NAME = "Automated System"
AUTO_INCIDENT_TAGS = frozenset({"low-rating", "auto-generated", "service-quality"})


class LowRatingIncidentFactory:
    """Turns a qualifying review into a complete incident record."""

    def __init__(
        self,
        low_rating_threshold: float = DEFAULT_LOW_RATING_THRESHOLD,
        high_severity_threshold: float = DEFAULT_HIGH_SEVERITY_THRESHOLD,
    ) -> None:
        if high_severity_threshold > low_rating_threshold:
            raise ValueError("high_severity_threshold cannot exceed low_rating_threshold")
        self.low_rating_threshold = low_rating_threshold
        self.high_severity_threshold = high_severity_threshold

    def qualifies(self, review: Review) -> bool:
        """Check whether the review's rating calls for an incident."""
        return review.rating <= self.low_rating_threshold

    def severity_for(self, rating: float) -> IncidentSeverity:
        return IncidentSeverity.HIGH if rating <= self.high_severity_threshold else IncidentSeverity.MEDIUM

    def build(self, review: Review, number: IncidentNumber, now: datetime) -> Incident:
        """Build the incident for ``review``; the caller persists it."""
        rating = f"{review.rating:.1f}"
        description = (
            f"Automatically generated incident due to low rating ({rating}/5.0).\n\n"
            f"Review Comment: {review.comment or 'No comment provided'}"
        )

        return Incident(
            incident_number=number.format(),
            incident_type=IncidentType.SERVICE_QUALITY_ISSUE,
            severity=self.severity_for(review.rating),
            status=IncidentStatus.REPORTED,
            reporter_id=SYSTEM_REPORTER_ID,
            reporter_name=SYSTEM_REPORTER_NAME,
            reporter_role=UserRole.SYSTEM.value,
            caregiver_id=review.reviewee_id,
            caregiver_name=review.reviewee_name,
            client_id=review.reviewer_id,
            client_name=review.reviewer_name,
            booking_id=review.booking_id,
            source_review_id=review.id,
            title=f"Low Rating Alert: {rating} stars",
            description=description,
            incident_date=review.created_at,
            tags=AUTO_INCIDENT_TAGS,
            investigation_timeline=(
                TimelineEntry(
                    action="Incident Created",
                    performed_by="System",
                    timestamp=now,
                    notes="Auto-generated from low rating review",
                ),
            ),
            created_at=now,
            updated_at=now,
        )
