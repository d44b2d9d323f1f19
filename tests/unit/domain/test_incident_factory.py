"""Tests for the low-rating incident factory."""

from datetime import UTC, datetime

import pytest

from care_quality.domain.enums import IncidentSeverity, IncidentStatus, IncidentType
from care_quality.domain.services import LowRatingIncidentFactory
from care_quality.domain.value_objects import IncidentNumber

NUMBER = IncidentNumber(year=2025, sequence=43)
NOW = datetime(2025, 3, 2, 12, tzinfo=UTC)


@pytest.fixture
def factory() -> LowRatingIncidentFactory:
    return LowRatingIncidentFactory()


class TestQualification:
    """Test which ratings open an incident."""

    @pytest.mark.parametrize(("rating", "qualifies"), [(0.0, True), (1.5, True), (2.0, True), (2.01, False), (2.1, False), (5.0, False)])
    def test_threshold_is_inclusive(self, factory, make_review, rating: float, qualifies: bool) -> None:
        assert factory.qualifies(make_review(rating=rating)) is qualifies

    @pytest.mark.parametrize(
        ("rating", "severity"),
        [(0.0, IncidentSeverity.HIGH), (1.5, IncidentSeverity.HIGH), (1.6, IncidentSeverity.MEDIUM), (2.0, IncidentSeverity.MEDIUM)],
    )
    def test_severity(self, factory, rating: float, severity: IncidentSeverity) -> None:
        assert factory.severity_for(rating) == severity

    def test_custom_thresholds(self, make_review) -> None:
        factory = LowRatingIncidentFactory(low_rating_threshold=3.0, high_severity_threshold=1.0)

        assert factory.qualifies(make_review(rating=2.9))
        assert factory.severity_for(1.5) == IncidentSeverity.MEDIUM

    def test_rejects_inverted_thresholds(self) -> None:
        with pytest.raises(ValueError):
            LowRatingIncidentFactory(low_rating_threshold=1.0, high_severity_threshold=2.0)


class TestBuild:
    """Test the built incident record."""

    def test_builds_complete_incident(self, factory, make_review) -> None:
        review = make_review(rating=1.5, comment="Never showed up")

        incident = factory.build(review, NUMBER, NOW)

        assert incident.incident_number == "INC-2025-000043"
        assert incident.incident_type == IncidentType.SERVICE_QUALITY_ISSUE
        assert incident.severity == IncidentSeverity.HIGH
        assert incident.status == IncidentStatus.REPORTED
        assert incident.reporter_id == "system"
        assert incident.reporter_name == "Automated System"
        assert incident.reporter_role == "system"
        assert incident.caregiver_id == review.reviewee_id
        assert incident.client_id == review.reviewer_id
        assert incident.booking_id == review.booking_id
        assert incident.source_review_id == review.id
        assert incident.title == "Low Rating Alert: 1.5 stars"
        assert incident.description == (
            "Automatically generated incident due to low rating (1.5/5.0).\n\nReview Comment: Never showed up"
        )
        assert incident.tags == frozenset({"low-rating", "auto-generated", "service-quality"})
        assert incident.created_at == NOW
        assert incident.updated_at == NOW

    def test_missing_comment_placeholder(self, factory, make_review) -> None:
        incident = factory.build(make_review(rating=2.0, comment=None), NUMBER, NOW)

        assert incident.description.endswith("Review Comment: No comment provided")
        assert incident.title == "Low Rating Alert: 2.0 stars"

    def test_timeline_seeded_once(self, factory, make_review) -> None:
        incident = factory.build(make_review(rating=1.0), NUMBER, NOW)

        assert len(incident.investigation_timeline) == 1
        entry = incident.investigation_timeline[0]
        assert entry.action == "Incident Created"
        assert entry.performed_by == "System"
        assert entry.timestamp == NOW
        assert entry.notes == "Auto-generated from low rating review"

    def test_lifecycle_fields_empty(self, factory, make_review) -> None:
        incident = factory.build(make_review(rating=1.0), NUMBER, NOW)

        assert incident.assigned_to is None
        assert incident.resolution is None
        assert incident.resolved_at is None
        assert incident.closed_at is None
        assert incident.escalated_at is None
        assert incident.auto_escalated is False
