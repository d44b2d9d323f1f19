"""Tests for the per-caregiver metrics derivation."""

from datetime import timedelta

import pytest

from care_quality.domain.enums import IncidentSeverity, PerformanceTier
from care_quality.domain.services import CaregiverMetricsCalculator, star_bucket, star_distribution
from care_quality.domain.value_objects import MetricsWindow


@pytest.fixture
def calculator() -> CaregiverMetricsCalculator:
    return CaregiverMetricsCalculator()


@pytest.fixture
def window(now) -> MetricsWindow:
    return MetricsWindow.ending_at(now)


class TestStarDistribution:
    """Test star bucketing."""

    @pytest.mark.parametrize(
        ("rating", "bucket"),
        [(0.0, "1"), (0.4, "1"), (1.0, "1"), (1.49, "1"), (1.5, "2"), (2.5, "3"), (3.5, "4"), (4.49, "4"), (4.5, "5"), (5.0, "5")],
    )
    def test_half_up_rounding_clamped_to_buckets(self, rating: float, bucket: str) -> None:
        assert star_bucket(rating) == bucket

    def test_every_bucket_present(self) -> None:
        assert star_distribution([]) == {"1": 0, "2": 0, "3": 0, "4": 0, "5": 0}

    def test_counts_ratings(self) -> None:
        assert star_distribution([0.4, 1.5, 2.5, 4.49, 5.0, 5.0]) == {"1": 1, "2": 1, "3": 1, "4": 1, "5": 2}


class TestCaregiverMetricsCalculator:
    """Test CaregiverMetricsCalculator.calculate."""

    def test_zero_bookings_yields_zero_rates(self, calculator, window) -> None:
        snapshot = calculator.calculate("caregiver-1", window, bookings=[], reviews=[], incidents=[])

        assert snapshot.total_bookings == 0
        assert snapshot.acceptance_rate == 0.0
        assert snapshot.completion_rate == 0.0
        assert snapshot.average_response_time == 0.0
        assert snapshot.average_rating == 0.0
        assert snapshot.client_retention_rate == 0.0
        assert snapshot.quality_score == 0.0
        assert snapshot.performance_tier == PerformanceTier.NEEDS_IMPROVEMENT
        assert snapshot.needs_attention is True
        assert snapshot.calculation_period_start == window.start
        assert snapshot.calculation_period_end == window.end

    def test_ten_bookings_without_reviews(self, calculator, window, make_booking, now) -> None:
        """6 completed, 2 cancelled, 2 pending and no reviews."""
        created = now - timedelta(days=20)
        completed_clients = ["client-1", "client-1", "client-2", "client-2", "client-3", "client-4"]
        bookings = [
            make_booking(
                id=f"done-{i}",
                client_id=client,
                status="completed",
                created_at=created,
                accepted_at=created + timedelta(hours=2),
                start_time=created + timedelta(days=1),
                end_time=created + timedelta(days=1, hours=3),
            )
            for i, client in enumerate(completed_clients)
        ]
        bookings += [
            make_booking(id="cancel-1", status="cancelled", cancelled_by="caregiver-1", created_at=created),
            make_booking(id="cancel-2", status="cancelled", cancelled_by="client-9", created_at=created),
            make_booking(id="pending-1", status="requested", created_at=created),
            make_booking(id="pending-2", status="requested", created_at=created),
        ]

        snapshot = calculator.calculate("caregiver-1", window, bookings=bookings, reviews=[], incidents=[])

        assert snapshot.total_bookings == 10
        assert snapshot.completed_bookings == 6
        assert snapshot.completion_rate == pytest.approx(60.0)
        assert snapshot.acceptance_rate == pytest.approx(60.0)
        assert snapshot.average_response_time == pytest.approx(2.0)
        assert snapshot.cancelled_by_caregiver == 1
        assert snapshot.average_rating == 0.0
        assert snapshot.total_hours_worked == pytest.approx(18.0)
        assert snapshot.unique_clients == 4
        assert snapshot.repeat_clients == 2
        assert snapshot.client_retention_rate == pytest.approx(50.0)
        # acceptance 12 + completion 15 + rating 0 + retention 5
        assert snapshot.quality_score == pytest.approx(32.0)
        assert snapshot.performance_tier == PerformanceTier.NEEDS_IMPROVEMENT

    def test_cancelled_booking_with_acceptance_is_not_accepted(self, calculator, window, make_booking, now) -> None:
        created = now - timedelta(days=5)
        bookings = [
            make_booking(id="b1", status="cancelled", created_at=created, accepted_at=created + timedelta(hours=1)),
            make_booking(id="b2", status="accepted", created_at=created, accepted_at=created + timedelta(hours=3)),
        ]

        snapshot = calculator.calculate("caregiver-1", window, bookings=bookings, reviews=[], incidents=[])

        assert snapshot.acceptance_rate == pytest.approx(50.0)
        # Response time still counts every accepted booking.
        assert snapshot.average_response_time == pytest.approx(2.0)

    def test_no_shows_counted(self, calculator, window, make_booking) -> None:
        bookings = [make_booking(id="b1", status="no_show"), make_booking(id="b2", status="completed")]

        snapshot = calculator.calculate("caregiver-1", window, bookings=bookings, reviews=[], incidents=[])

        assert snapshot.no_shows == 1

    def test_reviews_drive_rating_and_distribution(self, calculator, window, make_review) -> None:
        reviews = [make_review(id="r1", rating=5.0), make_review(id="r2", rating=4.0), make_review(id="r3", rating=0.4)]

        snapshot = calculator.calculate("caregiver-1", window, bookings=[], reviews=reviews, incidents=[])

        assert snapshot.total_reviews == 3
        assert snapshot.average_rating == pytest.approx(9.4 / 3)
        assert snapshot.star_distribution == {"1": 1, "2": 0, "3": 0, "4": 1, "5": 1}

    def test_incidents_penalize_and_flag(self, calculator, window, make_booking, make_review, make_incident, now) -> None:
        created = now - timedelta(days=3)
        bookings = [
            make_booking(id="b1", status="completed", created_at=created, accepted_at=created + timedelta(hours=1)),
        ]
        reviews = [make_review(rating=5.0)]
        incidents = [
            make_incident(id="i1", severity=IncidentSeverity.CRITICAL),
            make_incident(id="i2", severity=IncidentSeverity.LOW),
        ]

        snapshot = calculator.calculate("caregiver-1", window, bookings=bookings, reviews=reviews, incidents=incidents)

        assert snapshot.total_incidents == 2
        assert snapshot.critical_incidents == 1
        # 20 + 25 + 30 + 0 - min(30, 10 + 15)
        assert snapshot.quality_score == pytest.approx(50.0)
        assert snapshot.needs_attention is True

    def test_same_inputs_same_snapshot(self, calculator, window, make_booking, make_review) -> None:
        bookings = [make_booking(id="b1", status="completed")]
        reviews = [make_review(rating=3.0)]

        first = calculator.calculate("caregiver-1", window, bookings=bookings, reviews=reviews, incidents=[])
        second = calculator.calculate("caregiver-1", window, bookings=bookings, reviews=reviews, incidents=[])

        assert first == second
