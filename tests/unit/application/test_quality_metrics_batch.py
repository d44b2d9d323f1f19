"""Tests for QualityMetricsBatchUseCase."""

import asyncio
from datetime import UTC, datetime, timedelta

import pytest

from care_quality.application.use_cases import (
    CalculateCaregiverMetricsUseCase,
    CalculatePlatformMetricsUseCase,
    QualityMetricsBatchUseCase,
)
from care_quality.core.exceptions import DocumentStoreError, MetricsCalculationError
from care_quality.domain.entities import Booking
from care_quality.domain.events import BookingUpdated, WeeklyScheduleTick

NOW = datetime(2025, 3, 2, tzinfo=UTC)


def caregiver_users(count: int) -> list[dict]:
    return [{"id": f"caregiver-{i}", "role": "caregiver", "isActive": True} for i in range(count)]


def build_batch(target, caregiver_metrics=None, platform_metrics=None, **kwargs) -> QualityMetricsBatchUseCase:
    return QualityMetricsBatchUseCase(
        store=target,
        caregiver_metrics=caregiver_metrics or CalculateCaregiverMetricsUseCase(target),
        platform_metrics=platform_metrics or CalculatePlatformMetricsUseCase(target),
        **kwargs,
    )


class SlowCaregiverMetrics:
    """Caregiver computation stand-in that sleeps and tracks concurrency."""

    def __init__(self, delay: float = 0.01, slow_ids: frozenset[str] = frozenset(), slow_delay: float = 1.0) -> None:
        self.delay = delay
        self.slow_ids = slow_ids
        self.slow_delay = slow_delay
        self.active = 0
        self.peak = 0
        self.calls: list[tuple[str, object, str]] = []

    async def execute(self, caregiver_id, window=None, trigger="manual"):
        self.calls.append((caregiver_id, window, trigger))
        self.active += 1
        self.peak = max(self.peak, self.active)
        try:
            await asyncio.sleep(self.slow_delay if caregiver_id in self.slow_ids else self.delay)
        finally:
            self.active -= 1
        return caregiver_id


class FailingRollup:
    async def execute(self):
        raise DocumentStoreError("platform_metrics write rejected")


class TestRunScheduled:
    """Test the weekly batch."""

    async def test_failures_are_isolated(self, store, metrics) -> None:
        store.load("users", caregiver_users(50))
        store.load(
            "bookings",
            [{"caregiverId": f"caregiver-{i}", "status": "completed", "createdAt": NOW - timedelta(days=2)} for i in range(50)],
        )
        broken = {"caregiver-3", "caregiver-17", "caregiver-42"}
        store.load("bookings", [{"caregiverId": cid, "createdAt": NOW - timedelta(days=1)} for cid in sorted(broken)])

        result = await build_batch(store, metrics=metrics).run_scheduled(NOW)

        assert result.total_caregivers == 50
        assert result.successful == 47
        assert result.failed == 3
        assert {f.caregiver_id for f in result.failures} == broken
        assert {f.error_type for f in result.failures} == {"MetricsCalculationError"}
        assert store.count("quality_metrics") == 47
        assert store.count("platform_metrics") == 1
        assert result.platform_metrics["totalCaregivers"] == 47
        assert result.rollup_error is None
        assert result.window_end == NOW
        assert result.window_start == NOW - timedelta(days=90)
        assert result.finished_at >= result.started_at
        assert metrics.registry.get_sample_value("care_quality_last_batch_failures") == 3.0
        assert metrics.registry.get_sample_value("care_quality_batch_runs_total") == 1.0

    async def test_only_active_caregivers_are_computed(self, store) -> None:
        store.load(
            "users",
            [
                {"id": "caregiver-1", "role": "caregiver", "isActive": True},
                {"id": "caregiver-2", "role": "caregiver", "isActive": False},
                {"id": "admin-1", "role": "admin", "isActive": True},
                {"id": "client-1", "role": "client", "isActive": True},
            ],
        )
        fake = SlowCaregiverMetrics(delay=0)

        result = await build_batch(store, caregiver_metrics=fake).run_scheduled(NOW)

        assert result.total_caregivers == 1
        assert [call[0] for call in fake.calls] == ["caregiver-1"]
        assert {call[2] for call in fake.calls} == {"scheduled"}

    async def test_timeout_counts_as_failure(self, store) -> None:
        store.load("users", caregiver_users(4))
        fake = SlowCaregiverMetrics(delay=0, slow_ids=frozenset({"caregiver-2"}), slow_delay=5.0)

        result = await build_batch(store, caregiver_metrics=fake, task_timeout_seconds=0.05).run_scheduled(NOW)

        assert result.successful == 3
        assert result.failed == 1
        failure = result.failures[0]
        assert failure.caregiver_id == "caregiver-2"
        assert failure.error_type == "TimeoutError"
        assert failure.error == "Timed out after 0.05s"

    async def test_concurrency_is_bounded(self, store) -> None:
        store.load("users", caregiver_users(12))
        fake = SlowCaregiverMetrics(delay=0.02)

        result = await build_batch(store, caregiver_metrics=fake, max_concurrency=3).run_scheduled(NOW)

        assert result.successful == 12
        assert fake.peak == 3

    async def test_rollup_failure_is_reported(self, store, metrics) -> None:
        store.load("users", caregiver_users(2))

        result = await build_batch(store, platform_metrics=FailingRollup(), metrics=metrics).run_scheduled(NOW)

        assert result.successful == 2
        assert result.platform_metrics is None
        assert result.rollup_error == "platform_metrics write rejected"
        assert store.count("quality_metrics") == 2
        assert metrics.registry.get_sample_value(
            "care_quality_errors_total", {"error_type": "DocumentStoreError", "component": "platform_rollup"}
        ) == 1.0

    async def test_rollup_runs_even_when_every_caregiver_fails(self, flaky_store) -> None:
        flaky_store.load("users", caregiver_users(2))
        flaky_store.load(
            "quality_metrics",
            [
                {
                    "caregiverId": "caregiver-9",
                    "calculationPeriodStart": NOW - timedelta(days=97),
                    "calculationPeriodEnd": NOW - timedelta(days=7),
                    "qualityScore": 72.0,
                    "performanceTier": "Good",
                    "needsAttention": False,
                    "calculatedAt": NOW - timedelta(days=7),
                }
            ],
        )
        flaky_store.fail_queries_on.add("bookings")

        result = await build_batch(flaky_store).run_scheduled(NOW)

        assert result.failed == 2
        assert result.platform_metrics["totalCaregivers"] == 1

    async def test_no_caregivers(self, store) -> None:
        result = await build_batch(store).run_scheduled(NOW)

        assert result.total_caregivers == 0
        assert result.platform_metrics is None
        assert store.count("platform_metrics") == 0

    async def test_tick_uses_occurrence_time(self, store) -> None:
        store.load("users", caregiver_users(1))
        fake = SlowCaregiverMetrics(delay=0)
        tick = WeeklyScheduleTick.create(aggregate_id="weekly", occurred_at=NOW)

        result = await build_batch(store, caregiver_metrics=fake).handle_tick(tick)

        assert result.window_end == NOW
        assert fake.calls[0][1].end == NOW

    def test_rejects_non_positive_concurrency(self, store) -> None:
        with pytest.raises(ValueError):
            build_batch(store, max_concurrency=0)


class TestBookingCompleted:
    """Test recomputation on booking completion."""

    @staticmethod
    def booking(status: str, updated_at: datetime | None = None) -> Booking:
        return Booking(
            id="booking-1",
            caregiver_id="caregiver-1",
            client_id="client-1",
            status=status,
            created_at=NOW - timedelta(days=3),
            updated_at=updated_at,
        )

    async def test_completion_recomputes_caregiver(self, store) -> None:
        completed_at = NOW - timedelta(hours=2)
        store.load("bookings", [self.booking("completed", completed_at).to_document() | {"id": "booking-1"}])
        event = BookingUpdated.create(
            aggregate_id="booking-1",
            before=self.booking("in_progress"),
            after=self.booking("completed", completed_at),
        )

        snapshot = await build_batch(store).handle_booking_updated(event)

        assert snapshot is not None
        assert snapshot.caregiver_id == "caregiver-1"
        assert snapshot.calculation_period_end == completed_at
        assert snapshot.completed_bookings == 1
        assert store.count("quality_metrics") == 1

    async def test_falls_back_to_event_time(self, store) -> None:
        fake = SlowCaregiverMetrics(delay=0)
        event = BookingUpdated.create(
            aggregate_id="booking-1",
            occurred_at=NOW,
            before=self.booking("accepted"),
            after=self.booking("completed"),
        )

        await build_batch(store, caregiver_metrics=fake).handle_booking_updated(event)

        caregiver_id, window, trigger = fake.calls[0]
        assert caregiver_id == "caregiver-1"
        assert window.end == NOW
        assert trigger == "booking_completed"

    @pytest.mark.parametrize(("before", "after"), [("completed", "completed"), ("requested", "accepted"), ("in_progress", "cancelled")])
    async def test_other_transitions_are_ignored(self, store, before: str, after: str) -> None:
        fake = SlowCaregiverMetrics(delay=0)
        event = BookingUpdated.create(aggregate_id="booking-1", before=self.booking(before), after=self.booking(after))

        assert await build_batch(store, caregiver_metrics=fake).handle_booking_updated(event) is None
        assert fake.calls == []

    async def test_failure_propagates(self, store) -> None:
        store.load("bookings", [{"caregiverId": "caregiver-1", "createdAt": NOW - timedelta(days=1)}])
        event = BookingUpdated.create(
            aggregate_id="booking-1",
            before=self.booking("in_progress"),
            after=self.booking("completed", NOW),
        )

        with pytest.raises(MetricsCalculationError):
            await build_batch(store).handle_booking_updated(event)
