"""Scheduled and event-driven recomputation of quality metrics."""

from __future__ import annotations

import asyncio
import time
from datetime import UTC, datetime, timedelta

import structlog

from care_quality.application.dtos import BatchRunResult, CaregiverFailure
from care_quality.domain.entities import QualityMetricsSnapshot, User
from care_quality.domain.enums import UserRole
from care_quality.domain.events import BookingUpdated, WeeklyScheduleTick
from care_quality.domain.repositories import DocumentStore, eq
from care_quality.domain.value_objects import DEFAULT_WINDOW_DAYS, MetricsWindow
from care_quality.infrastructure.monitoring import MetricsCollector

from .calculate_caregiver_metrics import CalculateCaregiverMetricsUseCase
from .calculate_platform_metrics import CalculatePlatformMetricsUseCase

logger = structlog.get_logger(__name__)

DEFAULT_MAX_CONCURRENCY = 20
DEFAULT_TASK_TIMEOUT_SECONDS = 30.0


class QualityMetricsBatchUseCase:
    """
    Orchestrates per-caregiver computations and the platform rollup.

    The weekly run computes every active caregiver concurrently, bounded by a
    semaphore and with a timeout per caregiver. Failures are counted and
    logged, not retried, and the rollup runs once afterwards regardless.
    """

    def __init__(
        self,
        store: DocumentStore,
        caregiver_metrics: CalculateCaregiverMetricsUseCase,
        platform_metrics: CalculatePlatformMetricsUseCase,
        metrics: MetricsCollector | None = None,
        window_days: int = DEFAULT_WINDOW_DAYS,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
        task_timeout_seconds: float = DEFAULT_TASK_TIMEOUT_SECONDS,
    ) -> None:
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")
        self._store = store
        self._caregiver_metrics = caregiver_metrics
        self._platform_metrics = platform_metrics
        self._metrics = metrics
        self._window_days = window_days
        self._max_concurrency = max_concurrency
        self._task_timeout_seconds = task_timeout_seconds
        self._logger = logger.bind(use_case="QualityMetricsBatch")

    async def active_caregiver_ids(self) -> list[str]:
        """Ids of caregivers with an active account."""
        documents = await self._store.query(
            User.collection,
            filters=[eq("role", UserRole.CAREGIVER.value), eq("isActive", True)],
        )
        return [doc["id"] for doc in documents if doc.get("id")]

    async def run_scheduled(self, now: datetime | None = None) -> BatchRunResult:
        """Recompute every active caregiver, then the platform rollup.

        Args:
            now: End of the metrics window; defaults to the current time

        Returns:
            Counts of successes and failures plus the stored rollup, if any
        """
        started_at = now or datetime.now(UTC)
        started = time.perf_counter()
        window = MetricsWindow.ending_at(started_at, self._window_days)

        caregiver_ids = await self.active_caregiver_ids()
        self._logger.info(
            "Starting scheduled quality metrics run",
            total_caregivers=len(caregiver_ids),
            window_start=window.start.isoformat(),
            window_end=window.end.isoformat(),
        )

        semaphore = asyncio.Semaphore(self._max_concurrency)

        async def compute(caregiver_id: str) -> QualityMetricsSnapshot:
            async with semaphore:
                async with asyncio.timeout(self._task_timeout_seconds):
                    return await self._caregiver_metrics.execute(caregiver_id, window, trigger="scheduled")

        results = await asyncio.gather(*(compute(cid) for cid in caregiver_ids), return_exceptions=True)

        failures: list[CaregiverFailure] = []
        for caregiver_id, outcome in zip(caregiver_ids, results, strict=True):
            if not isinstance(outcome, BaseException):
                continue
            if isinstance(outcome, TimeoutError):
                error = f"Timed out after {self._task_timeout_seconds}s"
            else:
                error = str(outcome)
            failures.append(CaregiverFailure(caregiver_id=caregiver_id, error=error, error_type=type(outcome).__name__))
            self._logger.warning("Caregiver metrics failed", caregiver_id=caregiver_id, error=error)

        result = BatchRunResult(
            started_at=started_at,
            finished_at=started_at,
            window_start=window.start,
            window_end=window.end,
            total_caregivers=len(caregiver_ids),
            successful=len(caregiver_ids) - len(failures),
            failed=len(failures),
            failures=failures,
        )

        try:
            summary = await self._platform_metrics.execute()
        except Exception as e:
            self._logger.error("Platform rollup failed", error=str(e), exc_info=True)
            result.rollup_error = str(e)
            if self._metrics:
                self._metrics.record_error(type(e).__name__, "platform_rollup")
        else:
            if summary is not None:
                result.platform_metrics = summary.to_document()

        duration = time.perf_counter() - started
        result.finished_at = started_at + timedelta(seconds=duration)
        if self._metrics:
            self._metrics.record_batch_run(duration, result.failed)

        self._logger.info(
            "Scheduled quality metrics run finished",
            successful=result.successful,
            failed=result.failed,
            duration_seconds=round(duration, 3),
            rollup_written=result.platform_metrics is not None,
        )
        return result

    async def handle_tick(self, event: WeeklyScheduleTick) -> BatchRunResult:
        """Run the scheduled batch for a schedule tick."""
        return await self.run_scheduled(event.occurred_at)

    async def handle_booking_updated(self, event: BookingUpdated) -> QualityMetricsSnapshot | None:
        """Recompute the caregiver when a booking has just become completed.

        The window ends at the transition time. Errors propagate so the event
        can be redelivered.

        Returns:
            The stored snapshot, or None when the update was not a completion

        Raises:
            MetricsCalculationError: If the computation fails
        """
        if not event.completed_now or event.after is None:
            return None

        booking = event.after
        transitioned_at = booking.updated_at or event.occurred_at
        self._logger.info("Booking completed, recomputing caregiver", booking_id=booking.id, caregiver_id=booking.caregiver_id)
        return await self._caregiver_metrics.execute(
            booking.caregiver_id,
            MetricsWindow.ending_at(transitioned_at, self._window_days),
            trigger="booking_completed",
        )
