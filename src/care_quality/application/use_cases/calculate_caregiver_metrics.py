"""Use case computing and storing one caregiver's quality snapshot."""

from __future__ import annotations

import asyncio

import structlog

from care_quality.core.exceptions import MetricsCalculationError
from care_quality.domain.entities import Booking, Incident, QualityMetricsSnapshot, Review
from care_quality.domain.repositories import DocumentStore, created_between, eq
from care_quality.domain.services import CaregiverMetricsCalculator
from care_quality.domain.value_objects import DEFAULT_WINDOW_DAYS, MetricsWindow
from care_quality.infrastructure.monitoring import MetricsCollector

logger = structlog.get_logger(__name__)


class CalculateCaregiverMetricsUseCase:
    """
    Fetches a caregiver's windowed records, derives the snapshot and appends it.

    Bookings, reviews and incidents are fetched concurrently. Any failure,
    including a malformed upstream record, is raised as
    :class:`MetricsCalculationError` for that caregiver alone.
    """

    def __init__(
        self,
        store: DocumentStore,
        calculator: CaregiverMetricsCalculator | None = None,
        metrics: MetricsCollector | None = None,
        window_days: int = DEFAULT_WINDOW_DAYS,
    ) -> None:
        self._store = store
        self._calculator = calculator or CaregiverMetricsCalculator()
        self._metrics = metrics
        self._window_days = window_days

    async def execute(
        self,
        caregiver_id: str,
        window: MetricsWindow | None = None,
        trigger: str = "manual",
    ) -> QualityMetricsSnapshot:
        """
        Compute and store the snapshot for ``caregiver_id``.

        Args:
            caregiver_id: Caregiver to compute
            window: Metrics window; defaults to the trailing window ending now
            trigger: Label for what caused the computation (scheduled, booking, manual)

        Returns:
            The stored snapshot, with its id and calculation time

        Raises:
            MetricsCalculationError: If fetching, deriving or storing fails
        """
        window = window or MetricsWindow.trailing(self._window_days)
        log = logger.bind(caregiver_id=caregiver_id, trigger=trigger)

        try:
            booking_docs, review_docs, incident_docs = await asyncio.gather(
                self._store.query(
                    Booking.collection,
                    filters=[eq("caregiverId", caregiver_id), *created_between(window.start, window.end)],
                ),
                self._store.query(
                    Review.collection,
                    filters=[eq("revieweeId", caregiver_id), *created_between(window.start, window.end)],
                ),
                self._store.query(
                    Incident.collection,
                    filters=[eq("caregiverId", caregiver_id), *created_between(window.start, window.end)],
                ),
            )

            snapshot = self._calculator.calculate(
                caregiver_id,
                window,
                bookings=[Booking.from_document(doc) for doc in booking_docs],
                reviews=[Review.from_document(doc) for doc in review_docs],
                incidents=[Incident.from_document(doc) for doc in incident_docs],
            )
            snapshot = snapshot.model_copy(update={"calculated_at": await self._store.server_timestamp()})
            snapshot_id = await self._store.add(QualityMetricsSnapshot.collection, snapshot.to_document())
        except Exception as e:
            log.error("Caregiver metrics calculation failed", error=str(e), error_type=type(e).__name__)
            if self._metrics:
                self._metrics.record_caregiver_computation(trigger, success=False)
            raise MetricsCalculationError(caregiver_id, str(e), {"error_type": type(e).__name__}) from e

        if self._metrics:
            self._metrics.record_caregiver_computation(trigger, success=True, quality_score=snapshot.quality_score)
        log.info(
            "Caregiver metrics stored",
            snapshot_id=snapshot_id,
            quality_score=round(snapshot.quality_score, 2),
            performance_tier=snapshot.performance_tier,
            needs_attention=snapshot.needs_attention,
        )
        return snapshot.model_copy(update={"id": snapshot_id})
