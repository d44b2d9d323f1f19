"""Use case rolling caregiver snapshots into a platform summary."""

from __future__ import annotations

import structlog

from care_quality.core.exceptions import RecordValidationError
from care_quality.domain.entities import PlatformMetricsSnapshot, QualityMetricsSnapshot
from care_quality.domain.repositories import DocumentStore
from care_quality.domain.services import PlatformRollupCalculator

logger = structlog.get_logger(__name__)

DEFAULT_ROLLUP_LIMIT = 1000


class CalculatePlatformMetricsUseCase:
    """Reads the newest snapshots, keeps the latest per caregiver and appends a summary."""

    def __init__(
        self,
        store: DocumentStore,
        calculator: PlatformRollupCalculator | None = None,
        limit: int = DEFAULT_ROLLUP_LIMIT,
    ) -> None:
        self._store = store
        self._calculator = calculator or PlatformRollupCalculator()
        self._limit = limit

    async def execute(self) -> PlatformMetricsSnapshot | None:
        """Compute and store the platform summary.

        Returns:
            The stored summary, or None when there are no snapshots to roll up
        """
        documents = await self._store.query(
            QualityMetricsSnapshot.collection,
            order_by="calculatedAt",
            descending=True,
            limit=self._limit,
        )

        snapshots: list[QualityMetricsSnapshot] = []
        for document in documents:
            try:
                snapshots.append(QualityMetricsSnapshot.from_document(document))
            except RecordValidationError as e:
                logger.warning("Skipping malformed quality snapshot", snapshot_id=document.get("id"), error=str(e))

        summary = self._calculator.summarize(snapshots)
        if summary is None:
            logger.info("No quality snapshots to roll up")
            return None

        summary = summary.model_copy(update={"calculated_at": await self._store.server_timestamp()})
        summary_id = await self._store.add(PlatformMetricsSnapshot.collection, summary.to_document())

        logger.info(
            "Platform metrics stored",
            summary_id=summary_id,
            total_caregivers=summary.total_caregivers,
            average_quality_score=round(summary.average_quality_score, 2),
        )
        return summary.model_copy(update={"id": summary_id})
