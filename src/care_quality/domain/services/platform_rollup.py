"""Platform-wide rollup of caregiver quality snapshots."""

from __future__ import annotations

from collections.abc import Sequence

import structlog

from care_quality.domain.entities import (
    CaregiverStatistics,
    PlatformMetricsSnapshot,
    QualityMetricsSnapshot,
    TierHistogram,
)
from care_quality.domain.enums import PerformanceTier

from .quality_scoring import HIGH_PERFORMER_THRESHOLD

logger = structlog.get_logger(__name__)


def latest_per_caregiver(snapshots: Sequence[QualityMetricsSnapshot]) -> list[QualityMetricsSnapshot]:
    """Keep the most recent snapshot of each caregiver.

    ``snapshots`` must already be ordered newest first, as the rollup query
    returns them; the first snapshot seen for a caregiver wins.
    """
    seen: set[str] = set()
    latest: list[QualityMetricsSnapshot] = []
    for snapshot in snapshots:
        if snapshot.caregiver_id in seen:
            continue
        seen.add(snapshot.caregiver_id)
        latest.append(snapshot)
    return latest


def _tier_histogram(snapshots: Sequence[QualityMetricsSnapshot]) -> TierHistogram:
    def count(tier: PerformanceTier) -> int:
        return sum(1 for s in snapshots if s.performance_tier == tier)

    return TierHistogram(
        excellent=count(PerformanceTier.EXCELLENT),
        very_good=count(PerformanceTier.VERY_GOOD),
        good=count(PerformanceTier.GOOD),
        satisfactory=count(PerformanceTier.SATISFACTORY),
        needs_improvement=count(PerformanceTier.NEEDS_IMPROVEMENT),
    )


class PlatformRollupCalculator:
    """Aggregate caregiver snapshots into one platform summary."""

    def summarize(self, snapshots: Sequence[QualityMetricsSnapshot]) -> PlatformMetricsSnapshot | None:
        """Summarize newest-first snapshots; returns None when there are none."""
        if not snapshots:
            return None

        latest = latest_per_caregiver(snapshots)
        total = len(latest)

        summary = PlatformMetricsSnapshot(
            total_caregivers=total,
            snapshots_considered=len(snapshots),
            average_quality_score=sum(s.quality_score for s in latest) / total,
            average_rating=sum(s.average_rating for s in latest) / total,
            average_completion_rate=sum(s.completion_rate for s in latest) / total,
            caregiver_performance_tiers=_tier_histogram(latest),
            caregiver_statistics=CaregiverStatistics(
                high_performers=sum(1 for s in latest if s.quality_score >= HIGH_PERFORMER_THRESHOLD),
                needing_attention=sum(1 for s in latest if s.needs_attention),
                with_critical_incidents=sum(1 for s in latest if s.critical_incidents > 0),
            ),
        )

        if total < len(snapshots):
            logger.debug("Dropped stale caregiver snapshots", considered=len(snapshots), kept=total)
        return summary
