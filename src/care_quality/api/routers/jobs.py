"""Manually triggered metrics jobs."""

from fastapi import APIRouter, Depends

from ...application.dtos import BatchRunResult
from ...application.use_cases import (
    CalculateCaregiverMetricsUseCase,
    CalculatePlatformMetricsUseCase,
    QualityMetricsBatchUseCase,
)
from ...domain.events import WeeklyScheduleTick
from ..dependencies import (
    get_calculate_caregiver_metrics,
    get_calculate_platform_metrics,
    get_quality_metrics_batch,
)
from ..schemas import QualityMetricsJobRequest

router = APIRouter(prefix="/jobs", tags=["jobs"])


@router.post("/quality-metrics", response_model=BatchRunResult)
async def run_quality_metrics(
    payload: QualityMetricsJobRequest | None = None,
    use_case: QualityMetricsBatchUseCase = Depends(get_quality_metrics_batch),
) -> BatchRunResult:
    """Run the weekly batch now: every active caregiver, then the rollup."""
    tick = WeeklyScheduleTick.create(aggregate_id="quality-metrics", occurred_at=payload.now if payload else None)
    return await use_case.handle_tick(tick)


@router.post("/caregivers/{caregiver_id}/metrics")
async def run_caregiver_metrics(
    caregiver_id: str,
    use_case: CalculateCaregiverMetricsUseCase = Depends(get_calculate_caregiver_metrics),
) -> dict:
    """Recompute one caregiver over the trailing window."""
    snapshot = await use_case.execute(caregiver_id, trigger="manual")
    return snapshot.model_dump(mode="json", by_alias=True)


@router.post("/platform-metrics")
async def run_platform_metrics(
    use_case: CalculatePlatformMetricsUseCase = Depends(get_calculate_platform_metrics),
) -> dict:
    """Recompute the platform rollup from stored snapshots."""
    summary = await use_case.execute()
    return {"written": summary is not None, "summary": summary.model_dump(mode="json", by_alias=True) if summary else None}
