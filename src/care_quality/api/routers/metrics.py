"""Prometheus metrics endpoints."""

from typing import Any

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse
from prometheus_client import CONTENT_TYPE_LATEST

from ...infrastructure.monitoring import MetricsCollector
from ..dependencies import get_metrics_collector

router = APIRouter(prefix="/metrics", tags=["metrics"])


@router.get("", response_class=PlainTextResponse)
async def prometheus_metrics(collector: MetricsCollector = Depends(get_metrics_collector)) -> PlainTextResponse:
    """Metrics in the Prometheus text exposition format."""
    return PlainTextResponse(collector.get_prometheus_metrics(), media_type=CONTENT_TYPE_LATEST)


@router.get("/stats")
async def metrics_stats(collector: MetricsCollector = Depends(get_metrics_collector)) -> dict[str, Any]:
    """Uptime and collector configuration."""
    return collector.get_system_stats()
