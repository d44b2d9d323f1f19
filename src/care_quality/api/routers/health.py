"""Health check endpoints for load balancers and monitoring."""

from typing import Any

from fastapi import APIRouter, Depends, Response, status

from ...infrastructure.health import HealthChecker, HealthStatus
from ..dependencies import get_health_checker

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health(response: Response, checker: HealthChecker = Depends(get_health_checker)) -> dict[str, Any]:
    """Overall health with per-check results; 503 when any check is unhealthy."""
    report = await checker.get_overall_health()
    if report["overall_status"] == HealthStatus.UNHEALTHY.value:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return report


@router.get("/live")
async def liveness() -> dict[str, str]:
    """Liveness probe."""
    return {"status": "alive"}
