"""Readiness checks for the document store and the clock it stamps records with."""

import asyncio
import time
from collections import Counter
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any

import structlog

from care_quality.domain.repositories import DocumentStore

logger = structlog.get_logger(__name__)


class HealthStatus(str, Enum):
    """Health check status enumeration."""

    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


# Worst first; the overall status is the worst status reported by any check.
_SEVERITY_ORDER = (HealthStatus.UNHEALTHY, HealthStatus.DEGRADED, HealthStatus.HEALTHY)


@dataclass
class CheckReport:
    """What a check function reports; timing is added by the checker."""

    status: HealthStatus
    message: str
    details: dict[str, Any] = field(default_factory=dict)


@dataclass
class HealthCheckResult:
    """Outcome of one named check."""

    name: str
    status: HealthStatus
    message: str
    duration_ms: float
    checked_at: datetime
    details: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "status": self.status.value,
            "message": self.message,
            "duration_ms": round(self.duration_ms, 3),
            "checked_at": self.checked_at.isoformat(),
            "details": self.details,
        }


Check = Callable[[], Awaitable[CheckReport]]


class HealthChecker:
    """
    Runs the engine's readiness checks.

    ``document_store`` pings the store. ``system_time`` compares the local
    clock with the store's server timestamp: metrics windows are computed from
    the local clock while records are stamped by the store, so a drift larger
    than ``max_clock_skew_seconds`` reports the service as degraded. Every
    check runs under ``timeout_seconds``; a check that times out or raises is
    unhealthy.
    """

    def __init__(self, store: DocumentStore, timeout_seconds: float = 5.0, max_clock_skew_seconds: float = 5.0) -> None:
        self._store = store
        self.timeout_seconds = timeout_seconds
        self.max_clock_skew_seconds = max_clock_skew_seconds
        self._checks: dict[str, Check] = {}

        self.register_check("document_store", self._check_document_store)
        self.register_check("system_time", self._check_clock_skew)

    def register_check(self, name: str, check: Check) -> None:
        self._checks[name] = check
        logger.debug("Health check registered", name=name)

    async def run_check(self, name: str) -> HealthCheckResult:
        """Run one registered check.

        Raises:
            KeyError: If no check is registered under ``name``
        """
        check = self._checks[name]
        started = time.perf_counter()
        try:
            report = await asyncio.wait_for(check(), timeout=self.timeout_seconds)
        except TimeoutError:
            report = CheckReport(
                HealthStatus.UNHEALTHY,
                f"Check did not finish within {self.timeout_seconds}s",
                {"timeout": True},
            )
        except Exception as e:
            report = CheckReport(
                HealthStatus.UNHEALTHY,
                f"Check failed: {e}",
                {"error": str(e), "exception_type": type(e).__name__},
            )

        result = HealthCheckResult(
            name=name,
            status=report.status,
            message=report.message,
            duration_ms=(time.perf_counter() - started) * 1000,
            checked_at=datetime.now(UTC),
            details=report.details,
        )
        if result.status != HealthStatus.HEALTHY:
            logger.warning("Health check not healthy", check=name, status=result.status.value, message=result.message)
        return result

    async def get_overall_health(self) -> dict[str, Any]:
        """Run every check concurrently and summarize them."""
        results = await asyncio.gather(*(self.run_check(name) for name in self._checks))
        counts = Counter(result.status for result in results)
        overall = next((status for status in _SEVERITY_ORDER if counts[status]), HealthStatus.HEALTHY)

        return {
            "overall_status": overall.value,
            "timestamp": datetime.now(UTC).isoformat(),
            "summary": {
                "total_checks": len(results),
                "healthy": counts[HealthStatus.HEALTHY],
                "degraded": counts[HealthStatus.DEGRADED],
                "unhealthy": counts[HealthStatus.UNHEALTHY],
            },
            "checks": {result.name: result.to_dict() for result in results},
        }

    async def _check_document_store(self) -> CheckReport:
        await self._store.ping()
        return CheckReport(HealthStatus.HEALTHY, "Document store is responding", {"store": type(self._store).__name__})

    async def _check_clock_skew(self) -> CheckReport:
        server_time = await self._store.server_timestamp()
        skew = abs((datetime.now(UTC) - server_time).total_seconds())
        details = {"server_time": server_time.isoformat(), "skew_seconds": round(skew, 3)}
        if skew > self.max_clock_skew_seconds:
            return CheckReport(HealthStatus.DEGRADED, f"Local clock is {skew:.1f}s away from the store clock", details)
        return CheckReport(HealthStatus.HEALTHY, "Local clock agrees with the store clock", details)
