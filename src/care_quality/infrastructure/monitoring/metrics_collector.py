"""Prometheus metrics for the quality engine's workflows."""

import time
from dataclasses import dataclass
from datetime import timedelta
from typing import Any

import structlog
from prometheus_client import CollectorRegistry, Counter, Gauge, Histogram, generate_latest

logger = structlog.get_logger(__name__)


@dataclass
class MetricsConfig:
    """Configuration for metrics collection."""

    enable_prometheus: bool = True
    registry: CollectorRegistry | None = None
    metric_prefix: str = "care_quality"


class MetricsCollector:
    """Prometheus-based metrics collector for the quality engine."""

    def __init__(self, config: MetricsConfig | None = None) -> None:
        """Initialize metrics collector with configuration."""
        self.config = config or MetricsConfig()
        self.registry = self.config.registry or CollectorRegistry()

        self._init_prometheus_metrics()
        self._start_time = time.time()

    def _init_prometheus_metrics(self) -> None:
        """Initialize Prometheus metrics."""
        prefix = self.config.metric_prefix

        # Incident metrics
        self.incidents_created_total = Counter(
            f"{prefix}_incidents_created_total",
            "Incidents created automatically from low ratings",
            labelnames=["severity"],
            registry=self.registry,
        )

        self.escalations_total = Counter(
            f"{prefix}_escalations_total",
            "Critical incident escalations by outcome",
            labelnames=["outcome"],
            registry=self.registry,
        )

        # Notification metrics
        self.notifications_total = Counter(
            f"{prefix}_notifications_total",
            "Notification writes by type and status",
            labelnames=["type", "status"],
            registry=self.registry,
        )

        # Quality metrics computations
        self.caregiver_computations_total = Counter(
            f"{prefix}_caregiver_computations_total",
            "Per-caregiver metrics computations by status",
            labelnames=["trigger", "status"],
            registry=self.registry,
        )

        self.quality_score = Histogram(
            f"{prefix}_quality_score",
            "Distribution of computed caregiver quality scores",
            buckets=[0, 10, 20, 30, 40, 50, 60, 70, 80, 90, 100],
            registry=self.registry,
        )

        # Batch metrics
        self.batch_runs_total = Counter(
            f"{prefix}_batch_runs_total",
            "Scheduled metrics batch runs",
            registry=self.registry,
        )

        self.batch_duration = Histogram(
            f"{prefix}_batch_duration_seconds",
            "Scheduled metrics batch duration in seconds",
            registry=self.registry,
        )

        self.last_batch_failures = Gauge(
            f"{prefix}_last_batch_failures",
            "Caregiver computations that failed in the last batch run",
            registry=self.registry,
        )

        # Error metrics
        self.errors_total = Counter(
            f"{prefix}_errors_total", "Total errors by type", labelnames=["error_type", "component"], registry=self.registry
        )

        logger.info("Prometheus metrics initialized", prefix=prefix)

    def record_incident_created(self, severity: str) -> None:
        """Record an automatically created incident."""
        self.incidents_created_total.labels(severity=severity).inc()

    def record_escalation(self, outcome: str) -> None:
        """Record a critical incident escalation outcome ("complete" or "partial")."""
        self.escalations_total.labels(outcome=outcome).inc()

    def record_notifications(self, notification_type: str, delivered: int, failed: int) -> None:
        """Record the outcome of a notification fan-out."""
        if delivered:
            self.notifications_total.labels(type=notification_type, status="delivered").inc(delivered)
        if failed:
            self.notifications_total.labels(type=notification_type, status="failed").inc(failed)

        logger.debug("Notifications recorded", type=notification_type, delivered=delivered, failed=failed)

    def record_caregiver_computation(self, trigger: str, success: bool, quality_score: float | None = None) -> None:
        """Record one caregiver metrics computation."""
        self.caregiver_computations_total.labels(trigger=trigger, status="success" if success else "failure").inc()
        if quality_score is not None:
            self.quality_score.observe(quality_score)

    def record_batch_run(self, duration_seconds: float, failed: int) -> None:
        """Record a finished scheduled batch run."""
        self.batch_runs_total.inc()
        self.batch_duration.observe(duration_seconds)
        self.last_batch_failures.set(failed)

        logger.debug("Batch run recorded", duration_seconds=duration_seconds, failed=failed)

    def record_error(self, error_type: str, component: str) -> None:
        """Record error metrics."""
        self.errors_total.labels(error_type=error_type, component=component).inc()

        logger.debug("Error recorded", error_type=error_type, component=component)

    def get_prometheus_metrics(self) -> str:
        """Get Prometheus metrics in text format."""
        if not self.config.enable_prometheus:
            return ""

        return generate_latest(self.registry).decode("utf-8")

    def get_system_stats(self) -> dict[str, Any]:
        """Get uptime and configuration summary."""
        uptime_seconds = time.time() - self._start_time

        return {
            "uptime_seconds": uptime_seconds,
            "uptime_human": str(timedelta(seconds=int(uptime_seconds))),
            "enable_prometheus": self.config.enable_prometheus,
            "metric_prefix": self.config.metric_prefix,
        }
