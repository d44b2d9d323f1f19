"""Result DTOs returned by the application layer."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class StepOutcome(BaseModel):
    """Outcome of one step in a side-effecting workflow."""

    name: str = Field(..., description="Step name")
    success: bool = Field(..., description="Whether the step completed")
    error: str | None = Field(default=None, description="Error message when the step failed")
    error_type: str | None = Field(default=None, description="Exception class name when the step failed")


class DeliveryFailure(BaseModel):
    """A single notification that could not be written."""

    recipient_id: str = Field(..., description="User the notification was addressed to")
    error: str = Field(..., description="Error message")


class FanOutResult(BaseModel):
    """Aggregate result of a settle-all notification fan-out."""

    notification_type: str = Field(..., description="Notification category that was sent")
    attempted: int = Field(default=0, ge=0, description="Notifications attempted")
    delivered: int = Field(default=0, ge=0, description="Notifications written")
    failed: int = Field(default=0, ge=0, description="Notifications that failed")
    notification_ids: list[str] = Field(default_factory=list, description="Ids of written notifications")
    failures: list[DeliveryFailure] = Field(default_factory=list, description="Per-recipient failures")
    recipient_lookup_error: str | None = Field(default=None, description="Set when admin recipients could not be resolved")

    @property
    def all_delivered(self) -> bool:
        return self.failed == 0 and self.recipient_lookup_error is None

    def merge(self, other: FanOutResult) -> FanOutResult:
        """Combine two fan-outs into one tally."""
        return FanOutResult(
            notification_type=self.notification_type,
            attempted=self.attempted + other.attempted,
            delivered=self.delivered + other.delivered,
            failed=self.failed + other.failed,
            notification_ids=[*self.notification_ids, *other.notification_ids],
            failures=[*self.failures, *other.failures],
            recipient_lookup_error=self.recipient_lookup_error or other.recipient_lookup_error,
        )


class EscalationReport(BaseModel):
    """What happened while escalating one critical incident."""

    incident_id: str = Field(..., description="Escalated incident id")
    incident_number: str = Field(..., description="Escalated incident number")
    alert_id: str | None = Field(default=None, description="Admin alert id, if written")
    flagged: bool = Field(default=False, description="Whether the auto-escalation flag was stored")
    steps: list[StepOutcome] = Field(default_factory=list, description="Per-step outcomes in execution order")
    notifications: FanOutResult | None = Field(default=None, description="Admin notification fan-out")

    @property
    def complete(self) -> bool:
        return all(step.success for step in self.steps) and (
            self.notifications is None or self.notifications.all_delivered
        )


class LowRatingOutcome(BaseModel):
    """What happened in response to one new review."""

    review_id: str = Field(..., description="Triggering review id")
    rating: float = Field(..., description="Review rating")
    incident_created: bool = Field(default=False, description="Whether this call created an incident")
    duplicate: bool = Field(default=False, description="An incident already existed for this review")
    incident_id: str | None = Field(default=None, description="Incident id")
    incident_number: str | None = Field(default=None, description="Incident number")
    severity: str | None = Field(default=None, description="Incident severity")
    steps: list[StepOutcome] = Field(default_factory=list, description="Per-step outcomes in execution order")
    notifications: FanOutResult | None = Field(default=None, description="Caregiver and admin notifications")


class CaregiverFailure(BaseModel):
    """A caregiver whose metrics computation failed in a batch."""

    caregiver_id: str = Field(..., description="Caregiver id")
    error: str = Field(..., description="Error message")
    error_type: str = Field(..., description="Exception class name")


class BatchRunResult(BaseModel):
    """Summary of a scheduled metrics batch run."""

    started_at: datetime = Field(..., description="Batch start time")
    finished_at: datetime = Field(..., description="Batch end time")
    window_start: datetime = Field(..., description="Metrics window start")
    window_end: datetime = Field(..., description="Metrics window end")
    total_caregivers: int = Field(default=0, ge=0, description="Active caregivers found")
    successful: int = Field(default=0, ge=0, description="Snapshots written")
    failed: int = Field(default=0, ge=0, description="Computations that failed")
    failures: list[CaregiverFailure] = Field(default_factory=list, description="Failed caregivers")
    platform_metrics: dict[str, Any] | None = Field(default=None, description="Written platform snapshot, if any")
    rollup_error: str | None = Field(default=None, description="Set when the rollup step failed")

    @property
    def duration_seconds(self) -> float:
        return (self.finished_at - self.started_at).total_seconds()
