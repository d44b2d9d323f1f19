"""Request and response models for the HTTP surface."""

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ..domain.entities import Booking, Incident, Review


class ErrorResponse(BaseModel):
    """Standardized error response model."""

    error: bool = True
    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable message")
    details: dict[str, Any] = Field(default_factory=dict, description="Structured error context")
    timestamp: str = Field(default_factory=lambda: datetime.now(UTC).isoformat(), description="Response timestamp")
    status_code: int = Field(..., description="HTTP status code")


class ReviewCreatedRequest(BaseModel):
    """A review document that has just been created."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "review": {
                    "id": "rev_123",
                    "reviewerId": "client_1",
                    "reviewerName": "Ana",
                    "revieweeId": "cg_1",
                    "revieweeName": "Maria",
                    "rating": 1.5,
                    "comment": "Arrived late",
                    "bookingId": "bk_1",
                    "createdAt": "2025-03-02T10:00:00Z",
                }
            }
        }
    )

    review: Review
    occurred_at: datetime | None = Field(default=None, description="When the review was created")


class IncidentCreatedRequest(BaseModel):
    """An incident document that has just been created."""

    incident: Incident
    occurred_at: datetime | None = Field(default=None, description="When the incident was created")


class BookingUpdatedRequest(BaseModel):
    """Before and after versions of an updated booking."""

    before: Booking
    after: Booking
    occurred_at: datetime | None = Field(default=None, description="When the update happened")


class QualityMetricsJobRequest(BaseModel):
    """Parameters for a manually triggered metrics run."""

    now: datetime | None = Field(default=None, description="Window end; defaults to the current time")


class EventAcceptedResponse(BaseModel):
    """Outcome of delivering one event."""

    event_id: str = Field(..., description="Id assigned to the delivered event")
    event_type: str = Field(..., description="Event class name")
    handled: bool = Field(..., description="Whether the event triggered any work")
    result: dict[str, Any] | None = Field(default=None, description="Outcome of the triggered work")
