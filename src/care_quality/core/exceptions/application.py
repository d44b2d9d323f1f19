"""Application-specific exception classes."""

from typing import Any

from .base import ApplicationError


class UseCaseError(ApplicationError):
    """Base exception for use case errors."""

    pass


class MetricsCalculationError(UseCaseError):
    """Raised when one caregiver's metrics computation fails."""

    def __init__(self, caregiver_id: str, reason: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            f"Metrics calculation failed for caregiver {caregiver_id}: {reason}",
            "METRICS_CALCULATION_ERROR",
            {"caregiver_id": caregiver_id, **(details or {})},
        )
        self.caregiver_id = caregiver_id
        self.reason = reason


class InvalidEventError(ApplicationError):
    """Raised when a trigger event does not carry a stored record."""

    def __init__(self, event_type: str, reason: str) -> None:
        super().__init__(
            f"Invalid {event_type} event: {reason}",
            "INVALID_EVENT",
            {"event_type": event_type},
        )
