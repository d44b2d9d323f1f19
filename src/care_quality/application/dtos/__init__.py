"""Data Transfer Objects for the application layer."""

from .results import (
    BatchRunResult,
    CaregiverFailure,
    DeliveryFailure,
    EscalationReport,
    FanOutResult,
    LowRatingOutcome,
    StepOutcome,
)

__all__ = [
    "StepOutcome",
    "DeliveryFailure",
    "FanOutResult",
    "EscalationReport",
    "LowRatingOutcome",
    "CaregiverFailure",
    "BatchRunResult",
]
