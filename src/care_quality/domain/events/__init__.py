"""Domain events."""

from .base import DomainEvent
from .quality_events import BookingUpdated, IncidentCreated, ReviewCreated, WeeklyScheduleTick

__all__ = [
    "DomainEvent",
    "ReviewCreated",
    "IncidentCreated",
    "BookingUpdated",
    "WeeklyScheduleTick",
]
