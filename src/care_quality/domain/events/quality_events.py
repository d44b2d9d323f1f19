"""Events delivered to the quality engine by the event-delivery collaborator."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from care_quality.domain.entities import Booking, Incident, Review

from .base import DomainEvent


@dataclass(frozen=True)
class ReviewCreated(DomainEvent):
    """A review document was created. Edits never produce this event."""

    review: Review | None = None


@dataclass(frozen=True)
class IncidentCreated(DomainEvent):
    """An incident document was created, by a person or by the engine."""

    incident: Incident | None = None


@dataclass(frozen=True)
class BookingUpdated(DomainEvent):
    """A booking document changed; carries both versions."""

    before: Booking | None = None
    after: Booking | None = None

    @property
    def completed_now(self) -> bool:
        """True when this update moved the booking into ``completed``."""
        if self.before is None or self.after is None:
            return False
        return not self.before.is_completed and self.after.is_completed

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["before_status"] = self.before.status if self.before else None
        data["after_status"] = self.after.status if self.after else None
        return data


@dataclass(frozen=True)
class WeeklyScheduleTick(DomainEvent):
    """The weekly metrics schedule fired (Sunday 00:00 UTC)."""

    schedule: str = "0 0 * * 0"
