"""Booking record, read-only to the quality engine."""

from typing import ClassVar

from care_quality.domain.enums import BookingStatus

from .base import Record, UtcDatetime

_SECONDS_PER_HOUR = 3600


class Booking(Record):
    """A booking between a client and a caregiver.

    ``status`` is kept as a plain string so statuses introduced by the booking
    workflow do not invalidate the record.
    """

    collection: ClassVar[str] = "bookings"

    caregiver_id: str
    client_id: str | None = None
    status: str
    created_at: UtcDatetime
    accepted_at: UtcDatetime | None = None
    start_time: UtcDatetime | None = None
    end_time: UtcDatetime | None = None
    cancelled_by: str | None = None
    updated_at: UtcDatetime | None = None

    @property
    def is_completed(self) -> bool:
        return self.status == BookingStatus.COMPLETED

    @property
    def is_cancelled(self) -> bool:
        return self.status == BookingStatus.CANCELLED

    @property
    def response_time_hours(self) -> float | None:
        """Hours between creation and acceptance, if accepted."""
        if self.accepted_at is None:
            return None
        return (self.accepted_at - self.created_at).total_seconds() / _SECONDS_PER_HOUR

    @property
    def duration_hours(self) -> float | None:
        """Scheduled duration in hours, if both ends are known."""
        if self.start_time is None or self.end_time is None:
            return None
        return (self.end_time - self.start_time).total_seconds() / _SECONDS_PER_HOUR
