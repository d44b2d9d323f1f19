"""Review record."""

from typing import ClassVar

from pydantic import Field

from .base import Record, UtcDatetime


class Review(Record):
    """A client's rating of a caregiver. Immutable once created."""

    collection: ClassVar[str] = "reviews"

    reviewer_id: str
    reviewer_name: str | None = None
    reviewee_id: str
    reviewee_name: str | None = None
    rating: float = Field(..., ge=0.0, le=5.0)
    comment: str | None = None
    booking_id: str | None = None
    created_at: UtcDatetime | None = None
