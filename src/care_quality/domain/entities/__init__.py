"""Domain entities: the records the engine reads and writes."""

from .base import Record, UtcDatetime
from .booking import Booking
from .incident import Incident, TimelineEntry
from .metrics import (
    STAR_BUCKETS,
    CaregiverStatistics,
    PlatformMetricsSnapshot,
    QualityMetricsSnapshot,
    TierHistogram,
)
from .notification import AdminAlert, Notification
from .review import Review
from .user import User

__all__ = [
    "Record",
    "UtcDatetime",
    "Booking",
    "Incident",
    "TimelineEntry",
    "Review",
    "User",
    "Notification",
    "AdminAlert",
    "QualityMetricsSnapshot",
    "PlatformMetricsSnapshot",
    "TierHistogram",
    "CaregiverStatistics",
    "STAR_BUCKETS",
]
