"""Domain enums for incidents, bookings, notifications and quality tiers."""

from enum import Enum


class IncidentSeverity(str, Enum):
    """Enumeration of incident severity levels."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class IncidentStatus(str, Enum):
    """Lifecycle states of an incident."""

    REPORTED = "reported"
    UNDER_INVESTIGATION = "under_investigation"
    ESCALATED = "escalated"
    RESOLVED = "resolved"
    CLOSED = "closed"


class IncidentType(str, Enum):
    """Enumeration of incident types."""

    SERVICE_QUALITY_ISSUE = "serviceQualityIssue"
    SAFETY_CONCERN = "safetyConcern"
    MISCONDUCT = "misconduct"
    NO_SHOW = "noShow"
    OTHER = "other"


class BookingStatus(str, Enum):
    """Booking lifecycle states that the metrics calculator distinguishes."""

    REQUESTED = "requested"
    ACCEPTED = "accepted"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    NO_SHOW = "no_show"


class UserRole(str, Enum):
    """Platform roles."""

    ADMIN = "admin"
    CAREGIVER = "caregiver"
    CLIENT = "client"
    SYSTEM = "system"


class NotificationPriority(str, Enum):
    """Delivery priority of notifications and admin alerts."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class NotificationType(str, Enum):
    """Notification categories consumed by the UI."""

    CRITICAL_INCIDENT = "critical_incident"
    INCIDENT_CREATED = "incident_created"
    LOW_RATING_ALERT = "low_rating_alert"


class PerformanceTier(str, Enum):
    """Discrete banding of the quality score, highest first."""

    EXCELLENT = "Excellent"
    VERY_GOOD = "Very Good"
    GOOD = "Good"
    SATISFACTORY = "Satisfactory"
    NEEDS_IMPROVEMENT = "Needs Improvement"
