"""Notification and admin alert records."""

from typing import ClassVar

from pydantic import Field

from care_quality.domain.enums import NotificationPriority, NotificationType

from .base import Record, UtcDatetime


class Notification(Record):
    """A message addressed to one user. Write-once from this engine."""

    collection: ClassVar[str] = "notifications"

    user_id: str
    title: str
    message: str
    notification_type: NotificationType = Field(alias="type")
    related_id: str | None = None
    is_read: bool = False
    priority: NotificationPriority = NotificationPriority.MEDIUM
    created_at: UtcDatetime | None = None


class AdminAlert(Record):
    """A platform-level alert shown to every administrator."""

    collection: ClassVar[str] = "admin_alerts"

    alert_type: NotificationType = Field(alias="type")
    title: str
    message: str
    incident_id: str | None = None
    incident_number: str | None = None
    severity: str | None = None
    reporter_id: str | None = None
    reporter_name: str | None = None
    is_read: bool = False
    priority: NotificationPriority = NotificationPriority.URGENT
    created_at: UtcDatetime | None = None
