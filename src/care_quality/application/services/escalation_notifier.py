"""Admin alerts and notification fan-out for incidents."""

from __future__ import annotations

import asyncio

import structlog

from care_quality.application.dtos import DeliveryFailure, EscalationReport, FanOutResult
from care_quality.domain.entities import AdminAlert, Incident, Notification, Review, User
from care_quality.domain.enums import NotificationPriority, NotificationType, UserRole
from care_quality.domain.repositories import DocumentStore, eq
from care_quality.infrastructure.monitoring import MetricsCollector

from .workflow import WorkflowRecorder

logger = structlog.get_logger(__name__)

ESCALATION_REASON = "Automatically escalated due to critical severity"


class EscalationNotifier:
    """
    Writes admin alerts and per-user notifications about incidents.

    Every fan-out is settle-all: one failed write never prevents the others,
    and failures are tallied in the returned :class:`FanOutResult` instead
    of raised. Admin recipients are looked up at send time.
    """

    def __init__(self, store: DocumentStore, metrics: MetricsCollector | None = None) -> None:
        self._store = store
        self._metrics = metrics
        self._logger = logger.bind(service="EscalationNotifier")

    async def admin_ids(self) -> list[str]:
        """Ids of every user whose role is admin."""
        documents = await self._store.query(User.collection, filters=[eq("role", UserRole.ADMIN.value)])
        return [doc["id"] for doc in documents if doc.get("id")]

    async def fan_out(self, recipient_ids: list[str], template: Notification) -> FanOutResult:
        """Write one copy of ``template`` per recipient, settling every write.

        Args:
            recipient_ids: Users to notify
            template: Notification whose ``user_id`` is replaced per recipient

        Returns:
            Delivered/failed tally for the fan-out
        """
        results = await asyncio.gather(
            *(self._send(template.model_copy(update={"user_id": user_id})) for user_id in recipient_ids),
            return_exceptions=True,
        )

        result = FanOutResult(notification_type=str(template.notification_type), attempted=len(recipient_ids))
        for user_id, outcome in zip(recipient_ids, results, strict=True):
            if isinstance(outcome, BaseException):
                result.failed += 1
                result.failures.append(DeliveryFailure(recipient_id=user_id, error=str(outcome)))
                self._logger.warning("Notification delivery failed", recipient_id=user_id, error=str(outcome))
            else:
                result.delivered += 1
                result.notification_ids.append(outcome)

        if self._metrics:
            self._metrics.record_notifications(result.notification_type, result.delivered, result.failed)
        return result

    async def notify_admins(self, template: Notification) -> FanOutResult:
        """Fan ``template`` out to every admin.

        A failed recipient lookup is reported on the result rather than raised.
        """
        try:
            recipients = await self.admin_ids()
        except Exception as e:
            self._logger.error("Admin recipient lookup failed", error=str(e), exc_info=True)
            return FanOutResult(notification_type=str(template.notification_type), recipient_lookup_error=str(e))
        return await self.fan_out(recipients, template)

    async def escalate_critical(self, incident: Incident) -> EscalationReport:
        """Escalate a critical incident.

        Three independent steps run in order: write an urgent admin alert,
        flag the incident as auto-escalated, notify every admin. A failing step
        is recorded and the following steps still run; nothing written by an
        earlier step is undone.
        """
        if incident.id is None:
            raise ValueError("Cannot escalate an incident without an id")

        workflow = WorkflowRecorder("escalate_critical", incident_id=incident.id)
        report = EscalationReport(incident_id=incident.id, incident_number=incident.incident_number)

        report.alert_id = await workflow.run("admin_alert", lambda: self._write_alert(incident))
        flagged = await workflow.run("escalation_flag", lambda: self._flag_escalated(incident))
        report.flagged = bool(flagged)
        report.notifications = await workflow.run(
            "admin_notifications",
            lambda: self.notify_admins(
                Notification(
                    user_id="",
                    title="🚨 Critical Incident Alert",
                    message=f"{incident.incident_number}: {incident.title}",
                    notification_type=NotificationType.CRITICAL_INCIDENT,
                    related_id=incident.id,
                    priority=NotificationPriority.HIGH,
                )
            ),
        )
        report.steps = workflow.steps

        if self._metrics:
            self._metrics.record_escalation("complete" if report.complete else "partial")
        self._logger.info(
            "Critical incident escalated",
            incident_id=incident.id,
            incident_number=incident.incident_number,
            complete=report.complete,
            failed_steps=workflow.failed_steps,
        )
        return report

    async def notify_low_rating(self, incident: Incident, review: Review) -> FanOutResult:
        """Tell the caregiver and every admin about a low-rating incident."""
        caregiver_result = await self.fan_out(
            [review.reviewee_id],
            Notification(
                user_id=review.reviewee_id,
                title="Low Rating Received",
                message="A low rating has triggered an automatic quality review. Please review the feedback.",
                notification_type=NotificationType.INCIDENT_CREATED,
                related_id=incident.id,
                priority=NotificationPriority.MEDIUM,
            ),
        )
        admin_result = await self.notify_admins(
            Notification(
                user_id="",
                title="Low Rating Alert",
                message=(
                    f"{review.reviewee_name or review.reviewee_id} received a {review.rating:.1f} star rating. "
                    f"Incident {incident.incident_number} created."
                ),
                notification_type=NotificationType.LOW_RATING_ALERT,
                related_id=incident.id,
                priority=NotificationPriority.MEDIUM,
            )
        )
        return caregiver_result.merge(admin_result)

    async def _send(self, notification: Notification) -> str:
        created_at = await self._store.server_timestamp()
        stamped = notification.model_copy(update={"created_at": created_at})
        return await self._store.add(Notification.collection, stamped.to_document())

    async def _write_alert(self, incident: Incident) -> str:
        alert = AdminAlert(
            alert_type=NotificationType.CRITICAL_INCIDENT,
            title=f"Critical Incident: {incident.incident_number}",
            message=f"A critical incident has been reported: {incident.title}",
            incident_id=incident.id,
            incident_number=incident.incident_number,
            severity=str(incident.severity),
            reporter_id=incident.reporter_id,
            reporter_name=incident.reporter_name,
            priority=NotificationPriority.URGENT,
            created_at=await self._store.server_timestamp(),
        )
        return await self._store.add(AdminAlert.collection, alert.to_document())

    async def _flag_escalated(self, incident: Incident) -> bool:
        await self._store.update(
            Incident.collection,
            incident.id,
            {
                "autoEscalated": True,
                "escalatedAt": await self._store.server_timestamp(),
                "escalationReason": ESCALATION_REASON,
            },
        )
        return True
