"""Use case escalating newly created critical incidents."""

from __future__ import annotations

import structlog

from care_quality.application.dtos import EscalationReport
from care_quality.application.services import EscalationNotifier
from care_quality.core.exceptions import InvalidEventError
from care_quality.domain.events import IncidentCreated

logger = structlog.get_logger(__name__)


class EscalateCriticalIncidentUseCase:
    """Escalates critical incidents on creation; other severities are ignored."""

    def __init__(self, notifier: EscalationNotifier) -> None:
        self._notifier = notifier

    async def handle(self, event: IncidentCreated) -> EscalationReport | None:
        """Escalate the incident carried by ``event`` if it is critical.

        Returns:
            The escalation report, or None when the incident is not critical

        Raises:
            InvalidEventError: If the event carries no stored incident
        """
        incident = event.incident
        if incident is None or incident.id is None:
            raise InvalidEventError(type(event).__name__, "no stored incident attached")

        if not incident.is_critical:
            logger.debug("Incident not critical, skipping escalation", incident_id=incident.id, severity=incident.severity)
            return None

        return await self._notifier.escalate_critical(incident)
