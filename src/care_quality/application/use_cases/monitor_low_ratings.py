"""Use case turning low-rated reviews into tracked incidents."""

from __future__ import annotations

import structlog

from care_quality.application.dtos import LowRatingOutcome
from care_quality.application.services import EscalationNotifier, WorkflowRecorder
from care_quality.core.exceptions import DocumentAlreadyExistsError, DocumentNotFoundError, InvalidEventError
from care_quality.domain.entities import Incident, Review
from care_quality.domain.events import ReviewCreated
from care_quality.domain.repositories import DocumentStore, eq
from care_quality.domain.services import IncidentNumberAllocator, LowRatingIncidentFactory
from care_quality.infrastructure.monitoring import MetricsCollector

logger = structlog.get_logger(__name__)


def incident_id_for_review(review_id: str) -> str:
    """Document id of the incident raised for a review; one review, one incident."""
    return f"review-{review_id}"


class MonitorLowRatingsUseCase:
    """
    Reacts to review creation.

    A qualifying review gets an incident number, an incident record and
    notifications to the caregiver and every admin. Allocation and persistence
    are required steps and propagate their errors; notification failures are
    tallied on the outcome. The incident is stored under an id derived from the
    review, so redelivery of the same review, concurrent or not, creates
    nothing new.
    """

    def __init__(
        self,
        store: DocumentStore,
        allocator: IncidentNumberAllocator,
        factory: LowRatingIncidentFactory,
        notifier: EscalationNotifier,
        metrics: MetricsCollector | None = None,
    ) -> None:
        self._store = store
        self._allocator = allocator
        self._factory = factory
        self._notifier = notifier
        self._metrics = metrics
        self._logger = logger.bind(use_case="MonitorLowRatings")

    async def handle(self, event: ReviewCreated) -> LowRatingOutcome:
        """Process one review-created event.

        Raises:
            InvalidEventError: If the event carries no stored review
            InvalidIncidentNumberError: If the latest stored incident number
                is malformed while seeding the year's counter
            DocumentStoreError: If the incident cannot be stored
        """
        review = event.review
        if review is None or review.id is None:
            raise InvalidEventError(type(event).__name__, "no stored review attached")

        outcome = LowRatingOutcome(review_id=review.id, rating=review.rating)
        if not self._factory.qualifies(review):
            self._logger.debug("Review rating above incident threshold", review_id=review.id, rating=review.rating)
            return outcome

        existing = await self.find_existing_incident(review.id)
        if existing is not None:
            return self._duplicate(outcome, existing)

        workflow = WorkflowRecorder("low_rating_incident", review_id=review.id)
        now = await self._store.server_timestamp()

        number = await workflow.run("allocate_number", lambda: self._allocator.allocate(now), required=True)
        incident_id = incident_id_for_review(review.id)
        incident = self._factory.build(review, number, now).model_copy(update={"id": incident_id})
        created = await workflow.run("create_incident", lambda: self._create_once(incident), required=True)
        if not created:
            # A concurrent delivery of the same review stored its incident first.
            existing = await self.find_existing_incident(review.id)
            if existing is None:
                raise DocumentNotFoundError(Incident.collection, incident_id)
            self._logger.warning("Incident number left unused", incident_number=incident.incident_number)
            return self._duplicate(outcome, existing)

        outcome.incident_created = True
        outcome.incident_id = incident_id
        outcome.incident_number = incident.incident_number
        outcome.severity = str(incident.severity)
        if self._metrics:
            self._metrics.record_incident_created(outcome.severity)

        outcome.notifications = await workflow.run("notify", lambda: self._notifier.notify_low_rating(incident, review))
        outcome.steps = workflow.steps

        self._logger.info(
            "Low rating incident created",
            review_id=review.id,
            incident_id=incident_id,
            incident_number=incident.incident_number,
            severity=outcome.severity,
        )
        return outcome

    async def find_existing_incident(self, review_id: str) -> Incident | None:
        """Incident previously created from ``review_id``, if any."""
        document = await self._store.get(Incident.collection, incident_id_for_review(review_id))
        if document is None:
            documents = await self._store.query(Incident.collection, filters=[eq("sourceReviewId", review_id)], limit=1)
            document = documents[0] if documents else None
        return Incident.from_document(document) if document is not None else None

    async def handle_review(self, review: Review) -> LowRatingOutcome:
        """Convenience wrapper for callers holding a review rather than an event."""
        return await self.handle(ReviewCreated.create(aggregate_id=review.id or "", review=review))

    async def _create_once(self, incident: Incident) -> bool:
        try:
            await self._store.create(Incident.collection, incident.id, incident.to_document())
        except DocumentAlreadyExistsError:
            return False
        return True

    def _duplicate(self, outcome: LowRatingOutcome, existing: Incident) -> LowRatingOutcome:
        self._logger.info(
            "Incident already exists for review",
            review_id=outcome.review_id,
            incident_id=existing.id,
            incident_number=existing.incident_number,
        )
        outcome.duplicate = True
        outcome.incident_id = existing.id
        outcome.incident_number = existing.incident_number
        outcome.severity = str(existing.severity)
        return outcome
