"""
Event delivery router.

Receives the engine's trigger events from the event-delivery collaborator.
Domain errors surface as 4xx responses; a failed booking recomputation
surfaces as 500 so the delivery can be retried.
"""

from fastapi import APIRouter, Depends

from ...application.use_cases import (
    EscalateCriticalIncidentUseCase,
    MonitorLowRatingsUseCase,
    QualityMetricsBatchUseCase,
)
from ...config import get_logger
from ...domain.events import BookingUpdated, IncidentCreated, ReviewCreated
from ..dependencies import get_escalate_critical_incident, get_monitor_low_ratings, get_quality_metrics_batch
from ..schemas import BookingUpdatedRequest, EventAcceptedResponse, IncidentCreatedRequest, ReviewCreatedRequest

router = APIRouter(prefix="/events", tags=["events"])
logger = get_logger(__name__)


@router.post("/reviews", response_model=EventAcceptedResponse)
async def review_created(
    payload: ReviewCreatedRequest,
    use_case: MonitorLowRatingsUseCase = Depends(get_monitor_low_ratings),
) -> EventAcceptedResponse:
    """Deliver a review-created event; low ratings open an incident."""
    event = ReviewCreated.create(aggregate_id=payload.review.id or "", occurred_at=payload.occurred_at, review=payload.review)
    logger.info("Review created event received", event_id=event.event_id, review_id=payload.review.id)

    outcome = await use_case.handle(event)
    return EventAcceptedResponse(
        event_id=event.event_id,
        event_type="ReviewCreated",
        handled=outcome.incident_created,
        result=outcome.model_dump(mode="json"),
    )


@router.post("/incidents", response_model=EventAcceptedResponse)
async def incident_created(
    payload: IncidentCreatedRequest,
    use_case: EscalateCriticalIncidentUseCase = Depends(get_escalate_critical_incident),
) -> EventAcceptedResponse:
    """Deliver an incident-created event; critical incidents are escalated."""
    event = IncidentCreated.create(
        aggregate_id=payload.incident.id or "", occurred_at=payload.occurred_at, incident=payload.incident
    )
    logger.info("Incident created event received", event_id=event.event_id, incident_id=payload.incident.id)

    report = await use_case.handle(event)
    return EventAcceptedResponse(
        event_id=event.event_id,
        event_type="IncidentCreated",
        handled=report is not None,
        result=report.model_dump(mode="json") if report else None,
    )


@router.post("/bookings", response_model=EventAcceptedResponse)
async def booking_updated(
    payload: BookingUpdatedRequest,
    use_case: QualityMetricsBatchUseCase = Depends(get_quality_metrics_batch),
) -> EventAcceptedResponse:
    """Deliver a booking-updated event; completions recompute the caregiver."""
    event = BookingUpdated.create(
        aggregate_id=payload.after.id or "", occurred_at=payload.occurred_at, before=payload.before, after=payload.after
    )
    logger.info("Booking updated event received", **event.to_dict())

    snapshot = await use_case.handle_booking_updated(event)
    return EventAcceptedResponse(
        event_id=event.event_id,
        event_type="BookingUpdated",
        handled=snapshot is not None,
        result=snapshot.model_dump(mode="json", by_alias=True) if snapshot else None,
    )
