"""Incident record and its investigation timeline."""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, field_serializer
from pydantic.alias_generators import to_camel

from care_quality.domain.enums import IncidentSeverity, IncidentStatus, IncidentType

from .base import Record, UtcDatetime


class TimelineEntry(BaseModel):
    """One step of an incident's investigation history."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    action: str
    performed_by: str
    timestamp: UtcDatetime
    notes: str | None = None


class Incident(Record):
    """A formally tracked quality or safety issue about a caregiver.

    Incidents are never deleted. The investigation timeline is append-only;
    use :meth:`with_timeline_entry` to derive the next version.
    """

    collection: ClassVar[str] = "incidents"

    incident_number: str
    incident_type: IncidentType = Field(default=IncidentType.OTHER, alias="type")
    severity: IncidentSeverity
    status: IncidentStatus = IncidentStatus.REPORTED

    reporter_id: str
    reporter_name: str | None = None
    reporter_role: str | None = None

    caregiver_id: str | None = None
    caregiver_name: str | None = None
    client_id: str | None = None
    client_name: str | None = None
    booking_id: str | None = None
    source_review_id: str | None = None

    title: str
    description: str = ""
    incident_date: UtcDatetime | None = None
    location: str | None = None
    tags: frozenset[str] = frozenset()
    evidence: tuple[Any, ...] = ()
    investigation_timeline: tuple[TimelineEntry, ...] = ()

    assigned_to: str | None = None
    assigned_to_name: str | None = None
    resolution: str | None = None
    resolved_at: UtcDatetime | None = None
    resolved_by: str | None = None
    closed_at: UtcDatetime | None = None

    escalated_at: UtcDatetime | None = None
    escalated_by: str | None = None
    auto_escalated: bool = False
    escalation_reason: str | None = None

    created_at: UtcDatetime | None = None
    updated_at: UtcDatetime | None = None

    @field_serializer("tags")
    def _serialize_tags(self, tags: frozenset[str]) -> list[str]:
        return sorted(tags)

    @field_serializer("evidence", "investigation_timeline")
    def _serialize_sequence(self, value: tuple[Any, ...]) -> list[Any]:
        return [item.model_dump(by_alias=True) if isinstance(item, BaseModel) else item for item in value]

    @property
    def is_critical(self) -> bool:
        return self.severity == IncidentSeverity.CRITICAL

    def with_timeline_entry(self, entry: TimelineEntry) -> Incident:
        """Return a copy with ``entry`` appended to the timeline."""
        return self.model_copy(update={"investigation_timeline": (*self.investigation_timeline, entry)})
