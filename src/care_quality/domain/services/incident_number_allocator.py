"""Sequential incident number allocation."""

from __future__ import annotations

from datetime import datetime

import structlog

from care_quality.domain.entities import Incident
from care_quality.domain.repositories import Document, DocumentStore
from care_quality.domain.value_objects import IncidentNumber

logger = structlog.get_logger(__name__)

COUNTER_PREFIX = "incident_number"


def next_number_from_latest(latest_number: str | None, year: int) -> IncidentNumber:
    """Next number after the most recent incident's number.

    Returns sequence 1 when there is no previous incident.

    Raises:
        InvalidIncidentNumberError: If ``latest_number`` is malformed.
    """
    if latest_number is None:
        return IncidentNumber(year=year, sequence=1)
    return IncidentNumber(year=year, sequence=IncidentNumber.parse(latest_number).sequence + 1)


class IncidentNumberAllocator:
    """
    Allocates incident numbers from an atomic per-year counter.

    A year's counter is created on first use and seeded with the suffix of
    the most recently created incident, so the sequence continues where the
    stored incidents left off. After that every allocation is a single atomic
    increment, which keeps concurrent allocations from colliding.
    """

    def __init__(self, store: DocumentStore) -> None:
        self._store = store
        self._logger = logger.bind(service="IncidentNumberAllocator")

    async def allocate(self, now: datetime) -> IncidentNumber:
        """Allocate the next incident number for ``now``'s year.

        Raises:
            InvalidIncidentNumberError: If the counter has to be seeded and the
                latest stored incident number is malformed.
        """
        year = now.year
        sequence = await self._store.increment_counter(f"{COUNTER_PREFIX}_{year}", self._seed_from_latest)
        number = IncidentNumber(year=year, sequence=sequence)
        self._logger.info("Incident number allocated", incident_number=number.format())
        return number

    async def latest_incident(self) -> Document | None:
        """The most recently created incident document, if any."""
        documents = await self._store.query(Incident.collection, order_by="createdAt", descending=True, limit=1)
        return documents[0] if documents else None

    async def _seed_from_latest(self) -> int:
        latest = await self.latest_incident()
        if latest is None:
            self._logger.info("Seeding incident counter with no previous incidents")
            return 0
        # A missing or malformed number raises instead of restarting at 1.
        raw_number = latest.get("incidentNumber")
        seed = IncidentNumber.parse(raw_number).sequence
        self._logger.info("Seeding incident counter from latest incident", latest_incident_number=raw_number, seed=seed)
        return seed
