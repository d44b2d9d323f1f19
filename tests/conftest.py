"""
Pytest configuration and shared fixtures for the care quality engine tests.

Provides an in-memory document store (plain and failure-injecting), record
builders with sensible defaults and a fixed reference time.
"""

import os
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Any

import pytest

# Set test environment before imports
os.environ["ENVIRONMENT"] = "test"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["LOG_FORMAT"] = "json"

from care_quality.core.exceptions import DocumentStoreError
from care_quality.domain.entities import Booking, Incident, Review
from care_quality.domain.enums import IncidentSeverity, UserRole
from care_quality.domain.repositories import Document
from care_quality.infrastructure.monitoring import MetricsCollector
from care_quality.infrastructure.storage import InMemoryDocumentStore

REFERENCE_TIME = datetime(2025, 3, 2, 12, 0, tzinfo=UTC)


class FlakyDocumentStore(InMemoryDocumentStore):
    """In-memory store whose writes and queries can be made to fail."""

    def __init__(self) -> None:
        super().__init__()
        self.fail_add_when: Callable[[str, Document], bool] = lambda collection, data: False
        self.fail_updates = False
        self.fail_queries_on: set[str] = set()

    async def add(self, collection: str, data: Document) -> str:
        if self.fail_add_when(collection, data):
            raise DocumentStoreError(f"Write to {collection} rejected")
        return await super().add(collection, data)

    async def create(self, collection: str, document_id: str, data: Document) -> None:
        if self.fail_add_when(collection, data):
            raise DocumentStoreError(f"Write to {collection}/{document_id} rejected")
        await super().create(collection, document_id, data)

    async def update(self, collection: str, document_id: str, fields: Document) -> None:
        if self.fail_updates:
            raise DocumentStoreError(f"Update of {collection}/{document_id} rejected")
        await super().update(collection, document_id, fields)

    async def query(self, collection: str, *args: Any, **kwargs: Any) -> list[Document]:
        if collection in self.fail_queries_on:
            raise DocumentStoreError(f"Query on {collection} failed")
        return await super().query(collection, *args, **kwargs)


@pytest.fixture
def now() -> datetime:
    """Fixed reference time (Sunday 2025-03-02 12:00 UTC)."""
    return REFERENCE_TIME


@pytest.fixture
def store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture
def flaky_store() -> FlakyDocumentStore:
    return FlakyDocumentStore()


@pytest.fixture
def metrics() -> MetricsCollector:
    """Collector with its own registry."""
    return MetricsCollector()


@pytest.fixture
def make_review() -> Callable[..., Review]:
    """Build reviews; keyword arguments override the defaults."""

    def _make(**overrides: Any) -> Review:
        data: dict[str, Any] = {
            "id": "review-1",
            "reviewer_id": "client-1",
            "reviewer_name": "Ana Souza",
            "reviewee_id": "caregiver-1",
            "reviewee_name": "Maria Lima",
            "rating": 4.0,
            "comment": "Arrived late and left early",
            "booking_id": "booking-1",
            "created_at": REFERENCE_TIME - timedelta(days=1),
        }
        data.update(overrides)
        return Review(**data)

    return _make


@pytest.fixture
def make_booking() -> Callable[..., Booking]:
    """Build bookings; keyword arguments override the defaults."""

    def _make(**overrides: Any) -> Booking:
        created_at = overrides.pop("created_at", REFERENCE_TIME - timedelta(days=10))
        data: dict[str, Any] = {
            "id": "booking-1",
            "caregiver_id": "caregiver-1",
            "client_id": "client-1",
            "status": "requested",
            "created_at": created_at,
        }
        data.update(overrides)
        return Booking(**data)

    return _make


@pytest.fixture
def make_incident() -> Callable[..., Incident]:
    """Build incidents; keyword arguments override the defaults."""

    def _make(**overrides: Any) -> Incident:
        data: dict[str, Any] = {
            "incident_number": "INC-2025-000001",
            "severity": IncidentSeverity.CRITICAL,
            "reporter_id": "client-1",
            "reporter_name": "Ana Souza",
            "reporter_role": UserRole.CLIENT.value,
            "caregiver_id": "caregiver-1",
            "caregiver_name": "Maria Lima",
            "title": "Medication not administered",
            "description": "Evening medication was skipped",
            "created_at": REFERENCE_TIME - timedelta(days=2),
        }
        data.update(overrides)
        return Incident(**data)

    return _make


@pytest.fixture
def add_admins() -> Callable[..., list[str]]:
    """Load admin users into a store and return their ids."""

    def _add(target: InMemoryDocumentStore, count: int = 2) -> list[str]:
        return target.load(
            "users",
            [{"id": f"admin-{i}", "role": UserRole.ADMIN.value, "isActive": True, "name": f"Admin {i}"} for i in range(1, count + 1)],
        )

    return _add


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "integration: integration test")
