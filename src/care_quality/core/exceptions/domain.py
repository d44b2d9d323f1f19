"""Domain-specific exception classes."""

from typing import Any

from .base import DomainError


class InvalidIncidentNumberError(DomainError):
    """Raised when a stored incident number cannot be parsed.

    A malformed number on the most recent incident is a data-integrity fault:
    allocation must stop instead of restarting the sequence.
    """

    def __init__(self, value: Any, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            f"Malformed incident number: {value!r}",
            "INVALID_INCIDENT_NUMBER",
            {"incident_number": value, **(details or {})},
        )
        self.value = value


class RecordValidationError(DomainError):
    """Raised when a stored record is missing fields or holds invalid values."""

    def __init__(self, collection: str, record_id: str | None, errors: list[Any]) -> None:
        super().__init__(
            f"Invalid {collection} record {record_id or '<unknown>'}",
            "RECORD_VALIDATION_ERROR",
            {"collection": collection, "record_id": record_id, "errors": errors},
        )
        self.collection = collection
        self.record_id = record_id
