"""Abstract interface to the document database collaborator."""

from __future__ import annotations

import operator
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Literal

from care_quality.core.exceptions import DocumentStoreError

Document = dict[str, Any]
"""A stored record: plain field mapping plus its ``id``."""

FilterOp = Literal["==", "!=", "<", "<=", ">", ">="]

_OPERATORS: dict[str, Callable[[Any, Any], bool]] = {
    "==": operator.eq,
    "!=": operator.ne,
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
}


@dataclass(frozen=True)
class FieldFilter:
    """A single ``field op value`` predicate."""

    field: str
    op: FilterOp
    value: Any

    def __post_init__(self) -> None:
        if self.op not in _OPERATORS:
            raise ValueError(f"Unsupported filter operator: {self.op}")

    def matches(self, document: Document) -> bool:
        """Evaluate the predicate; documents missing the field never match.

        Raises:
            DocumentStoreError: If the stored value cannot be compared with ``value``
        """
        if self.field not in document or document[self.field] is None:
            return False
        try:
            return _OPERATORS[self.op](document[self.field], self.value)
        except TypeError as e:
            raise DocumentStoreError(
                f"Cannot compare field '{self.field}' with {self.op} {self.value!r}",
                "INCOMPARABLE_FILTER_VALUE",
                {"field": self.field, "stored_type": type(document[self.field]).__name__},
            ) from e


def eq(field: str, value: Any) -> FieldFilter:
    return FieldFilter(field, "==", value)


def created_between(start: datetime, end: datetime, field: str = "createdAt") -> list[FieldFilter]:
    """Filters for ``start <= field < end``."""
    return [FieldFilter(field, ">=", start), FieldFilter(field, "<", end)]


class DocumentStore(ABC):
    """
    Abstract interface for the document database.

    Reads are idempotent; writes are inserts, field-level updates and atomic
    counter increments. Implementations own the connection lifecycle.
    """

    @abstractmethod
    async def query(
        self,
        collection: str,
        filters: list[FieldFilter] | None = None,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[Document]:
        """Return documents matching every filter.

        Args:
            collection: Collection name
            filters: Predicates combined with AND
            order_by: Field to sort on
            descending: Sort direction
            limit: Maximum number of documents

        Raises:
            DocumentStoreError: When the query fails
        """
        pass

    @abstractmethod
    async def get(self, collection: str, document_id: str) -> Document | None:
        """Fetch one document by id, or None if absent."""
        pass

    @abstractmethod
    async def add(self, collection: str, data: Document) -> str:
        """Insert a document and return its generated id."""
        pass

    @abstractmethod
    async def create(self, collection: str, document_id: str, data: Document) -> None:
        """Insert a document under a caller-chosen id, atomically.

        Raises:
            DocumentAlreadyExistsError: When a document with that id exists
        """
        pass

    @abstractmethod
    async def update(self, collection: str, document_id: str, fields: Document) -> None:
        """Set the given fields on an existing document.

        Raises:
            DocumentNotFoundError: When the document does not exist
        """
        pass

    @abstractmethod
    async def increment_counter(self, name: str, seed: Callable[[], Awaitable[int]]) -> int:
        """Atomically increment a named counter and return the new value.

        ``seed`` is awaited only when the counter does not exist yet; its
        result is the value the first increment starts from. Concurrent
        callers never receive the same value.
        """
        pass

    @abstractmethod
    async def server_timestamp(self) -> datetime:
        """Return a monotonic, timezone-aware server timestamp."""
        pass

    async def ping(self) -> bool:
        """Check that the store answers a trivial read."""
        await self.query("users", limit=1)
        return True
