"""In-process document store for local runs and tests."""

from __future__ import annotations

import asyncio
import copy
from collections.abc import Awaitable, Callable, Iterable
from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import uuid4

import structlog

from care_quality.core.exceptions import DocumentAlreadyExistsError, DocumentNotFoundError, DocumentStoreError
from care_quality.domain.repositories import Document, DocumentStore, FieldFilter

logger = structlog.get_logger(__name__)


def as_utc(value: Any) -> Any:
    """Copy ``value`` with every naive datetime in it read as UTC."""
    if isinstance(value, datetime):
        return value.replace(tzinfo=UTC) if value.tzinfo is None else value
    if isinstance(value, dict):
        return {key: as_utc(item) for key, item in value.items()}
    if isinstance(value, list):
        return [as_utc(item) for item in value]
    return copy.deepcopy(value)


class InMemoryDocumentStore(DocumentStore):
    """
    Dictionary-backed :class:`DocumentStore`.

    Documents are copied on the way in and out, so callers never share state
    with the store; naive datetimes are stored as UTC. Counter increments are
    serialized by a lock that is held while a new counter is seeded.
    Timestamps are strictly increasing even when the wall clock is frozen or
    steps backwards.
    """

    def __init__(self) -> None:
        self._collections: dict[str, dict[str, Document]] = {}
        self._counters: dict[str, int] = {}
        self._counter_lock = asyncio.Lock()
        self._last_timestamp: datetime | None = None

    async def query(
        self,
        collection: str,
        filters: list[FieldFilter] | None = None,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[Document]:
        documents = [
            doc
            for doc in self._collections.get(collection, {}).values()
            if all(f.matches(doc) for f in filters or [])
        ]
        if order_by is not None:
            # Documents without the ordering field are excluded, as in ordered queries on the hosted store.
            documents = [doc for doc in documents if doc.get(order_by) is not None]
            try:
                documents.sort(key=lambda doc: doc[order_by], reverse=descending)
            except TypeError as e:
                raise DocumentStoreError(
                    f"Cannot order '{collection}' by '{order_by}': mixed value types",
                    "INCOMPARABLE_ORDER_VALUES",
                    {"collection": collection, "order_by": order_by},
                ) from e
        if limit is not None:
            documents = documents[:limit]
        return [copy.deepcopy(doc) for doc in documents]

    async def get(self, collection: str, document_id: str) -> Document | None:
        document = self._collections.get(collection, {}).get(document_id)
        return copy.deepcopy(document) if document is not None else None

    async def add(self, collection: str, data: Document) -> str:
        document_id = uuid4().hex
        self._collections.setdefault(collection, {})[document_id] = {**as_utc(data), "id": document_id}
        logger.debug("Document added", collection=collection, document_id=document_id)
        return document_id

    async def create(self, collection: str, document_id: str, data: Document) -> None:
        target = self._collections.setdefault(collection, {})
        if document_id in target:
            raise DocumentAlreadyExistsError(collection, document_id)
        target[document_id] = {**as_utc(data), "id": document_id}
        logger.debug("Document created", collection=collection, document_id=document_id)

    async def update(self, collection: str, document_id: str, fields: Document) -> None:
        document = self._collections.get(collection, {}).get(document_id)
        if document is None:
            raise DocumentNotFoundError(collection, document_id)
        document.update(as_utc(fields))

    async def increment_counter(self, name: str, seed: Callable[[], Awaitable[int]]) -> int:
        async with self._counter_lock:
            if name not in self._counters:
                self._counters[name] = await seed()
                logger.info("Counter created", counter=name, seed=self._counters[name])
            self._counters[name] += 1
            return self._counters[name]

    async def server_timestamp(self) -> datetime:
        now = datetime.now(UTC)
        if self._last_timestamp is not None and now <= self._last_timestamp:
            now = self._last_timestamp + timedelta(microseconds=1)
        self._last_timestamp = now
        return now

    def load(self, collection: str, documents: Iterable[Document]) -> list[str]:
        """Insert documents, keeping any ``id`` they carry.

        Returns:
            The ids of the loaded documents
        """
        ids = []
        target = self._collections.setdefault(collection, {})
        for document in documents:
            document_id = document.get("id") or uuid4().hex
            target[document_id] = {**as_utc(document), "id": document_id}
            ids.append(document_id)
        return ids

    def counter_value(self, name: str) -> int | None:
        return self._counters.get(name)

    def count(self, collection: str) -> int:
        return len(self._collections.get(collection, {}))
