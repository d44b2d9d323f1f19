"""User record, read-only to the quality engine."""

from typing import ClassVar

from .base import Record


class User(Record):
    """Platform user as far as recipient resolution and batching need it."""

    collection: ClassVar[str] = "users"

    role: str
    is_active: bool = True
    name: str | None = None
