"""Document store adapters."""

from .in_memory_store import InMemoryDocumentStore

__all__ = ["InMemoryDocumentStore"]
