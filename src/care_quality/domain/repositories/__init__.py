"""Domain repository interfaces."""

from .document_store import Document, DocumentStore, FieldFilter, created_between, eq

__all__ = [
    "Document",
    "DocumentStore",
    "FieldFilter",
    "created_between",
    "eq",
]
