"""Infrastructure-specific exception classes."""

from .base import InfrastructureError


class DocumentStoreError(InfrastructureError):
    """Base exception for document store failures."""

    pass


class DocumentNotFoundError(DocumentStoreError):
    """Raised when a document addressed by id does not exist."""

    def __init__(self, collection: str, document_id: str) -> None:
        super().__init__(
            f"Document '{document_id}' not found in '{collection}'",
            "DOCUMENT_NOT_FOUND",
            {"collection": collection, "document_id": document_id},
        )


class DocumentAlreadyExistsError(DocumentStoreError):
    """Raised when creating a document under an id that is already taken."""

    def __init__(self, collection: str, document_id: str) -> None:
        super().__init__(
            f"Document '{document_id}' already exists in '{collection}'",
            "DOCUMENT_ALREADY_EXISTS",
            {"collection": collection, "document_id": document_id},
        )
