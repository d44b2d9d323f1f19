"""Exception hierarchy for the care quality engine.

Every error carries a machine-readable ``error_code`` and a ``details``
mapping so that callers and the HTTP layer can report faults uniformly.
"""

from .application import InvalidEventError, MetricsCalculationError, UseCaseError
from .base import (
    ApplicationError,
    CareQualityError,
    DomainError,
    InfrastructureError,
)
from .domain import (
    InvalidIncidentNumberError,
    RecordValidationError,
)
from .infrastructure import DocumentAlreadyExistsError, DocumentNotFoundError, DocumentStoreError

__all__ = [
    # Base exceptions
    "CareQualityError",
    "DomainError",
    "ApplicationError",
    "InfrastructureError",
    # Domain exceptions
    "InvalidIncidentNumberError",
    "RecordValidationError",
    # Application exceptions
    "UseCaseError",
    "MetricsCalculationError",
    "InvalidEventError",
    # Infrastructure exceptions
    "DocumentStoreError",
    "DocumentNotFoundError",
    "DocumentAlreadyExistsError",
]
