"""Exception handlers mapping engine errors to JSON responses."""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from ..config import get_logger
from ..core.exceptions import (
    CareQualityError,
    DocumentNotFoundError,
    DomainError,
    InfrastructureError,
    InvalidEventError,
)
from .schemas import ErrorResponse

logger = get_logger("api.errors")


def status_code_for(exc: CareQualityError) -> int:
    """HTTP status for an engine error."""
    if isinstance(exc, InvalidEventError):
        return status.HTTP_400_BAD_REQUEST
    if isinstance(exc, DomainError):
        return 422
    if isinstance(exc, DocumentNotFoundError):
        return status.HTTP_404_NOT_FOUND
    if isinstance(exc, InfrastructureError):
        return status.HTTP_503_SERVICE_UNAVAILABLE
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def care_quality_error_handler(request: Request, exc: CareQualityError) -> JSONResponse:
    status_code = status_code_for(exc)
    logger.error(
        "Request failed",
        path=request.url.path,
        error_code=exc.error_code,
        error=exc.message,
        status_code=status_code,
    )
    body = ErrorResponse(error_code=exc.error_code, message=exc.message, details=exc.details, status_code=status_code)
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(CareQualityError, care_quality_error_handler)
