"""
Shared API Error Handlers
=========================

Maps application exceptions to HTTP responses.

| Exception                    | Status |
|------------------------------|--------|
| ValidationException          | 400    |
| RequestValidationError       | 400    |
| ResourceNotFoundException    | 404    |
| ConflictException            | 409    |
| RepositoryException          | 500    |
| OperationTimeoutException    | 504    |
| anything else                | 500    |
"""

from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from article_service.core import (
    ApplicationException,
    ConflictException,
    OperationTimeoutException,
    RepositoryException,
    ResourceNotFoundException,
    ValidationException,
)
from article_service.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)

STATUS_BY_EXCEPTION = (
    (ValidationException, status.HTTP_400_BAD_REQUEST),
    (ResourceNotFoundException, status.HTTP_404_NOT_FOUND),
    (ConflictException, status.HTTP_409_CONFLICT),
    (OperationTimeoutException, status.HTTP_504_GATEWAY_TIMEOUT),
    (RepositoryException, status.HTTP_500_INTERNAL_SERVER_ERROR),
)


def status_for(exc: ApplicationException) -> int:
    for exc_type, status_code in STATUS_BY_EXCEPTION:
        if isinstance(exc, exc_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def _error_body(request: Request, detail: Any, errors: Optional[list] = None) -> dict:
    body = {
        "detail": detail,
        "correlation_id": getattr(request.state, "correlation_id", None),
    }
    if errors is not None:
        body["errors"] = errors
    return body


def _is_development(request: Request) -> bool:
    settings = getattr(request.app.state, "settings", None)
    return getattr(settings, "environment", None) == "development"


async def application_exception_handler(request: Request, exc: ApplicationException) -> JSONResponse:
    """Render an ``ApplicationException`` with its mapped status code."""
    status_code = status_for(exc)

    log = logger.error if status_code >= 500 else logger.info
    log(
        "Request rejected",
        extra={
            "correlation_id": getattr(request.state, "correlation_id", None),
            "path": request.url.path,
            "method": request.method,
            "status_code": status_code,
            "error_type": type(exc).__name__,
            "error_message": exc.message
        }
    )

    # Storage errors carry driver messages; keep them out of production responses
    if isinstance(exc, RepositoryException) and not _is_development(request):
        detail = "Storage failure"
    else:
        detail = exc.message

    return JSONResponse(status_code=status_code, content=_error_body(request, detail))


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed path/query parameters or JSON bodies are client errors (400)."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_body(request, "Invalid request", jsonable_encoder(exc.errors())),
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Global exception handler for unhandled exceptions.

    Returns consistent error responses for all exceptions.
    """
    correlation_id = getattr(request.state, "correlation_id", "unknown")

    logger.exception(
        "Unhandled exception",
        extra={
            "correlation_id": correlation_id,
            "path": request.url.path,
            "method": request.method,
            "error_type": type(exc).__name__,
            "error_message": str(exc)
        }
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "detail": "Internal server error",
            "correlation_id": correlation_id,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "debug_info": str(exc) if _is_development(request) else None
        }
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApplicationException, application_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, global_exception_handler)
