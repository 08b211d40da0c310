"""
API Error Handling
==================

Translates the application exception taxonomy into the JSON error
envelope::

    {"success": false, "error": {"code": ..., "message": ..., ...}}

Status mapping: validation 400, not found 404, conflict 409, store
failure 503, anything else 500.
"""

from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from support_desk.core import (
    ConflictException,
    RepositoryException,
    ResourceNotFoundException,
    ValidationException,
)
from support_desk.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)

# Codes whose field errors are reported as a list under ``details``
_MULTI_ERROR_CODES = {"VALIDATION_ERROR"}


def error_response(
    status_code: int,
    code: str,
    message: str,
    field: Optional[str] = None,
    provided_value: Optional[Any] = None,
    details: Optional[Any] = None
) -> JSONResponse:
    """Build an error envelope response, omitting empty keys."""
    error = {"code": code, "message": message}
    if field is not None:
        error["field"] = field
    if provided_value is not None:
        error["provided_value"] = provided_value
    if details:
        error["details"] = details
    return JSONResponse(status_code=status_code, content={"success": False, "error": error})


async def validation_exception_handler(request: Request, exc: ValidationException) -> JSONResponse:
    details: Any = exc.details
    if exc.code in _MULTI_ERROR_CODES or len(exc.errors) > 1:
        details = [e.to_dict() for e in exc.errors]
    return error_response(
        400, exc.code, exc.message,
        field=exc.field, provided_value=exc.provided_value, details=details
    )


async def request_validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """Malformed request bodies or query strings."""
    details = [
        {
            "field": ".".join(str(part) for part in error.get("loc", ()) if part != "body"),
            "message": error.get("msg", "Invalid value"),
        }
        for error in exc.errors()
    ]
    return error_response(400, "VALIDATION_ERROR", "Invalid input data", details=details)


async def not_found_exception_handler(request: Request, exc: ResourceNotFoundException) -> JSONResponse:
    return error_response(404, exc.code, exc.message, details=exc.details)


async def conflict_exception_handler(request: Request, exc: ConflictException) -> JSONResponse:
    return error_response(409, exc.code, exc.message, details=exc.details)


async def repository_exception_handler(request: Request, exc: RepositoryException) -> JSONResponse:
    logger.error(
        "Entity store failure",
        extra={"path": request.url.path, "method": request.method, "error": exc.message}
    )
    return error_response(503, exc.code, "The entity store is unavailable")


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Global exception handler for unhandled exceptions.

    Internal details are only exposed in development.
    """
    correlation_id = getattr(request.state, "correlation_id", "unknown")

    logger.error(
        "Unhandled exception",
        extra={
            "path": request.url.path,
            "method": request.method,
            "error_type": type(exc).__name__,
            "error_message": str(exc)
        }
    )

    settings = getattr(request.app.state, "settings", None)
    is_dev = getattr(settings, "environment", None) == "development"

    details = {
        "correlation_id": correlation_id,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    if is_dev:
        details["debug_info"] = str(exc)
    return error_response(500, "INTERNAL_ERROR", "Internal server error", details=details)


def register_exception_handlers(app: FastAPI) -> None:
    """Install every handler on the application."""
    app.add_exception_handler(ValidationException, validation_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(ResourceNotFoundException, not_found_exception_handler)
    app.add_exception_handler(ConflictException, conflict_exception_handler)
    app.add_exception_handler(RepositoryException, repository_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)
