"""
Exception handlers.

Translates domain exceptions into JSON error responses. The base class of
an exception decides its status code; anything unrecognized is logged and
answered with a generic 500 so no internal detail leaks.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from shared.exceptions import (
    PinnacleError,
    NotFoundError,
    ValidationError,
    ConflictError,
    AuthenticationError,
    AuthorizationError,
)

from .models.errors import ErrorResponse, FieldError

logger = logging.getLogger(__name__)

# Checked in order; the first matching base wins
STATUS_BY_ERROR: tuple[tuple[type[PinnacleError], int], ...] = (
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (ConflictError, 409),
    (ValidationError, 400),
)

INTERNAL_ERROR = ErrorResponse(
    error="INTERNAL_ERROR",
    message="Something went wrong",
)


def status_for(exc: PinnacleError) -> int:
    for error_type, status_code in STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status_code
    return 500


async def handle_pinnacle_error(request: Request, exc: PinnacleError) -> JSONResponse:
    status_code = status_for(exc)
    if status_code == 500:
        logger.error(f"Unhandled {exc.code} on {request.method} {request.url.path}: {exc.message}")
        return JSONResponse(status_code=500, content=INTERNAL_ERROR.model_dump())
    return JSONResponse(status_code=status_code, content=exc.to_dict())


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    fields = [
        FieldError(path=[str(part) for part in error.get("loc", ())], message=error.get("msg", ""))
        for error in exc.errors()
    ]
    body = ErrorResponse(
        error="VALIDATION_FAILED",
        message="Validation failed",
        details={"fields": [field.model_dump() for field in fields]},
    )
    return JSONResponse(status_code=400, content=body.model_dump())


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unexpected error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content=INTERNAL_ERROR.model_dump())


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(PinnacleError, handle_pinnacle_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
