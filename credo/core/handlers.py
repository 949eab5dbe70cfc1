from __future__ import annotations

"""
Global exception handlers for the FastAPI application.

Every `CredoError` is translated into a JSON body ``{"detail", "code"}`` with
the status code from `STATUS_CODES`. Request-shape failures become 400 with a
list of offending fields, rate limit hits become 429, and anything else is
logged in full and answered with an opaque 500.
"""

from typing import Dict, Type

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette import status
from structlog import get_logger

from credo.core.exceptions import (
    ConflictError,
    CredoError,
    DeliveryError,
    InternalError,
    InvalidCredentialsError,
    InvalidOtpError,
    InvalidTokenError,
    NotActivatedError,
    NotFoundError,
    OtpExhaustedError,
    OtpExpiredError,
    OtpNotFoundError,
    PermissionDeniedError,
    TokenExpiredError,
    ValidationError,
)

__all__ = [
    "STATUS_CODES",
    "status_for",
    "credo_error_handler",
    "request_validation_error_handler",
    "rate_limit_exception_handler",
    "unhandled_exception_handler",
    "register_exception_handlers",
]

logger = get_logger(__name__)

STATUS_CODES: Dict[Type[CredoError], int] = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    InvalidOtpError: status.HTTP_400_BAD_REQUEST,
    OtpExpiredError: status.HTTP_400_BAD_REQUEST,
    ConflictError: status.HTTP_409_CONFLICT,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    OtpNotFoundError: status.HTTP_404_NOT_FOUND,
    NotActivatedError: status.HTTP_403_FORBIDDEN,
    PermissionDeniedError: status.HTTP_403_FORBIDDEN,
    InvalidCredentialsError: status.HTTP_401_UNAUTHORIZED,
    InvalidTokenError: status.HTTP_401_UNAUTHORIZED,
    TokenExpiredError: status.HTTP_401_UNAUTHORIZED,
    OtpExhaustedError: status.HTTP_429_TOO_MANY_REQUESTS,
    DeliveryError: status.HTTP_503_SERVICE_UNAVAILABLE,
    InternalError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def status_for(exc: CredoError) -> int:
    """Resolves the status code along the exception's MRO."""
    for klass in type(exc).__mro__:
        if klass in STATUS_CODES:
            return STATUS_CODES[klass]
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def credo_error_handler(request: Request, exc: CredoError) -> JSONResponse:
    """Handles every `CredoError` subclass.

    Args:
        request: The incoming `Request` object.
        exc: The raised domain error.

    Returns:
        A `JSONResponse` with the mapped status code, message and code.
    """
    status_code = status_for(exc)
    log = logger.warning if status_code >= 500 else logger.info
    log("request_failed", code=exc.code, status_code=status_code, path=request.url.path)

    headers = None
    if status_code == status.HTTP_401_UNAUTHORIZED:
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(
        status_code=status_code,
        content={"detail": exc.message, "code": exc.code},
        headers=headers,
    )


async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handles malformed request bodies with a `400 Bad Request`.

    Input values are not echoed back; only the location and message of each
    failing field.
    """
    errors = [
        {
            "field": ".".join(str(part) for part in error.get("loc", ()) if part != "body"),
            "message": error.get("msg", "Invalid value"),
        }
        for error in exc.errors()
    ]
    logger.info("request_validation_failed", path=request.url.path, fields=[e["field"] for e in errors])
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Validation failed", "code": "validation_error", "errors": errors},
    )


async def rate_limit_exception_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Handles exceptions raised by slowapi when a rate limit is exceeded."""
    logger.warning(
        "rate_limit_exceeded",
        client_ip=request.client.host if request.client else None,
        path=request.url.path,
        limit=str(exc.detail),
    )
    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content={"detail": "Too many requests", "code": "rate_limited"},
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "unhandled_exception",
        path=request.url.path,
        error_type=type(exc).__name__,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": InternalError().message, "code": "internal_error"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Registers all custom exception handlers with the FastAPI application."""
    app.add_exception_handler(RateLimitExceeded, rate_limit_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(CredoError, credo_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
