"""Middleware configuration for the FastAPI application.

Registers CORS and the request-context middleware, which binds a correlation
id to structlog's contextvars for the lifetime of each request and echoes it
back in the ``X-Request-ID`` response header.
"""

import time
import uuid

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from credo.core.config.settings import settings

REQUEST_ID_HEADER = "X-Request-ID"

logger = structlog.get_logger(__name__)


def configure_middleware(app: FastAPI) -> None:
    """Configure all middleware for the FastAPI application.

    Args:
        app (FastAPI): The FastAPI application instance
    """
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER],
    )

    app.middleware("http")(request_context_middleware)


async def request_context_middleware(request: Request, call_next):
    """Binds ``correlation_id``, method and path to every log line of the request.

    An incoming ``X-Request-ID`` is reused when it looks sane, otherwise a
    fresh id is generated.
    """
    incoming = request.headers.get(REQUEST_ID_HEADER, "")
    correlation_id = incoming if 0 < len(incoming) <= 128 and incoming.isprintable() else uuid.uuid4().hex

    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(
        correlation_id=correlation_id,
        method=request.method,
        path=request.url.path,
    )
    started = time.perf_counter()
    try:
        response = await call_next(request)
    finally:
        elapsed_ms = round((time.perf_counter() - started) * 1000, 2)
        logger.debug("request_finished", duration_ms=elapsed_ms)
        structlog.contextvars.clear_contextvars()

    response.headers[REQUEST_ID_HEADER] = correlation_id
    return response
