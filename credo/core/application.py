"""Application factory for creating and configuring the FastAPI application.
"""

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from credo.adapters.api.v1 import api_router
from credo.core.config.settings import settings
from credo.core.handlers import register_exception_handlers
from credo.core.lifecycle import create_lifespan_manager
from credo.core.middleware import configure_middleware
from credo.core.ratelimiter import limiter


def create_application() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        FastAPI: The configured FastAPI application instance
    """
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        description="Account signup, activation, login and password reset.",
        debug=settings.DEBUG,
        lifespan=create_lifespan_manager(),
        default_response_class=JSONResponse,
    )

    # slowapi looks the limiter up on app state
    app.state.limiter = limiter

    configure_middleware(app)
    register_exception_handlers(app)

    app.include_router(api_router, prefix="/api/v1")

    return app
