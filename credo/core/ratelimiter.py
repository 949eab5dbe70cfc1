"""Request rate limiting with slowapi.

Limits are keyed on the client address and applied per route with
``@limiter.limit(...)``; decorated endpoints must accept a ``request:
Request`` argument. The limit strings come from settings so deployments can
tune them without code changes.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from credo.core.config.settings import settings


def get_limiter() -> Limiter:
    """Factory function for the rate limiter.

    Returns a disabled limiter when RATE_LIMIT_ENABLED is false, which is how
    the test suite runs.
    """
    return Limiter(
        key_func=get_remote_address,
        enabled=settings.RATE_LIMIT_ENABLED,
        storage_uri=settings.RATE_LIMIT_STORAGE_URI,
        headers_enabled=False,
    )


limiter = get_limiter()
