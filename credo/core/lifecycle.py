"""Application lifecycle management.

On startup: wait for the database (retried with tenacity), optionally create
the tables, and start the background sweep that deletes expired one-time
codes. On shutdown: stop the sweep and dispose of the engine.
"""

import asyncio
from contextlib import asynccontextmanager, suppress

from fastapi import FastAPI
from tenacity import AsyncRetrying, RetryError, stop_after_attempt, wait_exponential

from credo.core.config.settings import settings
from credo.core.logging import logger
from credo.infrastructure.database import (
    check_database_health,
    create_async_db_and_tables,
    dispose_engine,
    get_session_factory,
)
from credo.infrastructure.dependency_injection.auth_dependencies import build_otp_service
from credo.infrastructure.repositories.one_time_code_repository import OneTimeCodeRepository

DB_STARTUP_ATTEMPTS = 5


async def wait_for_database() -> None:
    """Polls the database until it answers or every attempt has failed.

    Raises:
        RuntimeError: If the database is still unavailable after all attempts.
    """
    try:
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(DB_STARTUP_ATTEMPTS),
            wait=wait_exponential(multiplier=0.5, max=8),
            reraise=False,
        ):
            with attempt:
                if not await check_database_health():
                    raise ConnectionError("database not reachable")
    except RetryError as exc:
        logger.error("database_unavailable_on_startup", attempts=DB_STARTUP_ATTEMPTS)
        raise RuntimeError("Database unavailable") from exc


async def purge_expired_codes_once() -> int:
    async with get_session_factory()() as session:
        service = build_otp_service(OneTimeCodeRepository(session), settings)
        return await service.purge_expired()


async def run_otp_reaper(interval_seconds: float) -> None:
    """Deletes expired one-time codes every `interval_seconds` until cancelled."""
    while True:
        await asyncio.sleep(interval_seconds)
        try:
            await purge_expired_codes_once()
        except Exception as exc:
            logger.error("otp_reaper_failed", error=str(exc), error_type=type(exc).__name__)


def create_lifespan_manager():
    """Create the application lifespan manager.

    Returns:
        AsyncContextManager: The lifespan manager for the FastAPI application
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        await wait_for_database()
        if settings.DB_CREATE_TABLES_ON_STARTUP:
            await create_async_db_and_tables()

        reaper = None
        if settings.OTP_PURGE_INTERVAL_SECONDS > 0:
            reaper = asyncio.create_task(run_otp_reaper(settings.OTP_PURGE_INTERVAL_SECONDS))
        logger.info("application_startup", env=settings.APP_ENV, version=settings.VERSION)

        try:
            yield
        finally:
            # Shutdown
            if reaper is not None:
                reaper.cancel()
                with suppress(asyncio.CancelledError):
                    await reaper
            await dispose_engine()
            logger.info("application_shutdown", env=settings.APP_ENV)

    return lifespan
