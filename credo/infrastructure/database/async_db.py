from __future__ import annotations

"""
Asynchronous database utilities.

Provides the async SQLAlchemy engine and session factory used by the
repositories, a FastAPI dependency yielding a session per request, and the
startup helpers (table creation, health check). The engine is created lazily
from settings on first use so importing this module never opens a connection.

Key Components:
    - get_engine: The process-wide async engine.
    - get_session_factory: Factory bound to that engine.
    - get_async_db: FastAPI dependency yielding an AsyncSession.
    - create_async_db_and_tables: Creates the schema (tests, local setups).
    - check_database_health: ``SELECT 1`` round-trip.
"""

from typing import AsyncGenerator, Optional

from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel
from structlog import get_logger

import credo.domain.entities  # noqa: F401  registers tables on SQLModel.metadata
from credo.core.config.settings import settings

logger = get_logger(__name__)

_engine: Optional[AsyncEngine] = None
_session_factory: Optional[async_sessionmaker[AsyncSession]] = None


def _engine_options(url: str) -> dict:
    """Pool options only apply to server databases; SQLite uses its own pool."""
    if make_url(url).get_backend_name() == "sqlite":
        return {}
    return {
        "pool_size": settings.POSTGRES_POOL_SIZE,
        "max_overflow": settings.POSTGRES_MAX_OVERFLOW,
        "pool_timeout": settings.POSTGRES_POOL_TIMEOUT,
        "pool_pre_ping": True,
    }


def get_engine() -> AsyncEngine:
    global _engine
    if _engine is None:
        url = settings.database_url
        _engine = create_async_engine(url, echo=settings.DB_ECHO, **_engine_options(url))
        logger.info("async_engine_created", backend=make_url(url).get_backend_name())
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    global _session_factory
    if _session_factory is None:
        _session_factory = async_sessionmaker(bind=get_engine(), expire_on_commit=False)
    return _session_factory


async def get_async_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that yields an AsyncSession.

    Rolls back if the request fails and always closes the session.
    """
    async with get_session_factory()() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            logger.error("async_session_rollback")
            raise


async def create_async_db_and_tables(engine: Optional[AsyncEngine] = None) -> None:
    """
    Create tables using the async engine (mainly for test suites and local runs).
    """
    logger.info("creating_database_tables")
    async with (engine or get_engine()).begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


async def check_database_health(engine: Optional[AsyncEngine] = None) -> bool:
    """Runs ``SELECT 1``; returns False instead of raising on connection errors."""
    try:
        async with (engine or get_engine()).connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True
    except Exception as exc:
        logger.error("database_health_check_failed", error=str(exc))
        return False


async def dispose_engine() -> None:
    global _engine, _session_factory
    if _engine is not None:
        await _engine.dispose()
        logger.info("async_engine_disposed")
    _engine = None
    _session_factory = None
