"""Startup retries, the expired-code sweep and the lifespan manager."""

import asyncio
from datetime import timedelta
from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from tenacity import wait_none

from credo.core import lifecycle
from credo.domain.entities.one_time_code import OneTimeCode, OtpPurpose
from credo.domain.services.auth.otp import hash_code
from credo.utils.clock import utc_now


@pytest.fixture
def fast_retries(monkeypatch):
    monkeypatch.setattr(lifecycle, "DB_STARTUP_ATTEMPTS", 3)
    monkeypatch.setattr(lifecycle, "wait_exponential", lambda **kwargs: wait_none())


class TestWaitForDatabase:
    @pytest.mark.asyncio
    async def test_returns_once_database_answers(self, monkeypatch, fast_retries):
        health = AsyncMock(side_effect=[False, True])
        monkeypatch.setattr(lifecycle, "check_database_health", health)

        await lifecycle.wait_for_database()

        assert health.await_count == 2

    @pytest.mark.asyncio
    async def test_gives_up_after_all_attempts(self, monkeypatch, fast_retries):
        health = AsyncMock(return_value=False)
        monkeypatch.setattr(lifecycle, "check_database_health", health)

        with pytest.raises(RuntimeError, match="Database unavailable"):
            await lifecycle.wait_for_database()

        assert health.await_count == 3


@pytest.mark.asyncio
async def test_purge_expired_codes_once(monkeypatch, session_factory, code_repository):
    now = utc_now()
    for email, delta in (("old@example.com", -5), ("live@example.com", 5)):
        await code_repository.upsert(
            OneTimeCode(
                email=email,
                code_hash=hash_code("123456"),
                purpose=OtpPurpose.SIGNUP,
                expires_at=now + timedelta(minutes=delta),
                created_at=now,
            )
        )
    monkeypatch.setattr(lifecycle, "get_session_factory", lambda: session_factory)

    assert await lifecycle.purge_expired_codes_once() == 1
    assert await code_repository.get("live@example.com") is not None


@pytest.mark.asyncio
async def test_lifespan_waits_for_database_and_disposes_engine(monkeypatch):
    waited = AsyncMock()
    disposed = AsyncMock()
    monkeypatch.setattr(lifecycle, "wait_for_database", waited)
    monkeypatch.setattr(lifecycle, "dispose_engine", disposed)

    async with lifecycle.create_lifespan_manager()(FastAPI()):
        waited.assert_awaited_once()
        disposed.assert_not_awaited()

    disposed.assert_awaited_once()


@pytest.mark.asyncio
async def test_lifespan_cleans_up_when_the_app_fails(monkeypatch):
    disposed = AsyncMock()
    reaper_stopped = asyncio.Event()

    async def reaper(interval_seconds):
        try:
            await asyncio.sleep(3600)
        finally:
            reaper_stopped.set()

    monkeypatch.setattr(lifecycle, "wait_for_database", AsyncMock())
    monkeypatch.setattr(lifecycle, "dispose_engine", disposed)
    monkeypatch.setattr(lifecycle, "run_otp_reaper", reaper)
    monkeypatch.setattr(
        lifecycle, "settings", lifecycle.settings.model_copy(update={"OTP_PURGE_INTERVAL_SECONDS": 3600})
    )

    with pytest.raises(RuntimeError, match="boom"):
        async with lifecycle.create_lifespan_manager()(FastAPI()):
            await asyncio.sleep(0)
            raise RuntimeError("boom")

    disposed.assert_awaited_once()
    assert reaper_stopped.is_set()
