"""Tests for OneTimeCodeService against a mocked repository."""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock

import pytest

from credo.core.exceptions import InvalidOtpError, OtpExhaustedError, OtpExpiredError, OtpNotFoundError
from credo.domain.entities.one_time_code import OneTimeCode, OtpPurpose
from credo.domain.interfaces.repositories import IOneTimeCodeRepository
from credo.domain.services.auth.otp import OneTimeCodeService, generate_code, hash_code

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


def _record(code="123456", purpose=OtpPurpose.PASSWORD_RESET, attempts=0, expires_in=timedelta(minutes=5)):
    return OneTimeCode(
        email="ana@example.com",
        code_hash=hash_code(code),
        purpose=purpose,
        expires_at=NOW + expires_in,
        attempts=attempts,
        created_at=NOW,
    )


class TestOneTimeCodeService:
    @pytest.fixture
    def repository(self):
        return AsyncMock(spec=IOneTimeCodeRepository)

    @pytest.fixture
    def service(self, repository):
        return OneTimeCodeService(repository, ttl=timedelta(minutes=10), max_attempts=3, clock=lambda: NOW)

    def test_generate_code_is_numeric_with_requested_length(self):
        for length in (4, 6, 8):
            code = generate_code(length)
            assert len(code) == length
            assert code.isdigit()

    def test_hash_code_is_sha256_hex(self):
        assert hash_code("000000") != "000000"
        assert len(hash_code("000000")) == 64

    @pytest.mark.asyncio
    async def test_issue_stores_digest_and_expiry(self, service, repository):
        # Act
        code = await service.issue("ana@example.com", OtpPurpose.PASSWORD_RESET)

        # Assert
        stored = repository.upsert.await_args.args[0]
        assert len(code) == 6 and code.isdigit()
        assert stored.email == "ana@example.com"
        assert stored.code_hash == hash_code(code)
        assert stored.code_hash != code
        assert stored.attempts == 0
        assert stored.expires_at == NOW + timedelta(minutes=10)

    @pytest.mark.asyncio
    async def test_verify_match_consumes_record(self, service, repository):
        repository.get.return_value = _record("654321")

        result = await service.verify("ana@example.com", "654321", OtpPurpose.PASSWORD_RESET)

        assert result.matched is True
        repository.delete.assert_awaited_once_with("ana@example.com", hash_code("654321"))
        repository.increment_attempts.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_verify_without_record_raises_not_found(self, service, repository):
        repository.get.return_value = None

        with pytest.raises(OtpNotFoundError):
            await service.verify("ana@example.com", "123456")

    @pytest.mark.asyncio
    async def test_verify_other_purpose_is_treated_as_absent(self, service, repository):
        repository.get.return_value = _record(purpose=OtpPurpose.SIGNUP)

        with pytest.raises(OtpNotFoundError):
            await service.verify("ana@example.com", "123456", OtpPurpose.PASSWORD_RESET)
        repository.delete.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_verify_expired_deletes_and_raises(self, service, repository):
        repository.get.return_value = _record(expires_in=timedelta(seconds=-1))

        with pytest.raises(OtpExpiredError):
            await service.verify("ana@example.com", "123456")
        repository.delete.assert_awaited_once_with("ana@example.com", hash_code("123456"))

    @pytest.mark.asyncio
    async def test_expiry_boundary_counts_as_expired(self, service, repository):
        repository.get.return_value = _record(expires_in=timedelta(0))

        with pytest.raises(OtpExpiredError):
            await service.verify("ana@example.com", "123456")

    @pytest.mark.asyncio
    async def test_mismatch_below_ceiling_keeps_record(self, service, repository):
        repository.get.return_value = _record("111111")
        repository.increment_attempts.return_value = 1

        with pytest.raises(InvalidOtpError):
            await service.verify("ana@example.com", "222222")
        repository.delete.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_mismatch_reaching_ceiling_exhausts(self, service, repository):
        repository.get.return_value = _record("111111", attempts=2)
        repository.increment_attempts.return_value = 3

        with pytest.raises(OtpExhaustedError):
            await service.verify("ana@example.com", "222222")
        repository.delete.assert_awaited_once_with("ana@example.com", hash_code("111111"))
        repository.increment_attempts.assert_awaited_once_with("ana@example.com", hash_code("111111"))

    @pytest.mark.asyncio
    async def test_record_vanishing_during_increment_is_not_found(self, service, repository):
        repository.get.return_value = _record("111111")
        repository.increment_attempts.return_value = None

        with pytest.raises(OtpNotFoundError):
            await service.verify("ana@example.com", "222222")

    @pytest.mark.asyncio
    async def test_purge_expired_uses_clock(self, service, repository):
        repository.purge_expired.return_value = 2

        assert await service.purge_expired() == 2
        repository.purge_expired.assert_awaited_once_with(NOW)

    @pytest.mark.asyncio
    async def test_match_on_replaced_record_is_not_found(self, service, repository):
        repository.get.return_value = _record("654321")
        repository.delete.return_value = False

        with pytest.raises(OtpNotFoundError):
            await service.verify("ana@example.com", "654321", OtpPurpose.PASSWORD_RESET)
        repository.delete.assert_awaited_once_with("ana@example.com", hash_code("654321"))

    @pytest.mark.asyncio
    async def test_purge_with_code_is_scoped_to_it(self, service, repository):
        await service.purge("ana@example.com", "123456")

        repository.delete.assert_awaited_once_with("ana@example.com", hash_code("123456"))

    @pytest.mark.asyncio
    async def test_purge_without_code_drops_any_record(self, service, repository):
        await service.purge("ana@example.com")

        repository.delete.assert_awaited_once_with("ana@example.com", None)
