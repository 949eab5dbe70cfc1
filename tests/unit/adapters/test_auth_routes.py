"""HTTP contract of the auth and profile routes, with the auth service mocked."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from credo.core.exceptions import (
    ConflictError,
    DeliveryError,
    InvalidTokenError,
    NotActivatedError,
    NotFoundError,
    OtpExhaustedError,
    TokenExpiredError,
    ValidationError,
)
from credo.domain.entities.account import Role
from credo.domain.services.auth.auth_service import AuthService
from credo.domain.value_objects.results import AccountSummary, ActivationResult, SignupResult
from credo.domain.value_objects.tokens import AccessGrant, TokenPair
from credo.infrastructure.dependency_injection.auth_dependencies import get_auth_service
from tests.factories.account import create_fake_account

SUMMARY = AccountSummary(
    id=1,
    name="Ana",
    email="ana@example.com",
    gender="female",
    is_activated=False,
    role="user",
    permissions=(),
    created_at=datetime(2026, 10, 19, tzinfo=timezone.utc),
)


@pytest.fixture
def mock_auth_service():
    return AsyncMock(spec=AuthService)


@pytest_asyncio.fixture
async def client(app, mock_auth_service):
    app.dependency_overrides[get_auth_service] = lambda: mock_auth_service
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as http:
        yield http


SIGNUP_BODY = {
    "name": "Ana",
    "email": "ana@example.com",
    "password": "secret1",
    "confirmPassword": "secret1",
    "gender": "female",
}


class TestSignupRoute:
    @pytest.mark.asyncio
    async def test_created(self, client, mock_auth_service):
        mock_auth_service.signup.return_value = SignupResult(SUMMARY, "tok", "http://x/tok")

        response = await client.post("/api/v1/auth/signup", json=SIGNUP_BODY)

        assert response.status_code == 201
        body = response.json()
        assert body["account"]["email"] == "ana@example.com"
        assert body["account"]["is_activated"] is False
        assert "hashed_password" not in body["account"]
        mock_auth_service.signup.assert_awaited_once_with(
            name="Ana",
            email="ana@example.com",
            password="secret1",
            confirm_password="secret1",
            gender="female",
        )

    @pytest.mark.asyncio
    async def test_snake_case_confirmation_is_accepted(self, client, mock_auth_service):
        mock_auth_service.signup.return_value = SignupResult(SUMMARY, "tok", "http://x/tok")
        body = {**SIGNUP_BODY}
        body["confirm_password"] = body.pop("confirmPassword")

        response = await client.post("/api/v1/auth/signup", json=body)

        assert response.status_code == 201

    @pytest.mark.asyncio
    async def test_missing_field_is_400_without_calling_service(self, client, mock_auth_service):
        body = {key: value for key, value in SIGNUP_BODY.items() if key != "gender"}

        response = await client.post("/api/v1/auth/signup", json=body)

        assert response.status_code == 400
        assert response.json()["code"] == "validation_error"
        assert response.json()["errors"][0]["field"] == "gender"
        mock_auth_service.signup.assert_not_awaited()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error, status_code, code",
        [
            (ValidationError("Passwords do not match"), 400, "validation_error"),
            (ConflictError(), 409, "conflict"),
            (DeliveryError(), 503, "delivery_failed"),
        ],
    )
    async def test_domain_errors_are_mapped(self, client, mock_auth_service, error, status_code, code):
        mock_auth_service.signup.side_effect = error

        response = await client.post("/api/v1/auth/signup", json=SIGNUP_BODY)

        assert response.status_code == status_code
        assert response.json() == {"detail": error.message, "code": code}

    @pytest.mark.asyncio
    async def test_unexpected_error_is_opaque_500(self, client, mock_auth_service):
        mock_auth_service.signup.side_effect = RuntimeError("database exploded")

        response = await client.post("/api/v1/auth/signup", json=SIGNUP_BODY)

        assert response.status_code == 500
        assert response.json()["code"] == "internal_error"
        assert "exploded" not in response.text


class TestActivationRoutes:
    @pytest.mark.asyncio
    async def test_activate_by_link(self, client, mock_auth_service):
        mock_auth_service.activate.return_value = ActivationResult(SUMMARY, already_activated=True)

        response = await client.get("/api/v1/auth/activate/some.jwt.token")

        assert response.status_code == 200
        assert response.json()["already_activated"] is True
        mock_auth_service.activate.assert_awaited_once_with("some.jwt.token")

    @pytest.mark.asyncio
    async def test_expired_link_is_401(self, client, mock_auth_service):
        mock_auth_service.activate.side_effect = TokenExpiredError()

        response = await client.get("/api/v1/auth/activate/old")

        assert response.status_code == 401
        assert response.json()["code"] == "token_expired"

    @pytest.mark.asyncio
    async def test_activate_with_code(self, client, mock_auth_service):
        mock_auth_service.activate_with_otp.return_value = ActivationResult(SUMMARY, already_activated=False)

        response = await client.post(
            "/api/v1/auth/activate/otp", json={"email": "ana@example.com", "otp": "123456"}
        )

        assert response.status_code == 200
        assert response.json()["message"] == "Account activated"
        mock_auth_service.activate_with_otp.assert_awaited_once_with("ana@example.com", "123456")


class TestSessionRoutes:
    @pytest.mark.asyncio
    async def test_login_returns_pair(self, client, mock_auth_service):
        mock_auth_service.login.return_value = TokenPair("acc", "ref", 1800)

        response = await client.post(
            "/api/v1/auth/login", json={"email": "ana@example.com", "password": "secret1"}
        )

        assert response.status_code == 200
        assert response.json() == {
            "access_token": "acc",
            "refresh_token": "ref",
            "token_type": "Bearer",
            "expires_in": 1800,
        }

    @pytest.mark.asyncio
    async def test_login_inactive_is_403(self, client, mock_auth_service):
        mock_auth_service.login.side_effect = NotActivatedError()

        response = await client.post(
            "/api/v1/auth/login", json={"email": "ana@example.com", "password": "secret1"}
        )

        assert response.status_code == 403
        assert response.json()["code"] == "account_not_activated"

    @pytest.mark.asyncio
    async def test_refresh_accepts_camel_case(self, client, mock_auth_service):
        mock_auth_service.refresh.return_value = AccessGrant("new-access", 1800)

        response = await client.post("/api/v1/auth/refresh", json={"refreshToken": "ref"})

        assert response.status_code == 200
        assert response.json()["access_token"] == "new-access"
        assert "refresh_token" not in response.json()
        mock_auth_service.refresh.assert_awaited_once_with("ref")

    @pytest.mark.asyncio
    async def test_refresh_with_bad_token_is_401(self, client, mock_auth_service):
        mock_auth_service.refresh.side_effect = InvalidTokenError()

        response = await client.post("/api/v1/auth/refresh", json={"refresh_token": "bad"})

        assert response.status_code == 401
        assert response.headers["www-authenticate"] == "Bearer"


class TestCodeRoutes:
    @pytest.mark.asyncio
    async def test_request_code_defaults_to_password_reset(self, client, mock_auth_service):
        response = await client.post("/api/v1/auth/otp", json={"email": "ana@example.com"})

        assert response.status_code == 200
        mock_auth_service.request_otp.assert_awaited_once_with("ana@example.com", "password-reset")

    @pytest.mark.asyncio
    async def test_reset_password(self, client, mock_auth_service):
        response = await client.post(
            "/api/v1/auth/reset-password",
            json={
                "email": "ana@example.com",
                "otp": "123456",
                "newPassword": "n3wsecret",
                "confirmNewPassword": "n3wsecret",
            },
        )

        assert response.status_code == 200
        mock_auth_service.reset_password.assert_awaited_once_with(
            email="ana@example.com",
            otp="123456",
            new_password="n3wsecret",
            confirm_new_password="n3wsecret",
        )

    @pytest.mark.asyncio
    async def test_exhausted_code_is_429(self, client, mock_auth_service):
        mock_auth_service.reset_password.side_effect = OtpExhaustedError()

        response = await client.post(
            "/api/v1/auth/reset-password",
            json={
                "email": "ana@example.com",
                "otp": "000000",
                "new_password": "n3wsecret",
                "confirm_new_password": "n3wsecret",
            },
        )

        assert response.status_code == 429
        assert response.json()["code"] == "otp_exhausted"


class TestProfileRoute:
    @pytest.mark.asyncio
    async def test_missing_bearer_is_401(self, client, mock_auth_service):
        response = await client.get("/api/v1/users/profile")

        assert response.status_code == 401
        mock_auth_service.authenticate.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_deleted_account_is_401(self, client, mock_auth_service):
        mock_auth_service.authenticate.side_effect = NotFoundError()

        response = await client.get("/api/v1/users/profile", headers={"Authorization": "Bearer tok"})

        assert response.status_code == 401
        assert response.json()["code"] == "invalid_token"

    @pytest.mark.asyncio
    async def test_account_without_permission_is_403(self, client, mock_auth_service):
        mock_auth_service.authenticate.return_value = create_fake_account(role=None, permissions=[])

        response = await client.get("/api/v1/users/profile", headers={"Authorization": "Bearer tok"})

        assert response.status_code == 403
        assert response.json()["code"] == "permission_denied"
        mock_auth_service.profile.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_profile(self, client, mock_auth_service):
        account = create_fake_account(id=1, role=Role.GUEST)
        mock_auth_service.authenticate.return_value = account
        mock_auth_service.profile.return_value = SUMMARY

        response = await client.get("/api/v1/users/profile", headers={"Authorization": "Bearer tok"})

        assert response.status_code == 200
        assert response.json()["name"] == "Ana"
        mock_auth_service.authenticate.assert_awaited_once_with("tok")
        mock_auth_service.profile.assert_awaited_once_with(1)
