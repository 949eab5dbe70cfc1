import json

import pytest
from fastapi import Request

from credo.core import exceptions as exc
from credo.core.handlers import credo_error_handler, status_for


def _request(path: str = "/api/v1/auth/login") -> Request:
    return Request({"type": "http", "method": "POST", "path": path, "headers": [], "query_string": b""})


@pytest.mark.parametrize(
    "error, status_code",
    [
        (exc.ValidationError("Email is required"), 400),
        (exc.InvalidOtpError(), 400),
        (exc.OtpExpiredError(), 400),
        (exc.ConflictError(), 409),
        (exc.NotFoundError(), 404),
        (exc.OtpNotFoundError(), 404),
        (exc.NotActivatedError(), 403),
        (exc.PermissionDeniedError(), 403),
        (exc.InvalidCredentialsError(), 401),
        (exc.InvalidTokenError(), 401),
        (exc.MalformedTokenError(), 401),
        (exc.TokenSignatureError(), 401),
        (exc.TokenExpiredError(), 401),
        (exc.OtpExhaustedError(), 429),
        (exc.DeliveryError(), 503),
        (exc.InternalError(), 500),
    ],
)
def test_status_for_each_error(error, status_code):
    assert status_for(error) == status_code


def test_unmapped_error_defaults_to_500():
    class Unmapped(exc.CredoError):
        pass

    assert status_for(Unmapped("boom", "boom")) == 500


@pytest.mark.asyncio
async def test_handler_renders_detail_and_code():
    response = await credo_error_handler(_request(), exc.ConflictError())

    body = json.loads(response.body)
    assert response.status_code == 409
    assert body == {"detail": exc.ConflictError().message, "code": "conflict"}
    assert "www-authenticate" not in response.headers


@pytest.mark.asyncio
async def test_unauthorized_responses_carry_bearer_challenge():
    response = await credo_error_handler(_request(), exc.TokenExpiredError())

    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"
    assert json.loads(response.body)["code"] == "token_expired"
