import os

# Settings are read once at import time; configure the test environment first.
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ACCESS_TOKEN_SECRET", "test-access-secret-0123456789abcdefghij")
os.environ.setdefault("REFRESH_TOKEN_SECRET", "test-refresh-secret-0123456789abcdefghij")
os.environ.setdefault("ACTIVATION_TOKEN_SECRET", "test-activation-secret-0123456789abcdefgh")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("EMAIL_TEST_MODE", "true")
os.environ.setdefault("LOG_JSON", "false")
os.environ.setdefault("OTP_PURGE_INTERVAL_SECONDS", "0")

from datetime import timedelta  # noqa: E402
from typing import List, Tuple  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402
from sqlmodel import SQLModel  # noqa: E402

import credo.domain.entities  # noqa: E402,F401
from credo.core.config.settings import settings  # noqa: E402
from credo.domain.interfaces.services import INotifier  # noqa: E402
from credo.domain.services.auth.auth_service import AuthService  # noqa: E402
from credo.domain.services.auth.otp import OneTimeCodeService  # noqa: E402
from credo.domain.services.auth.token import TokenService  # noqa: E402
from credo.domain.value_objects.policy import AuthPolicy  # noqa: E402
from credo.domain.value_objects.tokens import TokenClass  # noqa: E402
from credo.infrastructure.repositories import AccountRepository, OneTimeCodeRepository  # noqa: E402
from credo.infrastructure.services.email.templates import JinjaMessageRenderer  # noqa: E402
from credo.utils.security import PasswordHasher  # noqa: E402

TEST_SECRETS = {
    TokenClass.ACCESS: settings.ACCESS_TOKEN_SECRET.get_secret_value(),
    TokenClass.REFRESH: settings.REFRESH_TOKEN_SECRET.get_secret_value(),
    TokenClass.ACTIVATION: settings.ACTIVATION_TOKEN_SECRET.get_secret_value(),
}
TEST_LIFETIMES = {
    TokenClass.ACCESS: timedelta(minutes=30),
    TokenClass.REFRESH: timedelta(days=7),
    TokenClass.ACTIVATION: timedelta(days=1),
}


class RecordingNotifier(INotifier):
    """In-memory notifier that records every message it is asked to send."""

    def __init__(self, accept: bool = True):
        self.accept = accept
        self.sent: List[Tuple[str, str, str]] = []

    async def send(self, address: str, subject: str, body: str) -> bool:
        self.sent.append((address, subject, body))
        return self.accept


# ---------------------------------------------------------------------------
# Database
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def engine():
    """Fresh in-memory SQLite database per test."""
    test_engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(bind=engine, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


# ---------------------------------------------------------------------------
# Collaborators
# ---------------------------------------------------------------------------


@pytest.fixture
def token_service():
    return TokenService(TEST_SECRETS, TEST_LIFETIMES, issuer="credo", audience="credo:api:v1")


@pytest.fixture
def hasher():
    return PasswordHasher(rounds=4)


@pytest.fixture
def renderer():
    return JinjaMessageRenderer(settings.EMAIL_TEMPLATES_DIR, app_name="Credo")


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def policy():
    return AuthPolicy(activation_url_base="http://localhost:3000/api/v1/auth/activate")


@pytest.fixture
def account_repository(db_session):
    return AccountRepository(db_session)


@pytest.fixture
def code_repository(db_session):
    return OneTimeCodeRepository(db_session)


@pytest.fixture
def otp_service(code_repository, policy):
    return OneTimeCodeService(
        code_repository,
        ttl=policy.otp_ttl,
        max_attempts=policy.otp_max_attempts,
        length=policy.otp_length,
    )


@pytest.fixture
def auth_service(account_repository, otp_service, token_service, hasher, notifier, renderer, policy):
    """AuthService wired to SQLite repositories and a recording notifier."""
    return AuthService(
        accounts=account_repository,
        otps=otp_service,
        tokens=token_service,
        hasher=hasher,
        notifier=notifier,
        renderer=renderer,
        policy=policy,
    )


# ---------------------------------------------------------------------------
# HTTP
# ---------------------------------------------------------------------------


@pytest.fixture
def app(session_factory, notifier):
    """Application with the database and notifier swapped for test doubles."""
    from credo.core.application import create_application
    from credo.infrastructure.database.async_db import get_async_db
    from credo.infrastructure.dependency_injection.auth_dependencies import get_notifier

    application = create_application()

    async def _test_db():
        async with session_factory() as session:
            yield session

    application.dependency_overrides[get_async_db] = _test_db
    application.dependency_overrides[get_notifier] = lambda: notifier
    yield application
    application.dependency_overrides.clear()


@pytest_asyncio.fixture
async def async_client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
