"""Shared pytest fixtures for the DevSphere tests."""

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from devsphere.application.services.account_service import AccountService
from devsphere.core.app_factory import create_application
from devsphere.core.config import Settings
from devsphere.infrastructure.persistence.sqlite import SQLitePersistence
from devsphere.services.otp_manager import OtpManager
from devsphere.services.password_hasher import PasswordHasher
from devsphere.services.quiz_generator import QuizGenerator
from devsphere.services.token_service import TokenService

ACCESS_SECRET = "test-access-secret-for-pytest-32chars!"
REFRESH_SECRET = "test-refresh-secret-for-pytest-32chars"
ADMIN_EMAIL = "root@devsphere.io"
ADMIN_PASSWORD = "root-password-123"


class FakeClock:
    """Settable UTC clock for expiry tests."""

    def __init__(self, now=None):
        self.now = now or datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now = self.now + timedelta(**kwargs)


def make_openai_client(content):
    """Minimal stand-in for ``AsyncOpenAI`` returning ``content`` from chat completions."""
    client = MagicMock()
    response = SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])
    client.chat.completions.create = AsyncMock(return_value=response)
    return client


# =============================================================================
# Service-level fixtures
# =============================================================================

@pytest.fixture
def store():
    persistence = SQLitePersistence(":memory:")
    yield persistence
    persistence.close()


@pytest.fixture
def hasher():
    return PasswordHasher(rounds=4)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def token_service():
    return TokenService(ACCESS_SECRET, REFRESH_SECRET)


@pytest.fixture
def otp_manager(store, clock):
    return OtpManager(store, ttl_minutes=10, clock=clock)


@pytest.fixture
def notifier():
    return MagicMock()


@pytest.fixture
def account_service(store, hasher, token_service, otp_manager, notifier):
    return AccountService(store, hasher, token_service, otp_manager, notifier)


# =============================================================================
# HTTP fixtures
# =============================================================================

@pytest.fixture
def settings(monkeypatch):
    monkeypatch.setenv("JWT_SECRET", ACCESS_SECRET)
    monkeypatch.setenv("JWT_REFRESH_SECRET", REFRESH_SECRET)
    monkeypatch.setenv("DATABASE_PATH", ":memory:")
    monkeypatch.setenv("BCRYPT_ROUNDS", "4")
    monkeypatch.setenv("ADMIN_EMAIL", ADMIN_EMAIL)
    monkeypatch.setenv("ADMIN_PASSWORD", ADMIN_PASSWORD)
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.delenv("SMTP_HOST", raising=False)
    return Settings()


@pytest.fixture
def openai_client():
    return make_openai_client(
        '{"question": "Which keyword defines a function in Python?",'
        ' "options": ["func", "def", "fn", "lambda"], "correctAnswer": 1,'
        ' "explanation": "Functions are declared with def."}'
    )


@pytest.fixture
def client(settings, notifier, openai_client):
    app = create_application(
        settings,
        email_service=notifier,
        quiz_generator=QuizGenerator(None, "gpt-test", client=openai_client),
    )
    with TestClient(app) as test_client:
        yield test_client


def auth_header(token):
    return {"Authorization": f"Bearer {token}"}


def register_and_login(client, email="a@x.com", password="pw123456"):
    resp = client.post("/register", json={"email": email, "password": password})
    assert resp.status_code == 201, resp.text
    resp = client.post("/login", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.text
    return resp.json()
