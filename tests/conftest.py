"""
Shared test environment, fixtures and logging hooks.

Environment variables are set before any application module is imported:
a throwaway SQLite database, fresh JWT and Fernet secrets, a temporary
profile-picture directory, rate limiting off and a dummy model key.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Iterator

import pytest
from cryptography.fernet import Fernet


_LOGGER = logging.getLogger("tests")
_TMP_DIR = Path(tempfile.mkdtemp(prefix="mindful-youth-tests-"))

os.environ["ENV"] = "test"
os.environ["DATABASE_URL"] = f"sqlite:///{_TMP_DIR / 'test.sqlite'}"
os.environ["JWT_SECRET_KEY"] = "test-secret-key"
os.environ["FERNET_SECRET"] = Fernet.generate_key().decode()
os.environ["PROFILE_PICTURE_DIR"] = str(_TMP_DIR / "profile-pictures")
os.environ["RATELIMIT_ENABLED"] = "false"
os.environ["ENABLE_SEED_ROUTES"] = "true"
os.environ["LLM_API_KEY"] = "test-llm-key"
os.environ["SNAPSHOT_HEARTBEAT_SECONDS"] = "0.05"

from fastapi.testclient import TestClient  # noqa: E402

from mindful_youth.main import app  # noqa: E402
from mindful_youth.models import database  # noqa: E402
from mindful_youth.services.chat_session_store import chat_stores  # noqa: E402


@pytest.fixture(autouse=True)
def _fresh_database() -> Iterator[None]:
    """Every test starts from empty tables and no cached chat state."""

    database.Base.metadata.drop_all(bind=database.engine)
    database.Base.metadata.create_all(bind=database.engine)
    chat_stores.clear()
    yield
    chat_stores.clear()


@pytest.fixture
def db():
    session = database.SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client() -> Iterator[TestClient]:
    # No context manager: the lifespan scheduler stays off in tests
    yield TestClient(app)


def _sign_up(client: TestClient, email: str, password: str = "secret123") -> dict:
    response = client.post("/auth/signup", json={"email": email, "password": password})
    assert response.status_code == 201, response.text
    body = response.json()
    return {
        "id": body["user"]["id"],
        "email": email,
        "password": password,
        "token": body["token"],
        "headers": {"Authorization": f"Bearer {body['token']}"},
    }


@pytest.fixture
def sign_up(client):
    """Factory that registers a user and returns its id, token and auth headers."""

    def _factory(email: str, password: str = "secret123") -> dict:
        return _sign_up(client, email, password)

    return _factory


@pytest.fixture
def alice(sign_up) -> dict:
    return sign_up("alice@example.com")


@pytest.fixture
def bob(sign_up) -> dict:
    return sign_up("bob@example.com")


def pytest_sessionstart(session) -> None:  # noqa: D401 - pytest hook signature
    """Log the start of the test session."""

    _LOGGER.info("Test session started (tmp=%s)", _TMP_DIR)


def pytest_sessionfinish(session, exitstatus: int) -> None:  # noqa: D401 - pytest hook signature
    """Log the end of the test session."""

    _LOGGER.info("Test session finished (exitstatus=%s)", exitstatus)


def pytest_runtest_logstart(nodeid: str, location) -> None:  # noqa: D401 - pytest hook signature
    """Log each test as it starts."""

    _LOGGER.info("Test started: %s", nodeid)


def pytest_runtest_logreport(report) -> None:  # noqa: D401 - pytest hook signature
    """Log each test outcome."""

    if report.when != "call":
        return
    if report.passed:
        _LOGGER.info("Test passed: %s", report.nodeid)
        return
    if report.skipped:
        _LOGGER.warning("Test skipped: %s", report.nodeid)
        return
    _LOGGER.error("Test failed: %s", report.nodeid)
