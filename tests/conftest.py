"""
tests/conftest.py -- Shared test fixtures for QuoraLite.

This module provides:
  - FakeClock / clock: a settable clock injected into SessionService so tests
    can cross the 8-hour session TTL without sleeping
  - stores: isolated in-memory UserStore / SessionStore / QAStore per test
  - services: the full use-case object graph over those stores
  - make_user: signup helper returning a stored User
  - api_client: TestClient over the real FastAPI app with a patched lifespan

Design: Named shared-memory SQLite URIs (not plain :memory:) are required
because the three stores each own an engine, and TestClient runs route
handlers in a thread pool. The named URI format
(file:name?mode=memory&cache=shared&uri=true) shares one in-memory instance
across all connections in the same process.

DEBUG must be set before any core/auth import so get_settings() auto-generates
SECRET_KEY instead of raising. Rate limits are raised so repeated signins in
one module do not trip the per-IP limiter.
"""

from __future__ import annotations

import os
import uuid
from collections.abc import Generator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

# CRITICAL: Set env before any auth/core import.
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("SIGNIN_RATE_LIMIT", "1000/minute")
os.environ.setdefault("SIGNUP_RATE_LIMIT", "1000/minute")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import column, func, select, table

from api.main import app, wire_services
from auth.accounts import AccountService
from auth.models import ROLE_ADMIN, ROLE_NONADMIN, User
from auth.sessions import SessionService
from auth.store import SessionStore, UserStore
from qa.admin import UserAdminService
from qa.answers import AnswerService
from qa.questions import QuestionService
from qa.store import QAStore

# ---------------------------------------------------------------------------
# Clock
# ---------------------------------------------------------------------------


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now = self.now + delta


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


# ---------------------------------------------------------------------------
# Store helpers
# ---------------------------------------------------------------------------


def memory_db_url(prefix: str) -> str:
    """Return a fresh named shared-memory SQLite URL."""
    return f"sqlite:///file:{prefix}_{uuid.uuid4().hex}?mode=memory&cache=shared&uri=true"


@dataclass
class Stores:
    users: UserStore
    sessions: SessionStore
    qa: QAStore


@dataclass
class Services:
    sessions: SessionService
    accounts: AccountService
    questions: QuestionService
    answers: AnswerService
    admin: UserAdminService


@pytest.fixture
def stores() -> Generator[Stores, None, None]:
    url = memory_db_url("test_unit")
    # UserStore is opened first and closed last so the shared-memory DB
    # outlives the other engines.
    s = Stores(users=UserStore(url), sessions=SessionStore(url), qa=QAStore(url))
    yield s
    s.qa.close()
    s.sessions.close()
    s.users.close()


@pytest.fixture
def services(stores: Stores, clock: FakeClock) -> Services:
    session_service = SessionService(stores.sessions, stores.users, clock=clock)
    return Services(
        sessions=session_service,
        accounts=AccountService(stores.users, session_service),
        questions=QuestionService(session_service, stores.qa, stores.users),
        answers=AnswerService(session_service, stores.qa),
        admin=UserAdminService(session_service, stores.users, stores.qa),
    )


@pytest.fixture
def session_count(stores: Stores):
    """Return a function counting the session rows recorded for a user id."""

    def _count(user_id: int) -> int:
        stmt = select(func.count()).select_from(table("user_sessions")).where(column("user_id") == user_id)
        with stores.sessions.engine.connect() as conn:
            return conn.execute(stmt).scalar_one()

    return _count


def _new_user(username: str) -> User:
    return User(
        uuid="",
        username=username,
        email=f"{username}@example.com",
        role="",
        first_name=username.capitalize(),
        last_name="Tester",
    )


@pytest.fixture
def make_user(services: Services):
    """Return a factory: make_user("ann", admin=False, password="pw") -> stored User."""

    def _make(username: str, admin: bool = False, password: str = "password123") -> User:
        role = ROLE_ADMIN if admin else ROLE_NONADMIN
        return services.accounts.signup(_new_user(username), password, role=role)

    return _make


# ---------------------------------------------------------------------------
# API client
# ---------------------------------------------------------------------------


def _patch_lifespan(user_store: UserStore, session_store: SessionStore, qa_store: QAStore):
    """Return a lifespan that wires pre-created test stores into app.state."""

    @asynccontextmanager
    async def test_lifespan(app):
        wire_services(app, user_store, session_store, qa_store)
        yield

    return test_lifespan


@pytest.fixture(scope="module")
def api_client() -> Generator[tuple[TestClient, User], None, None]:
    """Yield (client, admin_user) for API integration tests.

    The admin account (username "rootadmin", password "adminpass123") is
    created before the client starts, since signup over HTTP can only create
    non-admin users.
    """
    url = memory_db_url("test_api")
    user_store = UserStore(url)
    session_store = SessionStore(url)
    qa_store = QAStore(url)

    accounts = AccountService(user_store, SessionService(session_store, user_store))
    admin = accounts.signup(_new_user("rootadmin"), "adminpass123", role=ROLE_ADMIN)

    app.router.lifespan_context = _patch_lifespan(user_store, session_store, qa_store)

    with TestClient(app, raise_server_exceptions=True) as client:
        yield client, admin

    qa_store.close()
    session_store.close()
    user_store.close()
