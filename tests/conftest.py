# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Generator, Iterator
from typing import Any
from unittest.mock import MagicMock

import pytest
import redis
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("DISPLAY_TIMEZONE", "UTC")
os.environ.setdefault("PASSWORD_HASH_ROUNDS", "1000")

from parley.api.dependencies import get_push_notifier_dep, get_session_store_dep
from parley.core import security
from parley.db.session import Base
from parley.db.session import get_db as app_get_session
from parley.main import app as fastapi_app
from parley.models import Room, User
from parley.schemas.user import SessionUser
from parley.services.notifications import PushNotifier
from parley.services.session_store import SessionStore

TEST_DB_URL = "sqlite://"
TEST_PASSWORD = "correct horse"


class FakeRedis:
    """In-memory stand-in for the Redis commands used by the session store.

    Time only moves when ``advance`` is called, so TTL expiry is deterministic.
    """

    def __init__(self) -> None:
        self.now = 0.0
        self.available = True
        self.get_calls = 0
        self._data: dict[str, tuple[str, float | None]] = {}

    def _check(self) -> None:
        if not self.available:
            raise redis.ConnectionError("Error connecting to redis")

    def set(self, name: str, value: str, ex: int | None = None) -> bool:
        self._check()
        self._data[name] = (value, None if ex is None else self.now + ex)
        return True

    def get(self, name: str) -> str | None:
        self.get_calls += 1
        self._check()
        entry = self._data.get(name)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at is not None and self.now >= expires_at:
            del self._data[name]
            return None
        return value

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    connection = engine.connect()
    transaction = connection.begin()
    SessionLocal = sessionmaker(
        bind=connection,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )
    session = SessionLocal()
    session.begin_nested()

    @event.listens_for(session, "after_transaction_end")
    def restart_savepoint(sess: Session, trans) -> None:  # pragma: no cover - SQLAlchemy internals
        if trans.nested and not getattr(trans._parent, "nested", False):
            session.begin_nested()

    try:
        yield session
    finally:
        event.remove(session, "after_transaction_end", restart_savepoint)
        session.close()

        if transaction.is_active:
            transaction.rollback()
        connection.close()

        # Ensure each test sees a clean database even if commits occurred.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture()
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture()
def session_store(fake_redis: FakeRedis) -> SessionStore:
    return SessionStore(fake_redis)


@pytest.fixture()
def push_notifier() -> MagicMock:
    """Push notifier double; its coroutine methods are AsyncMocks."""
    notifier = MagicMock(spec=PushNotifier)
    notifier.enabled = True
    notifier.generate_token.return_value = {"token": "beams-token"}
    return notifier


@pytest.fixture(autouse=True)
def override_dependencies(
    app: FastAPI,
    db_session: Session,
    session_store: SessionStore,
    push_notifier: MagicMock,
) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    overrides = {
        app_get_session: _get_session_override,
        get_session_store_dep: lambda: session_store,
        get_push_notifier_dep: lambda: push_notifier,
    }
    app.dependency_overrides.update(overrides)
    try:
        yield
    finally:
        for dependency in overrides:
            app.dependency_overrides.pop(dependency, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


def make_user(db_session: Session, username: str) -> User:
    user = User(
        username=username,
        email=f"{username}@example.com",
        password=security.hash_password(TEST_PASSWORD),
        external_id=security.new_external_id(),
    )
    db_session.add(user)
    db_session.flush()
    db_session.refresh(user)
    return user


def snapshot(user: User) -> SessionUser:
    return SessionUser(
        id=user.user_id,
        username=user.username,
        email=user.email,
        external_id=user.external_id,
    )


def login_headers(store: SessionStore, user: User, ttl_seconds: int = 3600) -> dict[str, str]:
    token = security.new_session_token()
    store.put(token, snapshot(user), ttl_seconds)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def alice(db_session: Session) -> User:
    return make_user(db_session, "alice")


@pytest.fixture()
def bob(db_session: Session) -> User:
    return make_user(db_session, "bob")


@pytest.fixture()
def carol(db_session: Session) -> User:
    return make_user(db_session, "carol")


@pytest.fixture()
def room(db_session: Session) -> Room:
    room = Room(name="general")
    db_session.add(room)
    db_session.flush()
    db_session.refresh(room)
    return room


@pytest.fixture()
def alice_headers(session_store: SessionStore, alice: User) -> dict[str, str]:
    return login_headers(session_store, alice)


@pytest.fixture()
def bob_headers(session_store: SessionStore, bob: User) -> dict[str, str]:
    return login_headers(session_store, bob)


def send(client: TestClient, headers: dict[str, str], **payload: Any):
    return client.post("/api/message", json=payload, headers=headers)
