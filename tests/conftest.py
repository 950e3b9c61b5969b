# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from datetime import UTC, datetime, timedelta
from itertools import count
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")

from edloop.api.v1.dependencies import get_clock
from edloop.core.security import create_access_token
from edloop.db.session import Base
from edloop.db.session import get_db as app_get_session
from edloop.main import app as fastapi_app
from edloop.models import Community, Post, User

TEST_DB_URL = "sqlite://"
FROZEN_NOW = datetime(2026, 10, 19, 12, 0, tzinfo=UTC)

_USER_COUNTER = count(1)
_COMMUNITY_COUNTER = count(1)


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
    SessionLocal = sessionmaker(
        bind=engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()

        # Ensure each test sees a clean database even if commits occurred.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_session_dependency(app: FastAPI, db_session: Session) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)


@pytest.fixture()
def frozen_clock(app: FastAPI) -> Iterator[Callable[[], datetime]]:
    """Pin the ranking clock to ``FROZEN_NOW``."""

    def _clock() -> datetime:
        return FROZEN_NOW

    app.dependency_overrides[get_clock] = lambda: _clock
    try:
        yield _clock
    finally:
        app.dependency_overrides.pop(get_clock, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


def _make_user(db_session: Session, display_name: str) -> User:
    user = User(
        username=f"user{next(_USER_COUNTER)}",
        display_name=display_name,
        university="Test University",
    )
    db_session.add(user)
    db_session.commit()
    return user


@pytest.fixture()
def test_user(db_session: Session) -> User:
    """Create and return a persisted test user."""
    return _make_user(db_session, "Test User")


@pytest.fixture()
def other_user(db_session: Session) -> User:
    """Create and return a second persisted user."""
    return _make_user(db_session, "Other User")


@pytest.fixture()
def auth_token(test_user: User) -> dict[str, str]:
    """Return authorization headers for the primary test user."""
    token = create_access_token(test_user.id)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def other_auth_token(other_user: User) -> dict[str, str]:
    """Return authorization headers for the secondary test user."""
    token = create_access_token(other_user.id)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def community(db_session: Session, test_user: User) -> Community:
    """Create a default test community."""
    community = Community(
        name=f"test-{next(_COMMUNITY_COUNTER)}",
        display_name="Test Community",
        description="Test community description",
        category="science",
        created_by=test_user.id,
    )
    db_session.add(community)
    db_session.commit()
    return community


@pytest.fixture()
def make_post(
    db_session: Session, test_user: User, community: Community
) -> Callable[..., Post]:
    """Return a factory inserting posts directly, bypassing the author vote.

    Counters default to zero so they agree with an empty ledger.
    """

    def _make_post(
        *,
        title: str = "Test post",
        age: timedelta = timedelta(0),
        upvotes: int = 0,
        downvotes: int = 0,
        author: User | None = None,
        **fields: Any,
    ) -> Post:
        created_at = FROZEN_NOW - age
        post = Post(
            author_id=(author or test_user).id,
            community_id=community.id,
            title=title,
            content="Body",
            type="text",
            tags=[],
            upvotes=upvotes,
            downvotes=downvotes,
            created_at=created_at,
            updated_at=created_at,
            **fields,
        )
        db_session.add(post)
        db_session.commit()
        return post

    return _make_post


@pytest.fixture()
def test_post(make_post: Callable[..., Post]) -> Post:
    """Create a baseline post with no votes."""
    return make_post(title="Test post content")
