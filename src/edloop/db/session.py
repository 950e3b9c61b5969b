"""Database engine and session configuration."""

from __future__ import annotations

from collections.abc import Generator
from typing import Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

from edloop.core.settings import settings

SQLITE_BUSY_TIMEOUT_SECONDS = 30.0


class Base(DeclarativeBase):
    """Declarative base shared by all ORM models."""


# Ensure model modules are imported so that metadata is populated when create_all runs.
import edloop.models  # noqa: E402,F401


def _engine_kwargs(database_url: str) -> dict[str, Any]:
    """Return engine keyword arguments for the backend named by ``database_url``."""
    kwargs: dict[str, Any] = {"pool_pre_ping": True, "echo": settings.sql_debug}
    url = make_url(database_url)
    if url.get_backend_name() == "sqlite":
        # Request handlers and dependencies run on different worker threads.
        kwargs["connect_args"] = {
            "check_same_thread": False,
            "timeout": SQLITE_BUSY_TIMEOUT_SECONDS,
        }
        if url.database in (None, "", ":memory:"):
            # One shared connection, otherwise every checkout sees an empty database.
            kwargs["poolclass"] = StaticPool
    return kwargs


def _use_immediate_transactions(engine: Engine) -> None:
    """Make every SQLite transaction take the database write lock up front.

    pysqlite defers ``BEGIN`` until the first write, so two connections can
    both read a post before either writes it. ``BEGIN IMMEDIATE`` makes the
    read-modify-write in ``VoteLedger.cast_vote`` atomic across processes.
    """

    @event.listens_for(engine, "connect")
    def _disable_pysqlite_begin(dbapi_connection, connection_record) -> None:  # type: ignore[no-untyped-def]
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _begin_immediate(conn) -> None:  # type: ignore[no-untyped-def]
        conn.exec_driver_sql("BEGIN IMMEDIATE")


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:  # type: ignore[no-untyped-def]
    """Turn on FK enforcement for SQLite so vote cascades hold there too."""
    if type(dbapi_connection).__module__.startswith("sqlite3"):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def build_engine(database_url: str | None = None) -> Engine:
    """Create an engine for ``database_url`` (the configured URL by default)."""
    url = database_url or settings.effective_database_url
    engine = create_engine(url, **_engine_kwargs(url))
    if engine.dialect.name == "sqlite":
        _use_immediate_transactions(engine)
    return engine


engine = build_engine()

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Yield a request-scoped session, closed when the request finishes."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_tables() -> None:
    """Create every table known to ``Base.metadata`` on the application engine."""
    Base.metadata.create_all(bind=engine)


def drop_tables() -> None:
    """Drop every table known to ``Base.metadata`` from the application engine."""
    Base.metadata.drop_all(bind=engine)
