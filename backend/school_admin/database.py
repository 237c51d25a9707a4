"""Database engine and helpers.

This module configures the SQLModel/SQLAlchemy engine from
`settings.DATABASE_URL` and provides the session dependency used by the
HTTP layer. By default the database is a local SQLite file next to the
package (`school.db`).
"""

from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine, Session

from .config import settings


def build_engine(url: str, echo: bool = False):
    """Create an engine for `url`.

    SQLite connections are shared across FastAPI's worker threads, so
    `check_same_thread` is disabled. An in-memory SQLite database only
    lives as long as its connection, hence the single static pool.
    """
    kwargs = {"echo": echo}
    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
    return create_engine(url, **kwargs)


engine = build_engine(settings.DATABASE_URL, echo=settings.SQL_ECHO)


def create_db_and_tables(bind=None):
    """Create database tables using SQLModel metadata.

    Intended for local development and tests; there is no migration
    tooling, so schema changes require recreating the database.
    """
    # models must be imported so their tables are registered on the metadata
    from . import models  # noqa: F401

    SQLModel.metadata.create_all(bind or engine)


def get_session():
    """Yield a database `Session` for FastAPI dependency injection.

    The session is closed when the request scope finishes; anything not
    committed by a service is rolled back at that point.
    """
    with Session(engine) as session:
        yield session
