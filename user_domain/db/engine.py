"""SQLAlchemy engine and session factory.

When DATABASE_URL is configured, provides:
- an engine for the configured database
- a session factory the SQL user store opens per-call sessions from
- a lifespan hook for startup/shutdown

When DATABASE_URL is None (no database configured), engine and
session_factory are None and the app falls back to the in-memory store.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import Engine, create_engine, make_url
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

from user_domain.core.config import SETTINGS

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """SQLAlchemy declarative base for all table models."""


def build_engine(database_url: str, *, echo: bool = False) -> Engine:
    url = make_url(database_url)
    if url.get_backend_name() == "sqlite" and url.database in (None, "", ":memory:"):
        # One shared connection, otherwise each checkout gets an empty db.
        return create_engine(
            database_url,
            echo=echo,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_engine(database_url, echo=echo, pool_pre_ping=True)


def build_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(engine, class_=Session, expire_on_commit=False)


# --- Engine and session factory (None when no DATABASE_URL) ---

if SETTINGS.database_url:
    engine: Engine | None = build_engine(SETTINGS.database_url)
    session_factory: sessionmaker[Session] | None = build_session_factory(engine)
else:
    engine = None
    session_factory = None


@contextmanager
def lifespan_db() -> Iterator[None]:
    """Startup/shutdown hook for the database engine."""
    if engine is None:
        logger.info("No DATABASE_URL configured, using in-memory user store")
        yield
        return

    # Importing the table module registers UserRow on Base.metadata.
    import user_domain.db.tables  # noqa: F401

    Base.metadata.create_all(engine)
    logger.info("Database engine created: %s", engine.url)
    yield
    engine.dispose()
    logger.info("Database engine disposed")
