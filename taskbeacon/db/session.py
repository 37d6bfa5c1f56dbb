"""Database engine and session management for TaskBeacon."""

import logging
from typing import Generator
from fastapi import Request
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

# Import models so they're registered with SQLModel.metadata
from .. import models  # noqa: F401

logger = logging.getLogger(__name__)


def create_db_engine(database_url: str, echo: bool = False) -> Engine:
    """Create the database engine for a URL.

    SQLite connections are shared across threads; an in-memory SQLite URL
    gets a single static connection so every session sees the same database.
    """
    if database_url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(database_url, echo=echo, **kwargs)
    return create_engine(database_url, echo=echo, pool_pre_ping=True)


def create_db_and_tables(engine: Engine) -> None:
    """Create all database tables."""
    SQLModel.metadata.create_all(engine)
    logger.info("Database tables ensured")


def get_session(request: Request) -> Generator[Session, None, None]:
    """Yield a session bound to the application's engine for one request."""
    with Session(request.app.state.engine) as session:
        yield session
