"""Shared fixtures: in-memory database sessions and API clients."""

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session
from taskbeacon.config import Settings
from taskbeacon.crud import CategoryStorage, TaskStorage
from taskbeacon.db.session import create_db_and_tables, create_db_engine
from taskbeacon.main import create_app

TEST_JWT_SECRET = "test-secret"
USER_ID = "test-user-123"
OTHER_USER_ID = "other-user"


@pytest.fixture
def session():
    """Session on a fresh in-memory database."""
    engine = create_db_engine("sqlite://")
    create_db_and_tables(engine)
    with Session(engine) as session:
        yield session
    engine.dispose()


@pytest.fixture
def categories(session):
    return CategoryStorage(session)


@pytest.fixture
def tasks(session):
    return TaskStorage(session)


@pytest.fixture
def client():
    """API client running with the development auth bypass."""
    app = create_app(Settings(database_url="sqlite://", auth_bypass=True))
    with TestClient(app) as client:
        client.headers.update({"Authorization": "Bearer dev-token"})
        yield client


@pytest.fixture
def jwt_client():
    """API client validating HS256 tokens signed with TEST_JWT_SECRET."""
    app = create_app(Settings(database_url="sqlite://", jwt_secret=TEST_JWT_SECRET))
    with TestClient(app) as client:
        yield client
