"""Pytest configuration and fixtures."""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import models  # noqa: F401  (registers tables on Base.metadata)
from database import Base
from services.sync_service import KiteSyncService
# Pytest fixtures - imported to make them available to tests
from tests.fixtures import (  # noqa: F401
    other_user,
    unauthenticated_user,
    user,
)
from tests.fixtures.mocks import MockKiteAPI


@pytest.fixture(name="db")
def db_fixture():
    """Create an in-memory SQLite database for testing."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)

    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(name="kite_api")
def kite_api_fixture():
    """A fake Kite API with no routes configured (every call returns 404)."""
    api = MockKiteAPI()
    yield api
    api.close()


@pytest.fixture(name="sync_service")
def sync_service_fixture(kite_api):
    """KiteSyncService wired to the fake Kite API."""
    return KiteSyncService(client=kite_api.client())
