"""
Test configuration and fixtures for the alias shortener.
This centralizes all test setup, making individual tests clean.
"""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from main import app
from alias_app.cache.strategies import InMemoryCache
from alias_app.database.connection import Base, get_db
from alias_app.dependencies import get_cache, get_visit_recorder
from alias_app.services.alias_service import AliasService
from alias_app.services.alias_strategies import DeterministicAliasStrategy
from alias_app.services.visit_recorder import VisitRecorder

# Test database configuration
SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db_session():
    """
    Create a fresh database session for each test.
    This ensures tests are isolated and don't affect each other.
    """
    Base.metadata.create_all(bind=engine)

    db = TestingSessionLocal()

    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def cache():
    """Fresh in-memory cache per test"""
    return InMemoryCache()


@pytest.fixture(scope="function")
def visit_recorder():
    """Visit recorder writing to the test database"""
    return VisitRecorder(session_factory=TestingSessionLocal)


@pytest.fixture(scope="function")
def strategy():
    return DeterministicAliasStrategy(length=6, max_random_attempts=20)


@pytest.fixture(scope="function")
def service(db_session, cache, visit_recorder, strategy):
    """AliasService wired to the test database and cache"""
    return AliasService(
        db=db_session,
        cache=cache,
        visit_recorder=visit_recorder,
        strategy=strategy
    )


@pytest.fixture(scope="function")
def client(db_session, cache, visit_recorder):
    """
    Create a test client with database, cache and visit recorder overridden.
    This is the main fixture that API tests will use.
    """
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_cache] = lambda: cache
    app.dependency_overrides[get_visit_recorder] = lambda: visit_recorder

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
