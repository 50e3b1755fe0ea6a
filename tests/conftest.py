"""Shared pytest fixtures for all tests."""
import os
import pytest
from sqlalchemy.orm import sessionmaker

# Set test database URL before importing anything else
os.environ.setdefault("DATABASE_URL", "sqlite://")

from welltrack.core.database import Base, build_engine  # noqa: E402

# Import all models to register them with Base before creating tables
from welltrack.models.datalog import DataLog  # noqa: F401,E402
from welltrack.models.challenge import Challenge  # noqa: F401,E402


@pytest.fixture
def test_engine():
    """
    Create an in-memory SQLite engine for one test.

    Creates all tables up front; the database disappears with the engine.
    """
    engine = build_engine("sqlite://")
    Base.metadata.create_all(bind=engine)

    yield engine

    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    """Session factory bound to the test engine."""
    return sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


@pytest.fixture
def db_session(session_factory):
    """Database session for arranging and asserting test data."""
    session = session_factory()

    yield session

    session.close()
