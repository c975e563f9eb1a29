"""Pytest configuration and fixtures."""

from datetime import datetime, timezone

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from samplebank.database.schema import Base
from samplebank.utils.time import FixedClock

# Friday the 14th of October 2016, the reference "now" of the API examples
NOW = datetime(2016, 10, 14, 0, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def session():
    """Create a temporary in-memory database session for testing."""
    engine = create_engine("sqlite:///:memory:", echo=False)
    Base.metadata.create_all(engine)

    SessionLocal = sessionmaker(bind=engine)
    session = SessionLocal()

    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def clock():
    return FixedClock(NOW)
