"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures/variables required for testing multiple layers.
"""

from typing import Generator

import pytest
from sqlalchemy import StaticPool, create_engine
from sqlalchemy.orm import Session, sessionmaker

from src.db.memory_repository import InMemoryMatchRepository
from src.db.schema import Base
from src.db.sql_repository import SQLMatchRepository

# Setup an in-memory SQLite database for testing (one connection shared by every session)
DATABASE_URL = "sqlite:///:memory:"
engine = create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autoflush=False, bind=engine)


@pytest.fixture
def db_session_factory() -> Generator[sessionmaker[Session], None, None]:
    """Sessions on a test database. Tables are removed at teardown to make unit tests of repository independent of each other."""
    Base.metadata.create_all(bind=engine)
    try:
        yield TestingSessionLocal
    finally:
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def sql_repository(db_session_factory: sessionmaker[Session]) -> SQLMatchRepository:
    return SQLMatchRepository(db_session_factory)


@pytest.fixture
def memory_repository() -> InMemoryMatchRepository:
    """Fresh in-memory store (what the service uses when nothing else is configured)."""
    return InMemoryMatchRepository()
