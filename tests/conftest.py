"""Pytest configuration and fixtures."""

import os

# Set test configuration BEFORE any subway imports
# This must be done before subway.core.config loads settings
os.environ["DEBUG"] = "true"
os.environ["SECRET_DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"

from collections.abc import AsyncGenerator

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
from subway.core.database import init_models
from subway.services.line_service import LineService

from tests.helpers.types import DatabaseContext


@pytest.fixture
async def db_engine() -> AsyncGenerator[DatabaseContext]:
    """
    Create an in-memory SQLite database with all tables.

    StaticPool keeps a single connection alive so every session in the test
    sees the same in-memory database.

    Yields:
        DatabaseContext: Engine and session factory
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await init_models(engine)

    session_factory = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    yield DatabaseContext(engine=engine, session_factory=session_factory)

    await engine.dispose()


@pytest.fixture
async def db_session(db_engine: DatabaseContext) -> AsyncGenerator[AsyncSession]:
    """
    Database session for a single test.

    Args:
        db_engine: Test database context

    Yields:
        Async SQLAlchemy session
    """
    async with db_engine.session_factory() as session:
        yield session


@pytest.fixture
def line_service(db_session: AsyncSession) -> LineService:
    """LineService bound to the test session."""
    return LineService(db_session)
