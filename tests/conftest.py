"""
Pytest configuration and fixtures.
"""

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from crudkit.db import async_session_factory
from crudkit.models import Base
from tests.support import UserRepository, UserService, make_user


# SQLite in-memory database shared by every connection of one engine
SQLALCHEMY_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture
async def engine():
    """Fresh in-memory database with all tables created."""
    engine = create_async_engine(SQLALCHEMY_DATABASE_URL, poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
def session_maker(engine):
    return async_session_factory(engine)


@pytest_asyncio.fixture
async def db_session(session_maker):
    """One session per test, rolled back at the end."""
    async with session_maker() as session:
        try:
            yield session
        finally:
            await session.rollback()


@pytest.fixture
def user_repository(db_session):
    return UserRepository(db_session)


@pytest.fixture
def user_service(user_repository):
    return UserService(user_repository)


@pytest_asyncio.fixture
async def seed_users(user_repository):
    """Three persisted users: Alice (25), Bob (30), Carol (41)."""
    return await user_repository.save_all(
        [
            make_user("Alice", "alice@example.com", 25),
            make_user("Bob", "bob@example.com", 30),
            make_user("Carol", "carol@example.com", 41),
        ]
    )
