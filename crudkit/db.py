"""
Async database engine and session helpers.
Uses SQLAlchemy 2.0 asyncio extension.

Repositories only flush; committing belongs to the host, through
session_scope() or safe_commit().
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from crudkit.config.logging import get_logger
from crudkit.config.settings import Settings, get_settings

logger = get_logger(__name__)


def create_engine_from_settings(settings: Settings | None = None, **engine_kwargs) -> AsyncEngine:
    """
    Create an async engine from settings.

    Extra keyword arguments are passed to create_async_engine, so hosts
    can add pool settings without touching the library.
    """
    settings = settings or get_settings()
    engine_kwargs.setdefault("echo", settings.database_echo)
    engine_kwargs.setdefault("pool_pre_ping", True)
    logger.debug("Creating database engine", url=settings.database_url.split("@")[-1])
    return create_async_engine(settings.database_url, **engine_kwargs)


def async_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory with the defaults repositories expect."""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        autoflush=False,
        expire_on_commit=False,
    )


def get_session(
    session_maker: async_sessionmaker[AsyncSession],
):
    """
    Build a FastAPI dependency yielding one session per request.

    Usage:
        get_db = get_session(SessionLocal)

        @app.get("/items")
        async def list_items(db: AsyncSession = Depends(get_db)):
            ...
    """

    async def dependency() -> AsyncGenerator[AsyncSession, None]:
        async with session_maker() as session:
            yield session

    return dependency


@asynccontextmanager
async def session_scope(
    session_maker: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """
    Session that commits on success and rolls back on error.

    Usage:
        async with session_scope(SessionLocal) as db:
            await UserService(db).save(user)
    """
    async with session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def safe_commit(db: AsyncSession) -> None:
    """
    Commit with automatic rollback on failure.
    Raises the original exception after rolling back.
    """
    try:
        await db.commit()
    except Exception:
        await db.rollback()
        raise
