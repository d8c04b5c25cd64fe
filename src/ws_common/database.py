"""Async engine, session factory and the get_db_session dependency.

One AsyncSession per request. Services own commit/rollback; the dependency
only guarantees the session is closed when the request ends.
"""

from collections.abc import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from config.settings import settings


class Base(DeclarativeBase):
    """Declarative base for the users, products and transactions tables."""


engine: AsyncEngine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
    pool_size=20,
    max_overflow=10,
    pool_pre_ping=True,
)

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: yields an AsyncSession, auto-closes after request."""
    async with async_session_factory() as session:
        yield session


async def ping_database(bind: AsyncEngine | None = None) -> None:
    """Round-trip a SELECT 1; raises if the database is unreachable."""
    async with (bind or engine).connect() as conn:
        await conn.execute(text("SELECT 1"))
