"""Shared test fixtures.

Settings() requires JWT_SECRET, so it is set before anything from src/ or
config/ is imported.

Store-level tests run against a throwaway SQLite file per test, created from
the ORM metadata. NullPool gives every session its own connection, which the
concurrency tests rely on.
"""

# ruff: noqa: E402

import os

os.environ.setdefault("JWT_SECRET", "test-secret-do-not-use-in-production")

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

from src.ws_common.database import Base
from src.ws_store.domain.models import NewProduct, NewUser, Product, User
from src.ws_store.infrastructure import db_models  # noqa: F401  (registers tables)
from src.ws_store.infrastructure.persistence import EntityStore


@pytest.fixture
async def engine(tmp_path: Path) -> AsyncGenerator[AsyncEngine, None]:
    eng = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'wingy_shop.db'}",
        poolclass=NullPool,
    )
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def store() -> EntityStore:
    return EntityStore()


@pytest.fixture
def make_user(store: EntityStore, db: AsyncSession):  # type: ignore[no-untyped-def]
    """Factory: insert and commit a user."""

    async def _make(
        username: str,
        balance_cents: int = 0,
        is_admin: bool = False,
        wingy_coin_user_id: str | None = None,
    ) -> User:
        user = await store.create_user(
            db,
            NewUser(
                username=username,
                email=f"{username}@example.org",
                balance_cents=balance_cents,
                is_admin=is_admin,
                wingy_coin_user_id=wingy_coin_user_id,
            ),
        )
        await db.commit()
        return user

    return _make


@pytest.fixture
def make_product(store: EntityStore, db: AsyncSession):  # type: ignore[no-untyped-def]
    """Factory: insert an already-moderated (active) product and commit."""

    async def _make(seller_id: int, price_cents: int, stock: int = 1) -> Product:
        product = await store.create_product(
            db,
            NewProduct(
                title="Widget", description="A widget", price_cents=price_cents, stock=stock
            ),
            seller_id,
        )
        activated = await store.update_product_status(db, product.id, "active")
        await db.commit()
        assert activated is not None
        return activated

    return _make
