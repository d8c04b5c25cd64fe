"""EntityStore: concrete implementation of EntityStoreProtocol.

Single owner of the users, products and transactions tables. Statements are
SQLAlchemy Core over the ORM-mapped tables so the same code runs on
PostgreSQL (asyncpg) and SQLite (aiosqlite).

Balance, stock and confirmation mutations are atomic UPDATE ... RETURNING
statements with a guard in the WHERE clause. A result of 0 rows means the row
is missing or the guard did not match, and the method returns None.

Transaction ownership: the CALLER (application service) is responsible for
committing or rolling back the session.
"""

from typing import Any

from sqlalchemy import case, insert, literal, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.ws_common.datetime_utils import as_utc, utc_now
from src.ws_common.enums import ConfirmSide, ProductStatus, TransactionStatus
from src.ws_common.errors import EmailExistsError, UsernameExistsError
from src.ws_store.domain.models import (
    NewProduct,
    NewTransaction,
    NewUser,
    Product,
    Transaction,
    User,
)
from src.ws_store.infrastructure.db_models import ProductORM, TransactionORM, UserORM

_users: Any = UserORM.__table__
_products: Any = ProductORM.__table__
_transactions: Any = TransactionORM.__table__

_DEFAULT_STOCK = 1

# ---------------------------------------------------------------------------
# Row mappers
# ---------------------------------------------------------------------------


def _row_to_user(row: Any) -> User:
    return User(
        id=row.id,
        username=row.username,
        email=row.email,
        password=row.password,
        balance_cents=row.balance_cents,
        wingy_balance_milli=row.wingy_balance_milli,
        completed_ads=row.completed_ads,
        wingy_coin_user_id=row.wingy_coin_user_id,
        is_admin=bool(row.is_admin),
        created_at=as_utc(row.created_at),
    )


def _row_to_product(row: Any) -> Product:
    return Product(
        id=row.id,
        title=row.title,
        description=row.description,
        price_cents=row.price_cents,
        stock=row.stock,
        image_url=row.image_url,
        tags=tuple(row.tags) if row.tags is not None else None,
        seller_id=row.seller_id,
        status=row.status,
        created_at=as_utc(row.created_at),
    )


def _row_to_transaction(row: Any) -> Transaction:
    return Transaction(
        id=row.id,
        product_id=row.product_id,
        buyer_id=row.buyer_id,
        seller_id=row.seller_id,
        amount_cents=row.amount_cents,
        status=row.status,
        buyer_confirmed=bool(row.buyer_confirmed),
        seller_confirmed=bool(row.seller_confirmed),
        created_at=as_utc(row.created_at),
        completed_at=as_utc(row.completed_at),
    )


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class EntityStore:
    """Concrete repository: every mutator is a single atomic statement."""

    # --- users ---

    async def create_user(self, db: AsyncSession, data: NewUser) -> User:
        # Pre-checks give a typed error; the UNIQUE constraints are the final guard
        if await self.get_user_by_username(db, data.username) is not None:
            raise UsernameExistsError()
        if await self.get_user_by_email(db, data.email) is not None:
            raise EmailExistsError()

        result = await db.execute(
            insert(_users)
            .values(
                username=data.username,
                email=data.email,
                password=data.password,
                wingy_coin_user_id=data.wingy_coin_user_id,
                balance_cents=data.balance_cents,
                wingy_balance_milli=0,
                completed_ads=0,
                is_admin=data.is_admin,
                created_at=utc_now(),
            )
            .returning(*_users.c)
        )
        return _row_to_user(result.one())

    async def get_user(self, db: AsyncSession, user_id: int) -> User | None:
        result = await db.execute(select(_users).where(_users.c.id == user_id))
        row = result.first()
        return _row_to_user(row) if row else None

    async def get_user_by_username(self, db: AsyncSession, username: str) -> User | None:
        result = await db.execute(select(_users).where(_users.c.username == username))
        row = result.first()
        return _row_to_user(row) if row else None

    async def get_user_by_email(self, db: AsyncSession, email: str) -> User | None:
        result = await db.execute(select(_users).where(_users.c.email == email))
        row = result.first()
        return _row_to_user(row) if row else None

    async def update_user_balance(
        self, db: AsyncSession, user_id: int, balance_cents: int
    ) -> User | None:
        return await self._update_user(db, user_id, balance_cents=balance_cents)

    async def adjust_user_balance(
        self, db: AsyncSession, user_id: int, delta_cents: int
    ) -> User | None:
        """balance += delta, refused (None) if the result would go negative."""
        result = await db.execute(
            update(_users)
            .where(
                _users.c.id == user_id,
                _users.c.balance_cents + delta_cents >= 0,
            )
            .values(balance_cents=_users.c.balance_cents + delta_cents)
            .returning(*_users.c)
        )
        row = result.first()
        return _row_to_user(row) if row else None

    async def update_user_wingy_balance(
        self, db: AsyncSession, user_id: int, wingy_balance_milli: int, completed_ads: int
    ) -> User | None:
        return await self._update_user(
            db,
            user_id,
            wingy_balance_milli=wingy_balance_milli,
            completed_ads=completed_ads,
        )

    async def update_user_wingy_coin_id(
        self, db: AsyncSession, user_id: int, wingy_coin_user_id: str
    ) -> User | None:
        """Link the ledger account. Only ever fills a NULL; a linked id is immutable."""
        result = await db.execute(
            update(_users)
            .where(_users.c.id == user_id, _users.c.wingy_coin_user_id.is_(None))
            .values(wingy_coin_user_id=wingy_coin_user_id)
            .returning(*_users.c)
        )
        row = result.first()
        return _row_to_user(row) if row else None

    async def update_user_username(
        self, db: AsyncSession, user_id: int, username: str
    ) -> User | None:
        return await self._update_user(db, user_id, username=username)

    async def _update_user(
        self, db: AsyncSession, user_id: int, **values: Any
    ) -> User | None:
        result = await db.execute(
            update(_users)
            .where(_users.c.id == user_id)
            .values(**values)
            .returning(*_users.c)
        )
        row = result.first()
        return _row_to_user(row) if row else None

    # --- products ---

    async def create_product(
        self, db: AsyncSession, data: NewProduct, seller_id: int
    ) -> Product:
        result = await db.execute(
            insert(_products)
            .values(
                title=data.title,
                description=data.description,
                price_cents=data.price_cents,
                stock=data.stock if data.stock is not None else _DEFAULT_STOCK,
                image_url=data.image_url or None,
                tags=list(data.tags) if data.tags is not None else None,
                seller_id=seller_id,
                status=ProductStatus.PENDING.value,
                created_at=utc_now(),
            )
            .returning(*_products.c)
        )
        return _row_to_product(result.one())

    async def get_products(
        self, db: AsyncSession, status: str | None = None
    ) -> list[Product]:
        stmt = select(_products).order_by(_products.c.id)
        if status:
            stmt = stmt.where(_products.c.status == status)
        result = await db.execute(stmt)
        return [_row_to_product(row) for row in result.fetchall()]

    async def get_product(self, db: AsyncSession, product_id: int) -> Product | None:
        result = await db.execute(select(_products).where(_products.c.id == product_id))
        row = result.first()
        return _row_to_product(row) if row else None

    async def get_products_by_seller(
        self, db: AsyncSession, seller_id: int
    ) -> list[Product]:
        result = await db.execute(
            select(_products)
            .where(_products.c.seller_id == seller_id)
            .order_by(_products.c.id)
        )
        return [_row_to_product(row) for row in result.fetchall()]

    async def update_product_status(
        self, db: AsyncSession, product_id: int, status: str
    ) -> Product | None:
        return await self._update_product(db, product_id, status=status)

    async def update_product_stock(
        self, db: AsyncSession, product_id: int, stock: int
    ) -> Product | None:
        return await self._update_product(db, product_id, stock=stock)

    async def decrement_product_stock(
        self, db: AsyncSession, product_id: int
    ) -> Product | None:
        """stock -= 1, refused (None) once stock is already 0."""
        result = await db.execute(
            update(_products)
            .where(_products.c.id == product_id, _products.c.stock > 0)
            .values(stock=_products.c.stock - 1)
            .returning(*_products.c)
        )
        row = result.first()
        return _row_to_product(row) if row else None

    async def _update_product(
        self, db: AsyncSession, product_id: int, **values: Any
    ) -> Product | None:
        result = await db.execute(
            update(_products)
            .where(_products.c.id == product_id)
            .values(**values)
            .returning(*_products.c)
        )
        row = result.first()
        return _row_to_product(row) if row else None

    # --- transactions ---

    async def create_transaction(
        self, db: AsyncSession, data: NewTransaction
    ) -> Transaction:
        result = await db.execute(
            insert(_transactions)
            .values(
                product_id=data.product_id,
                buyer_id=data.buyer_id,
                seller_id=data.seller_id,
                amount_cents=data.amount_cents,
                status=TransactionStatus.PENDING.value,
                buyer_confirmed=False,
                seller_confirmed=False,
                created_at=utc_now(),
                completed_at=None,
            )
            .returning(*_transactions.c)
        )
        return _row_to_transaction(result.one())

    async def get_transaction(
        self, db: AsyncSession, transaction_id: int
    ) -> Transaction | None:
        result = await db.execute(
            select(_transactions).where(_transactions.c.id == transaction_id)
        )
        row = result.first()
        return _row_to_transaction(row) if row else None

    async def get_transactions(self, db: AsyncSession) -> list[Transaction]:
        result = await db.execute(
            select(_transactions).order_by(
                _transactions.c.created_at.desc(), _transactions.c.id.desc()
            )
        )
        return [_row_to_transaction(row) for row in result.fetchall()]

    async def get_transactions_by_user(
        self, db: AsyncSession, user_id: int
    ) -> list[Transaction]:
        result = await db.execute(
            select(_transactions)
            .where(
                (_transactions.c.buyer_id == user_id)
                | (_transactions.c.seller_id == user_id)
            )
            .order_by(_transactions.c.created_at.desc(), _transactions.c.id.desc())
        )
        return [_row_to_transaction(row) for row in result.fetchall()]

    async def update_transaction_confirmation(
        self,
        db: AsyncSession,
        transaction_id: int,
        side: ConfirmSide,
        confirmed: bool,
    ) -> Transaction | None:
        """Set one party's flag and, if both are now true, complete, in one UPDATE.

        The status = 'pending' guard makes this a compare-and-swap: once a
        transaction is completed (or cancelled) it matches no row and the
        method returns None, so only one caller ever observes the transition.
        The CASE expressions read the pre-update value of the other flag.
        """
        if side == ConfirmSide.BUYER:
            flag, other = _transactions.c.buyer_confirmed, _transactions.c.seller_confirmed
        else:
            flag, other = _transactions.c.seller_confirmed, _transactions.c.buyer_confirmed

        values: dict[str, Any] = {flag.key: confirmed}
        if confirmed:
            completes = other.is_(True)
            values["status"] = case(
                (completes, TransactionStatus.COMPLETED.value),
                else_=_transactions.c.status,
            )
            values["completed_at"] = case(
                (completes, literal(utc_now(), _transactions.c.completed_at.type)),
                else_=_transactions.c.completed_at,
            )

        result = await db.execute(
            update(_transactions)
            .where(
                _transactions.c.id == transaction_id,
                _transactions.c.status == TransactionStatus.PENDING.value,
            )
            .values(**values)
            .returning(*_transactions.c)
        )
        row = result.first()
        return _row_to_transaction(row) if row else None

    async def update_transaction_status(
        self, db: AsyncSession, transaction_id: int, status: str
    ) -> Transaction | None:
        """Move a pending transaction to another status (reserved for cancellation).

        Completed records are immutable, so only pending rows match.
        """
        result = await db.execute(
            update(_transactions)
            .where(
                _transactions.c.id == transaction_id,
                _transactions.c.status == TransactionStatus.PENDING.value,
            )
            .values(status=status)
            .returning(*_transactions.c)
        )
        row = result.first()
        return _row_to_transaction(row) if row else None
