"""Repository Protocol: dependency inversion for testability.

Unit tests inject a mock that conforms to this Protocol.
Infrastructure layer provides the real implementation.

Every mutator returns the new snapshot, or None when the row does not exist
(or a compare-and-swap guard did not match). Missing rows are never an error
at this layer; services decide whether that matters.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.ws_common.enums import ConfirmSide
from src.ws_store.domain.models import (
    NewProduct,
    NewTransaction,
    NewUser,
    Product,
    Transaction,
    User,
)


class EntityStoreProtocol(Protocol):
    # --- users ---

    async def create_user(self, db: AsyncSession, data: NewUser) -> User: ...

    async def get_user(self, db: AsyncSession, user_id: int) -> User | None: ...

    async def get_user_by_username(
        self, db: AsyncSession, username: str
    ) -> User | None: ...

    async def get_user_by_email(self, db: AsyncSession, email: str) -> User | None: ...

    async def update_user_balance(
        self, db: AsyncSession, user_id: int, balance_cents: int
    ) -> User | None: ...

    async def adjust_user_balance(
        self, db: AsyncSession, user_id: int, delta_cents: int
    ) -> User | None: ...

    async def update_user_wingy_balance(
        self, db: AsyncSession, user_id: int, wingy_balance_milli: int, completed_ads: int
    ) -> User | None: ...

    async def update_user_wingy_coin_id(
        self, db: AsyncSession, user_id: int, wingy_coin_user_id: str
    ) -> User | None: ...

    async def update_user_username(
        self, db: AsyncSession, user_id: int, username: str
    ) -> User | None: ...

    # --- products ---

    async def create_product(
        self, db: AsyncSession, data: NewProduct, seller_id: int
    ) -> Product: ...

    async def get_products(
        self, db: AsyncSession, status: str | None = None
    ) -> list[Product]: ...

    async def get_product(self, db: AsyncSession, product_id: int) -> Product | None: ...

    async def get_products_by_seller(
        self, db: AsyncSession, seller_id: int
    ) -> list[Product]: ...

    async def update_product_status(
        self, db: AsyncSession, product_id: int, status: str
    ) -> Product | None: ...

    async def update_product_stock(
        self, db: AsyncSession, product_id: int, stock: int
    ) -> Product | None: ...

    async def decrement_product_stock(
        self, db: AsyncSession, product_id: int
    ) -> Product | None: ...

    # --- transactions ---

    async def create_transaction(
        self, db: AsyncSession, data: NewTransaction
    ) -> Transaction: ...

    async def get_transaction(
        self, db: AsyncSession, transaction_id: int
    ) -> Transaction | None: ...

    async def get_transactions(self, db: AsyncSession) -> list[Transaction]: ...

    async def get_transactions_by_user(
        self, db: AsyncSession, user_id: int
    ) -> list[Transaction]: ...

    async def update_transaction_confirmation(
        self,
        db: AsyncSession,
        transaction_id: int,
        side: ConfirmSide,
        confirmed: bool,
    ) -> Transaction | None: ...

    async def update_transaction_status(
        self, db: AsyncSession, transaction_id: int, status: str
    ) -> Transaction | None: ...
