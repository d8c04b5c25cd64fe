"""MarketplaceService: product submission, catalog reads, admin moderation.

Writes (submit, moderate) commit the caller's session; reads do not.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.ws_common.enums import ProductStatus
from src.ws_common.errors import ProductNotFoundError, ValidationError
from src.ws_gateway.user.service import AuthService
from src.ws_market.domain.validation import ProductDraft, validate_draft
from src.ws_store.domain.models import Product
from src.ws_store.domain.repository import EntityStoreProtocol
from src.ws_store.infrastructure.persistence import EntityStore

logger = logging.getLogger(__name__)

_MODERATION_STATUSES = frozenset(s.value for s in ProductStatus)


class MarketplaceService:
    def __init__(
        self,
        store: EntityStoreProtocol | None = None,
        auth: AuthService | None = None,
    ) -> None:
        self._store: EntityStoreProtocol = store or EntityStore()
        self._auth = auth or AuthService(self._store)

    async def submit_product(
        self, db: AsyncSession, seller_id: int, draft: ProductDraft
    ) -> Product:
        """Validate and store a listing. New listings always wait for moderation."""
        data = validate_draft(draft, settings.MAX_PRODUCT_STOCK)
        try:
            product = await self._store.create_product(db, data, seller_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("User %d submitted product %d for review", seller_id, product.id)
        return product

    async def list_products(
        self, db: AsyncSession, status: str | None = None
    ) -> list[Product]:
        return await self._store.get_products(db, status)

    async def get_product(self, db: AsyncSession, product_id: int) -> Product:
        product = await self._store.get_product(db, product_id)
        if product is None:
            raise ProductNotFoundError(product_id)
        return product

    async def list_products_by_seller(
        self, db: AsyncSession, seller_id: int
    ) -> list[Product]:
        return await self._store.get_products_by_seller(db, seller_id)

    async def moderate_product(
        self, db: AsyncSession, admin_id: int, product_id: int, new_status: str
    ) -> Product:
        await self._auth.ensure_admin(db, admin_id)
        if new_status not in _MODERATION_STATUSES:
            raise ValidationError("Invalid status")

        try:
            product = await self._store.update_product_status(db, product_id, new_status)
            if product is None:
                raise ProductNotFoundError(product_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("Admin %d set product %d to %s", admin_id, product_id, new_status)
        return product
