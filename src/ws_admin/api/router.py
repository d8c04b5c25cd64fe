"""Admin REST API: moderation queue and the full transaction list."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.ws_common.database import get_db_session
from src.ws_common.enums import ProductStatus
from src.ws_gateway.auth.dependencies import AuthUser, get_current_user, require_admin
from src.ws_market.application.schemas import ProductOut, ProductStatusRequest
from src.ws_market.application.service import MarketplaceService
from src.ws_trade.application.schemas import TransactionOut
from src.ws_trade.application.service import TradeService

router = APIRouter(prefix="/admin", tags=["admin"])
_market = MarketplaceService()
_trade = TradeService()


@router.get("/products/pending", response_model=list[ProductOut])
async def list_pending_products(
    current_user: Annotated[AuthUser, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> list[ProductOut]:
    products = await _market.list_products(db, ProductStatus.PENDING.value)
    return [ProductOut.from_domain(p) for p in products]


@router.patch("/products/{product_id}/status", response_model=ProductOut)
async def set_product_status(
    product_id: int,
    body: ProductStatusRequest,
    current_user: Annotated[AuthUser, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ProductOut:
    # moderate_product performs its own admin check
    product = await _market.moderate_product(db, current_user.id, product_id, body.status)
    return ProductOut.from_domain(product)


@router.get("/transactions", response_model=list[TransactionOut])
async def list_all_transactions(
    current_user: Annotated[AuthUser, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> list[TransactionOut]:
    transactions = await _trade.list_all(db, current_user.id)
    return [TransactionOut.from_domain(t) for t in transactions]
