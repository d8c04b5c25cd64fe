"""ws_market REST API: public catalog reads, authenticated submission."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.ws_common.database import get_db_session
from src.ws_gateway.auth.dependencies import AuthUser, get_current_user
from src.ws_market.application.schemas import ProductCreateRequest, ProductOut
from src.ws_market.application.service import MarketplaceService

router = APIRouter(prefix="/products", tags=["products"])

_service = MarketplaceService()


@router.get("", response_model=list[ProductOut])
async def list_products(
    db: Annotated[AsyncSession, Depends(get_db_session)],
    product_status: str | None = Query(None, alias="status", description="pending | active | rejected"),
) -> list[ProductOut]:
    products = await _service.list_products(db, product_status)
    return [ProductOut.from_domain(p) for p in products]


@router.get("/user/{user_id}", response_model=list[ProductOut])
async def list_seller_products(
    user_id: int,
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> list[ProductOut]:
    products = await _service.list_products_by_seller(db, user_id)
    return [ProductOut.from_domain(p) for p in products]


@router.get("/{product_id}", response_model=ProductOut)
async def get_product(
    product_id: int,
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ProductOut:
    product = await _service.get_product(db, product_id)
    return ProductOut.from_domain(product)


@router.post("", status_code=status.HTTP_201_CREATED, response_model=ProductOut)
async def create_product(
    body: ProductCreateRequest,
    current_user: Annotated[AuthUser, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ProductOut:
    product = await _service.submit_product(db, current_user.id, body.to_draft())
    return ProductOut.from_domain(product)
