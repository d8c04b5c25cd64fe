"""Pydantic schemas for ws_market."""

from datetime import datetime

from pydantic import Field

from src.ws_common.response import ApiModel, RequestModel
from src.ws_market.domain.validation import ProductDraft
from src.ws_store.domain.models import Product


class ProductCreateRequest(RequestModel):
    # Only types are checked here; ProductDraft rules run in the service
    title: str
    description: str
    price: str
    stock: int | None = None
    image_url: str | None = None
    tags: list[str] | None = None

    def to_draft(self) -> ProductDraft:
        return ProductDraft(
            title=self.title,
            description=self.description,
            price=self.price,
            stock=self.stock,
            image_url=self.image_url,
            tags=tuple(self.tags) if self.tags is not None else None,
        )


class ProductStatusRequest(RequestModel):
    status: str = Field(..., description="pending | active | rejected")


class ProductOut(ApiModel):
    id: int
    title: str
    description: str
    price: str
    stock: int
    image_url: str | None
    tags: list[str] | None
    seller_id: int
    status: str
    created_at: datetime

    @classmethod
    def from_domain(cls, product: Product) -> "ProductOut":
        return cls(
            id=product.id,
            title=product.title,
            description=product.description,
            price=product.price,
            stock=product.stock,
            image_url=product.image_url,
            tags=list(product.tags) if product.tags is not None else None,
            seller_id=product.seller_id,
            status=product.status,
            created_at=product.created_at,
        )
