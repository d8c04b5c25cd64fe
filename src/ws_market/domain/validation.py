"""Product submission rules.

Checks run in a fixed order and the first failure wins, so a client always
sees the same message for the same bad draft.
"""

from dataclasses import dataclass

from src.ws_common.cents import PRICE_PATTERN, cents_to_str, parse_price
from src.ws_common.errors import ValidationError
from src.ws_store.domain.models import NewProduct

MAX_TITLE_LENGTH = 100
MAX_DESCRIPTION_LENGTH = 500
MAX_TAGS = 5
# 999999999.99; balances and amounts share the BIGINT cents columns
MAX_PRICE_CENTS = 99_999_999_999


@dataclass(frozen=True)
class ProductDraft:
    """A seller's submission, as received (price still a string)."""

    title: str
    description: str
    price: str
    stock: int | None = None
    image_url: str | None = None
    tags: tuple[str, ...] | None = None


def validate_draft(draft: ProductDraft, max_stock: int) -> NewProduct:
    if not 1 <= len(draft.title) <= MAX_TITLE_LENGTH:
        raise ValidationError(f"Title must be 1-{MAX_TITLE_LENGTH} characters")
    if not 1 <= len(draft.description) <= MAX_DESCRIPTION_LENGTH:
        raise ValidationError(f"Description must be 1-{MAX_DESCRIPTION_LENGTH} characters")
    if not PRICE_PATTERN.match(draft.price):
        raise ValidationError("Price must be a number with at most 2 decimal places")
    price_cents = parse_price(draft.price)
    if price_cents > MAX_PRICE_CENTS:
        raise ValidationError(f"Price must be at most {cents_to_str(MAX_PRICE_CENTS)}")
    if draft.stock is not None and not 1 <= draft.stock <= max_stock:
        raise ValidationError(f"Stock must be between 1 and {max_stock}")
    if draft.tags is not None and len(draft.tags) > MAX_TAGS:
        raise ValidationError(f"At most {MAX_TAGS} tags allowed")

    return NewProduct(
        title=draft.title,
        description=draft.description,
        price_cents=price_cents,
        stock=draft.stock,
        image_url=draft.image_url or None,
        tags=draft.tags,
    )
