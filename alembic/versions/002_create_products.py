"""002: create products table

Revision ID: 002
Revises: 001
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE products (
            id              SERIAL          PRIMARY KEY,
            title           VARCHAR(100)    NOT NULL,
            description     VARCHAR(500)    NOT NULL,
            price_cents     BIGINT          NOT NULL,
            stock           INTEGER         NOT NULL DEFAULT 1,
            image_url       TEXT,
            tags            JSON,
            seller_id       INTEGER         NOT NULL REFERENCES users (id),
            status          VARCHAR(16)     NOT NULL DEFAULT 'pending',
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_products_price  CHECK (price_cents >= 0),
            CONSTRAINT ck_products_stock  CHECK (stock >= 0),
            CONSTRAINT ck_products_status CHECK (status IN ('pending', 'active', 'rejected'))
        );
    """)
    op.execute("CREATE INDEX idx_products_status ON products (status);")
    op.execute("CREATE INDEX idx_products_seller ON products (seller_id);")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS products CASCADE;")
