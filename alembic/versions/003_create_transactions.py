"""003: create transactions table

Revision ID: 003
Revises: 002
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE transactions (
            id                  SERIAL          PRIMARY KEY,
            product_id          INTEGER         NOT NULL REFERENCES products (id),
            buyer_id            INTEGER         NOT NULL REFERENCES users (id),
            seller_id           INTEGER         NOT NULL REFERENCES users (id),
            amount_cents        BIGINT          NOT NULL,
            status              VARCHAR(16)     NOT NULL DEFAULT 'pending',
            buyer_confirmed     BOOLEAN         NOT NULL DEFAULT FALSE,
            seller_confirmed    BOOLEAN         NOT NULL DEFAULT FALSE,
            created_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            completed_at        TIMESTAMPTZ,
            CONSTRAINT ck_transactions_parties CHECK (buyer_id <> seller_id),
            CONSTRAINT ck_transactions_status
                CHECK (status IN ('pending', 'completed', 'cancelled')),
            CONSTRAINT ck_transactions_completed_at
                CHECK ((status = 'completed') = (completed_at IS NOT NULL))
        );
    """)
    op.execute("CREATE INDEX idx_transactions_buyer ON transactions (buyer_id, created_at DESC);")
    op.execute("CREATE INDEX idx_transactions_seller ON transactions (seller_id, created_at DESC);")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS transactions CASCADE;")
