"""001: create users table

Revision ID: 001
Revises:
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE users (
            id                  SERIAL          PRIMARY KEY,
            wingy_coin_user_id  TEXT,
            username            VARCHAR(64)     NOT NULL,
            email               VARCHAR(255)    NOT NULL,
            password            TEXT            NOT NULL,
            balance_cents       BIGINT          NOT NULL DEFAULT 0,
            wingy_balance_milli BIGINT          NOT NULL DEFAULT 0,
            completed_ads       INTEGER         NOT NULL DEFAULT 0,
            is_admin            BOOLEAN         NOT NULL DEFAULT FALSE,
            created_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_users_username            UNIQUE (username),
            CONSTRAINT uq_users_email               UNIQUE (email),
            CONSTRAINT uq_users_wingy_coin_user_id  UNIQUE (wingy_coin_user_id)
        );
    """)
    op.execute("COMMENT ON TABLE users IS 'Local mirror of Wingy Coin accounts';")
    op.execute(
        "COMMENT ON COLUMN users.wingy_balance_milli IS "
        "'Ledger coin balance cache, milli-coins';"
    )


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS users CASCADE;")
