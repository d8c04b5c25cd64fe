"""004: seed admin and demo users

Revision ID: 004
Revises: 003
Create Date: 2026-10-19
"""

from typing import Sequence, Union

from alembic import op

revision: str = "004"
down_revision: Union[str, None] = "003"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Credentials live in the ledger; password is the external-auth placeholder
    op.execute("""
        INSERT INTO users (
            username, email, password, wingy_coin_user_id, balance_cents, is_admin
        ) VALUES
            ('admin', 'admin@wingyshop.com', 'external-auth', 'admin-user-id', 1000000, TRUE),
            ('testuser', 'user@wingyshop.com', 'external-auth', 'test-user-id', 245000, FALSE);
    """)


def downgrade() -> None:
    op.execute("DELETE FROM users WHERE email IN ('admin@wingyshop.com', 'user@wingyshop.com');")
