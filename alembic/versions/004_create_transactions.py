"""004: create transactions table

Revision ID: 004
Revises: 003
Create Date: 2026-10-17
"""
from typing import Sequence, Union

from alembic import op

revision: str = "004"
down_revision: Union[str, None] = "003"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE transactions (
            id                  SERIAL          PRIMARY KEY,
            user_id             UUID            NOT NULL REFERENCES users (id) ON DELETE CASCADE,
            category_id         INTEGER         NOT NULL REFERENCES categories (id),
            amount_cents        BIGINT          NOT NULL,
            type                VARCHAR(20)     NOT NULL,
            description         VARCHAR(500),
            transaction_date    DATE            NOT NULL,
            created_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_transactions_amount CHECK (amount_cents > 0),
            CONSTRAINT ck_transactions_type   CHECK (type IN ('income', 'expense'))
        );
    """)
    op.execute(
        "CREATE INDEX idx_transactions_user_date "
        "ON transactions (user_id, transaction_date DESC, created_at DESC);"
    )
    op.execute("CREATE INDEX idx_transactions_category_id ON transactions (category_id);")
    op.execute("CREATE INDEX idx_transactions_type ON transactions (type);")
    op.execute("""
        CREATE TRIGGER trg_transactions_updated_at
            BEFORE UPDATE ON transactions
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS transactions CASCADE;")
