"""003: create categories table and seed the default set

Revision ID: 003
Revises: 002
Create Date: 2026-10-17
"""
from typing import Sequence, Union

from alembic import op

revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE categories (
            id          SERIAL          PRIMARY KEY,
            name        VARCHAR(50)     NOT NULL,
            type        VARCHAR(20)     NOT NULL,
            color       VARCHAR(7),
            icon        VARCHAR(50),
            created_at  TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_categories_name  UNIQUE (name),
            CONSTRAINT ck_categories_type  CHECK (type IN ('income', 'expense')),
            CONSTRAINT ck_categories_color CHECK (color IS NULL OR color ~ '^#[0-9A-Fa-f]{6}$')
        );
    """)
    op.execute("""
        INSERT INTO categories (name, type, color, icon) VALUES
            ('Salary',            'income',  '#4CAF50', 'work'),
            ('Freelance',         'income',  '#8BC34A', 'business'),
            ('Investment',        'income',  '#CDDC39', 'trending_up'),
            ('Other Income',      'income',  '#FFEB3B', 'attach_money'),
            ('Food & Dining',     'expense', '#F44336', 'restaurant'),
            ('Transportation',    'expense', '#E91E63', 'directions_car'),
            ('Shopping',          'expense', '#9C27B0', 'shopping_cart'),
            ('Entertainment',     'expense', '#673AB7', 'movie'),
            ('Bills & Utilities', 'expense', '#3F51B5', 'receipt'),
            ('Healthcare',        'expense', '#2196F3', 'local_hospital'),
            ('Education',         'expense', '#03A9F4', 'school'),
            ('Travel',            'expense', '#00BCD4', 'flight'),
            ('Insurance',         'expense', '#009688', 'security'),
            ('Savings',           'expense', '#4CAF50', 'savings'),
            ('Other Expense',     'expense', '#FF9800', 'category')
        ON CONFLICT (name) DO NOTHING;
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS categories CASCADE;")
