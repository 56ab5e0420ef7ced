"""005: create products table

Revision ID: 005
Revises: 004
Create Date: 2026-03-02
"""
from typing import Sequence, Union
from alembic import op

revision: str = "005"
down_revision: Union[str, None] = "004"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE products (
            id              UUID            PRIMARY KEY DEFAULT gen_random_uuid(),
            store_id        UUID            NOT NULL REFERENCES stores(id) ON DELETE CASCADE,
            name            VARCHAR(255)    NOT NULL,
            description     TEXT,
            price           BIGINT          NOT NULL,
            stock           INTEGER         NOT NULL DEFAULT 0,
            is_active       BOOLEAN         NOT NULL DEFAULT TRUE,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_products_price_gt_0   CHECK (price > 0),
            CONSTRAINT ck_products_stock_gte_0  CHECK (stock >= 0)
        );
    """)
    op.execute("CREATE INDEX idx_products_store ON products (store_id, created_at DESC);")
    op.execute("""
        CREATE TRIGGER trg_products_updated_at
            BEFORE UPDATE ON products
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS products CASCADE;")
