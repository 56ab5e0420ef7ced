"""006: create orders table

Revision ID: 006
Revises: 005
Create Date: 2026-03-02
"""
from typing import Sequence, Union
from alembic import op

revision: str = "006"
down_revision: Union[str, None] = "005"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # stores.id is referenced without ON DELETE: a store with orders cannot be deleted.
    op.execute("""
        CREATE TABLE orders (
            id                  VARCHAR(32)     PRIMARY KEY,
            store_id            UUID            NOT NULL REFERENCES stores(id),
            external_order_id   VARCHAR(64)     NOT NULL,
            subtotal            BIGINT          NOT NULL,
            discount            BIGINT          NOT NULL DEFAULT 0,
            total_amount        BIGINT          NOT NULL,
            payment_status      VARCHAR(16)     NOT NULL DEFAULT 'pending',
            customer_name       VARCHAR(255),
            customer_email      VARCHAR(255),
            customer_phone      VARCHAR(32),
            created_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_orders_external_order_id  UNIQUE (external_order_id),
            CONSTRAINT ck_orders_payment_status     CHECK (
                payment_status IN ('pending', 'paid', 'failed')
            ),
            CONSTRAINT ck_orders_total_gt_0         CHECK (total_amount > 0),
            CONSTRAINT ck_orders_discount_gte_0     CHECK (discount >= 0),
            CONSTRAINT ck_orders_total_consistent   CHECK (total_amount = subtotal - discount)
        );
    """)
    op.execute("CREATE INDEX idx_orders_store_id ON orders (store_id, id DESC);")
    op.execute("""
        CREATE TRIGGER trg_orders_updated_at
            BEFORE UPDATE ON orders
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS orders CASCADE;")
