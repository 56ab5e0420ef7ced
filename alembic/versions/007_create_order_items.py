"""007: create order_items table

Revision ID: 007
Revises: 006
Create Date: 2026-03-02
"""
from typing import Sequence, Union
from alembic import op

revision: str = "007"
down_revision: Union[str, None] = "006"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE order_items (
            id              BIGSERIAL       PRIMARY KEY,
            order_id        VARCHAR(32)     NOT NULL REFERENCES orders(id) ON DELETE CASCADE,
            product_id      UUID            REFERENCES products(id) ON DELETE SET NULL,
            product_name    VARCHAR(255)    NOT NULL,
            quantity        INTEGER         NOT NULL,
            unit_price      BIGINT          NOT NULL,
            CONSTRAINT ck_order_items_quantity_gt_0 CHECK (quantity > 0),
            CONSTRAINT ck_order_items_price_gt_0    CHECK (unit_price > 0)
        );
    """)
    op.execute("CREATE INDEX idx_order_items_order ON order_items (order_id);")
    op.execute(
        "COMMENT ON TABLE order_items IS 'Line items; name and price are checkout-time snapshots';"
    )


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS order_items CASCADE;")
