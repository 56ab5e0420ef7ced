"""011: create transaction_histories table

Revision ID: 011
Revises: 010
Create Date: 2026-03-02
"""
from typing import Sequence, Union
from alembic import op

revision: str = "011"
down_revision: Union[str, None] = "010"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE transaction_histories (
            id                  BIGSERIAL       PRIMARY KEY,
            user_id             VARCHAR(64)     NOT NULL,
            order_id            VARCHAR(64)     NOT NULL,
            midtrans_order_id   VARCHAR(64),
            total_amount        BIGINT          NOT NULL,
            discount_amount     BIGINT          NOT NULL DEFAULT 0,
            payment_method      VARCHAR(32)     NOT NULL DEFAULT 'midtrans',
            coupons_used        JSONB           NOT NULL DEFAULT '[]',
            items_data          JSONB           NOT NULL DEFAULT '[]',
            status              VARCHAR(16)     NOT NULL DEFAULT 'completed',
            created_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_th_total_gt_0         CHECK (total_amount > 0),
            CONSTRAINT ck_th_discount_ge_0      CHECK (discount_amount >= 0),
            CONSTRAINT ck_th_status             CHECK (
                status IN ('completed', 'pending', 'failed', 'cancelled')
            )
        );
    """)
    op.execute(
        "CREATE INDEX idx_transaction_histories_user "
        "ON transaction_histories (user_id, id DESC);"
    )


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS transaction_histories CASCADE;")
