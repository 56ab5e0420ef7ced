"""010: create investments table

Revision ID: 010
Revises: 009
Create Date: 2026-03-02
"""
from typing import Sequence, Union
from alembic import op

revision: str = "010"
down_revision: Union[str, None] = "009"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE investments (
            id              UUID            PRIMARY KEY DEFAULT gen_random_uuid(),
            user_id         VARCHAR(64)     NOT NULL,
            wallet_address  VARCHAR(128)    NOT NULL,
            asset           VARCHAR(64)     NOT NULL,
            amount          BIGINT          NOT NULL,
            status          VARCHAR(16)     NOT NULL DEFAULT 'active',
            sell_amount     BIGINT,
            sold_at         TIMESTAMPTZ,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_investments_amount_gt_0   CHECK (amount > 0),
            CONSTRAINT ck_investments_status        CHECK (status IN ('active', 'sold')),
            CONSTRAINT ck_investments_sold_fields   CHECK (
                (status = 'active' AND sell_amount IS NULL AND sold_at IS NULL)
                OR (status = 'sold' AND sell_amount IS NOT NULL AND sold_at IS NOT NULL)
            )
        );
    """)
    op.execute("CREATE INDEX idx_investments_user ON investments (user_id, created_at DESC);")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS investments CASCADE;")
