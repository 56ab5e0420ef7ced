"""009: create activity_logs table

Revision ID: 009
Revises: 008
Create Date: 2026-03-02
"""
from typing import Sequence, Union
from alembic import op

revision: str = "009"
down_revision: Union[str, None] = "008"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE activity_logs (
            id              BIGSERIAL       PRIMARY KEY,
            user_id         VARCHAR(64)     NOT NULL,
            activity_type   VARCHAR(32)     NOT NULL,
            amount          BIGINT          NOT NULL DEFAULT 0,
            description     TEXT,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_activity_logs_type CHECK (
                activity_type IN ('topup', 'withdraw', 'payment', 'invest_buy', 'invest_sell')
            )
        );
    """)
    op.execute("CREATE INDEX idx_activity_logs_user ON activity_logs (user_id, id DESC);")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS activity_logs CASCADE;")
