"""008: create financial_records table

Revision ID: 008
Revises: 007
Create Date: 2026-03-02
"""
from typing import Sequence, Union
from alembic import op

revision: str = "008"
down_revision: Union[str, None] = "007"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE financial_records (
            id              BIGSERIAL       PRIMARY KEY,
            user_id         VARCHAR(64)     NOT NULL,
            record_type     VARCHAR(16)     NOT NULL,
            amount          BIGINT          NOT NULL,
            balance_after   BIGINT          NOT NULL,
            description     TEXT,
            reference_type  VARCHAR(32),
            reference_id    VARCHAR(64),
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_financial_records_type CHECK (
                record_type IN ('income', 'expense', 'investment', 'gain')
            )
        );
    """)
    op.execute(
        "CREATE INDEX idx_financial_records_user ON financial_records (user_id, id DESC);"
    )
    op.execute(
        "CREATE INDEX idx_financial_records_ref ON financial_records "
        "(reference_type, reference_id);"
    )
    op.execute("COMMENT ON TABLE financial_records IS 'Append-only ledger, signed amounts';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS financial_records CASCADE;")
