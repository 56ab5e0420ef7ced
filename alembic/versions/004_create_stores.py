"""004: create stores table

Revision ID: 004
Revises: 003
Create Date: 2026-03-02
"""
from typing import Sequence, Union
from alembic import op

revision: str = "004"
down_revision: Union[str, None] = "003"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE stores (
            id              UUID            PRIMARY KEY DEFAULT gen_random_uuid(),
            user_id         VARCHAR(64)     NOT NULL,
            store_name      VARCHAR(255)    NOT NULL,
            description     TEXT,
            address         TEXT,
            logo_url        VARCHAR(2048),
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW()
        );
    """)
    op.execute("CREATE INDEX idx_stores_user ON stores (user_id, created_at DESC);")
    op.execute("""
        CREATE TRIGGER trg_stores_updated_at
            BEFORE UPDATE ON stores
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS stores CASCADE;")
