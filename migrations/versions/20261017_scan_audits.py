"""scan audit trail

Revision ID: 20261017_scan_audits
Revises:
Create Date: 2026-10-17 00:00:00
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '20261017_scan_audits'
down_revision: Union[str, Sequence[str], None] = None
branch_labels = None
depends_on = None

def upgrade() -> None:
    op.create_table(
        "scan_audits",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("booking_id", sa.String(length=128), nullable=True),
        sa.Column("device_id", sa.String(length=64), nullable=True),
        sa.Column("accepted", sa.Boolean(), nullable=False),
        sa.Column("reason", sa.String(length=20), nullable=False),
        sa.Column("scanned_at", sa.DateTime(timezone=True), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=False),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_scan_audits")),
    )
    op.create_index(op.f("ix_scan_audits_booking_id"), "scan_audits", ["booking_id"], unique=False)

def downgrade() -> None:
    op.drop_index(op.f("ix_scan_audits_booking_id"), table_name="scan_audits")
    op.drop_table("scan_audits")
