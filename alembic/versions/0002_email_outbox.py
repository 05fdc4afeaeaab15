"""email outbox

Revision ID: 0002_email_outbox
Revises: 0001_bookings
Create Date: 2025-11-10
"""

from alembic import op
import sqlalchemy as sa

revision = "0002_email_outbox"
down_revision = "0001_bookings"
branch_labels = None
depends_on = None

def upgrade() -> None:
    op.create_table(
        "email_logs",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("to_email", sa.String(length=320), nullable=False),
        sa.Column("subject", sa.String(length=200), nullable=False),
        sa.Column("body", sa.Text(), nullable=True),
        sa.Column("status", sa.String(length=30), nullable=False, server_default="queued"),
        sa.Column("related_booking_id", sa.Integer(), nullable=True),
        sa.Column("attempts", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("last_error", sa.String(length=500), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("sent_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_email_logs_to_email", "email_logs", ["to_email"])
    op.create_index("ix_email_logs_status", "email_logs", ["status"])
    op.create_index("ix_email_logs_related_booking_id", "email_logs", ["related_booking_id"])

def downgrade() -> None:
    op.drop_table("email_logs")
