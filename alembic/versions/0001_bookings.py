"""bookings

Revision ID: 0001_bookings
Revises:
Create Date: 2025-11-03

"""

from alembic import op
import sqlalchemy as sa

revision = "0001_bookings"
down_revision = None
branch_labels = None
depends_on = None

def upgrade() -> None:
    op.create_table(
        "bookings",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column("phoneNumber", sa.String(length=40), nullable=False),
        sa.Column("serviceId", sa.Integer(), nullable=False),
        sa.Column("serviceName", sa.String(length=200), nullable=False),
        sa.Column("checkInDate", sa.Date(), nullable=False),
        sa.Column("checkOutDate", sa.Date(), nullable=False),
        sa.Column("modeOfPayment", sa.String(length=20), nullable=False),
        sa.Column("referenceNumber", sa.String(length=100), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="pending"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("serviceId", "checkInDate", name="uq_bookings_service_checkin"),
    )
    op.create_index("ix_bookings_serviceId", "bookings", ["serviceId"])
    op.create_index("ix_bookings_created_at", "bookings", ["created_at"])

def downgrade() -> None:
    op.drop_index("ix_bookings_created_at", table_name="bookings")
    op.drop_index("ix_bookings_serviceId", table_name="bookings")
    op.drop_table("bookings")
