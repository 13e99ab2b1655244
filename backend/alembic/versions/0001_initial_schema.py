"""Initial schedule schema.

Revision ID: 0001
Revises:
Create Date: 2025-06-01
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column("email", sa.String(length=320), nullable=False, unique=True),
        sa.Column("hashed_password", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("role", sa.Enum("ADMIN", "STAFF", name="userrole"), nullable=False),
        sa.Column(
            "status",
            sa.Enum("ACTIVE", "SUSPENDED", name="userstatus"),
            nullable=False,
        ),
        *_timestamps(),
    )

    op.create_table(
        "blocked_dates",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column(
            "reason",
            sa.Enum("Open", "Closed", "Away", name="dateoverridereason"),
            nullable=False,
        ),
        sa.Column("capacity", sa.Integer()),
        *_timestamps(),
        sa.CheckConstraint(
            "capacity IS NULL OR capacity >= 0", name="ck_blocked_dates_capacity"
        ),
    )
    op.create_index("ix_blocked_dates_date", "blocked_dates", ["date"], unique=True)

    op.create_table(
        "bookings",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column("order_number", sa.String(length=32), nullable=False, unique=True),
        sa.Column("order_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column(
            "status",
            sa.Enum("PENDING", "CONFIRMED", "CANCELLED", name="bookingstatus"),
            nullable=False,
        ),
        sa.Column("customer_name", sa.String(length=200), nullable=False),
        sa.Column("customer_email", sa.String(length=320), nullable=False),
        sa.Column("customer_phone", sa.String(length=32)),
        sa.Column("product_name", sa.String(length=200), nullable=False),
        sa.Column("size", sa.String(length=80), nullable=False),
        sa.Column("flavor", sa.String(length=120), nullable=False),
        sa.Column("shape", sa.String(length=80)),
        sa.Column("filling", sa.String(length=120)),
        sa.Column("design_notes", sa.Text()),
        sa.Column("price", sa.Numeric(10, 2)),
        sa.Column(
            "fulfillment_type",
            sa.Enum("PICKUP", "DELIVERY", name="fulfillmenttype"),
            nullable=False,
        ),
        sa.Column("pickup_time", sa.String(length=64)),
        sa.Column("delivery_time", sa.String(length=64)),
        *_timestamps(),
    )
    op.create_index("ix_bookings_order_date", "bookings", ["order_date"])


def downgrade() -> None:
    op.drop_index("ix_bookings_order_date", table_name="bookings")
    op.drop_table("bookings")
    sa.Enum(name="fulfillmenttype").drop(op.get_bind(), checkfirst=True)
    sa.Enum(name="bookingstatus").drop(op.get_bind(), checkfirst=True)

    op.drop_index("ix_blocked_dates_date", table_name="blocked_dates")
    op.drop_table("blocked_dates")
    sa.Enum(name="dateoverridereason").drop(op.get_bind(), checkfirst=True)

    op.drop_table("users")
    sa.Enum(name="userstatus").drop(op.get_bind(), checkfirst=True)
    sa.Enum(name="userrole").drop(op.get_bind(), checkfirst=True)
