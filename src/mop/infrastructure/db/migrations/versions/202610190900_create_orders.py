"""create orders

Revision ID: 202610190900
Revises:
Create Date: 2026-10-19 09:00:00
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "202610190900"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "orders",
        sa.Column("id", sa.String(length=50), nullable=False),
        sa.Column("cart_id", sa.String(length=50), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("items", sa.JSON(), nullable=False),
        sa.Column("subtotal", sa.Numeric(12, 2), nullable=False),
        sa.Column("delivery_fee", sa.Numeric(12, 2), nullable=False),
        sa.Column("discount", sa.Numeric(12, 2), nullable=False),
        sa.Column("total", sa.Numeric(12, 2), nullable=False),
        sa.Column("currency", sa.String(length=3), nullable=False),
        sa.Column("applied_offer_id", sa.String(length=50), nullable=True),
        sa.Column("address_id", sa.String(length=50), nullable=False),
        sa.Column("address_label", sa.String(length=100), nullable=False),
        sa.Column("address_details", sa.String(length=1000), nullable=False),
        sa.Column("payment_method", sa.String(length=20), nullable=False),
        sa.Column("delivery_option", sa.String(length=20), nullable=False),
        sa.Column("delivery_instructions", sa.String(length=1000), nullable=True),
        sa.Column("delivery_otp", sa.String(length=4), nullable=False),
        sa.Column("placed_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("accepted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("delivered_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("rider_id", sa.String(length=50), nullable=True),
        sa.Column("moderator_note", sa.Text(), nullable=True),
        sa.Column("rider_lat", sa.Float(), nullable=True),
        sa.Column("rider_lng", sa.Float(), nullable=True),
        sa.Column("rider_located_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("version", sa.Integer(), nullable=False, server_default="1"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_orders_rider_id", "orders", ["rider_id"], unique=False)
    op.create_index("ix_orders_status_placed_at", "orders", ["status", "placed_at"], unique=False)

    op.create_table(
        "order_restaurants",
        sa.Column("order_id", sa.String(length=50), nullable=False),
        sa.Column("restaurant_id", sa.String(length=50), nullable=False),
        sa.ForeignKeyConstraint(["order_id"], ["orders.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("order_id", "restaurant_id"),
    )
    op.create_index(
        "ix_order_restaurants_restaurant_id",
        "order_restaurants",
        ["restaurant_id"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index("ix_order_restaurants_restaurant_id", table_name="order_restaurants")
    op.drop_table("order_restaurants")
    op.drop_index("ix_orders_status_placed_at", table_name="orders")
    op.drop_index("ix_orders_rider_id", table_name="orders")
    op.drop_table("orders")
