from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import JSON, DateTime, Float, ForeignKey, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    pass


class OrderModel(Base):
    __tablename__ = "orders"

    id: Mapped[str] = mapped_column(String(50), primary_key=True)
    cart_id: Mapped[str] = mapped_column(String(50), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False)
    items: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False)
    subtotal: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    delivery_fee: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    discount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    total: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False)
    applied_offer_id: Mapped[str | None] = mapped_column(String(50), nullable=True)
    address_id: Mapped[str] = mapped_column(String(50), nullable=False)
    address_label: Mapped[str] = mapped_column(String(100), nullable=False)
    address_details: Mapped[str] = mapped_column(String(1000), nullable=False)
    payment_method: Mapped[str] = mapped_column(String(20), nullable=False)
    delivery_option: Mapped[str] = mapped_column(String(20), nullable=False)
    delivery_instructions: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    delivery_otp: Mapped[str] = mapped_column(String(4), nullable=False)
    placed_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    accepted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    delivered_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    rider_id: Mapped[str | None] = mapped_column(String(50), nullable=True, index=True)
    moderator_note: Mapped[str | None] = mapped_column(Text, nullable=True)
    rider_lat: Mapped[float | None] = mapped_column(Float, nullable=True)
    rider_lng: Mapped[float | None] = mapped_column(Float, nullable=True)
    rider_located_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    version: Mapped[int] = mapped_column(Integer, nullable=False, server_default="1")

    restaurants: Mapped[list["OrderRestaurantModel"]] = relationship(
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderRestaurantModel.restaurant_id",
    )

    __table_args__ = (
        Index("ix_orders_status_placed_at", "status", "placed_at"),
    )


class OrderRestaurantModel(Base):
    __tablename__ = "order_restaurants"

    order_id: Mapped[str] = mapped_column(
        String(50),
        ForeignKey("orders.id", ondelete="CASCADE"),
        primary_key=True,
    )
    restaurant_id: Mapped[str] = mapped_column(String(50), primary_key=True, index=True)

    order: Mapped[OrderModel] = relationship(back_populates="restaurants")
