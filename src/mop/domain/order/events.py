from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from mop.domain.common.ids import OrderId, RiderId
from mop.domain.common.money import Money
from mop.domain.order.entities import OrderStatus


@dataclass(frozen=True)
class OrderPlaced:
    order_id: OrderId
    total: Money
    occurred_at: datetime


@dataclass(frozen=True)
class OrderStatusChanged:
    order_id: OrderId
    from_status: OrderStatus
    to_status: OrderStatus
    actor_role: str
    occurred_at: datetime


@dataclass(frozen=True)
class OrderClaimed:
    order_id: OrderId
    rider_id: RiderId
    occurred_at: datetime


@dataclass(frozen=True)
class OrderNoteUpdated:
    order_id: OrderId
    occurred_at: datetime
