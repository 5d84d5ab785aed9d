from __future__ import annotations

import json
from datetime import datetime
from typing import Any
from uuid import uuid4

from mop.domain.common.money import Money
from mop.domain.order.entities import Order


def _serialize_event(
    *,
    event_type: str,
    occurred_at: datetime,
    payload: dict[str, Any],
    trace_id: str | None,
    request_id: str | None,
) -> str:
    envelope = {
        "event_id": str(uuid4()),
        "event_type": event_type,
        "occurred_at": occurred_at.isoformat(),
        "request_id": request_id,
        "trace_id": trace_id,
        "payload": payload,
    }
    return json.dumps(envelope, separators=(",", ":"), ensure_ascii=False)


def _money(value: Money) -> dict[str, Any]:
    rounded = value.rounded()
    return {"amount": str(rounded.amount), "currency": rounded.currency}


def serialize_order_event(
    *,
    event_type: str,
    occurred_at: datetime,
    order: Order,
    trace_id: str | None,
    request_id: str | None,
    extra: dict[str, Any] | None = None,
) -> str:
    payload: dict[str, Any] = {
        "orderId": str(order.order_id),
        "restaurantIds": sorted(str(restaurant_id) for restaurant_id in order.restaurant_ids),
        "status": order.status.value,
        "riderId": order.rider_id,
        "total": _money(order.total),
        "placedAt": order.placed_at.isoformat(),
        "acceptedAt": order.accepted_at.isoformat() if order.accepted_at else None,
        "version": order.version,
        "items": [
            {
                "cartItemId": str(item.cart_item_id),
                "itemId": str(item.item_id),
                "name": item.base_item.name,
                "quantity": item.quantity,
                "totalPrice": _money(item.total_price),
            }
            for item in order.items
        ],
    }
    if extra:
        payload.update(extra)
    return _serialize_event(
        event_type=event_type,
        occurred_at=occurred_at,
        trace_id=trace_id,
        request_id=request_id,
        payload=payload,
    )
