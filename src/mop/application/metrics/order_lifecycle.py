from __future__ import annotations

from prometheus_client import Counter, Histogram

from mop.domain.common.outcome import Rejection
from mop.domain.order.entities import Order, OrderStatus

ORDERS_TOTAL = Counter(
    "mop_orders_total",
    "Total number of orders observed by status.",
    ["status", "delivery_option"],
)

ORDER_TRANSITION_TOTAL = Counter(
    "mop_order_transition_total",
    "Total number of order lifecycle transitions.",
    ["from", "to", "actor"],
)

ORDER_REJECTIONS_TOTAL = Counter(
    "mop_order_rejections_total",
    "Order operations refused by a business rule.",
    ["operation", "code"],
)

ORDER_TIME_TO_ACCEPT_SECONDS = Histogram(
    "mop_order_time_to_accept_seconds",
    "Time between order placement and acceptance.",
)

RIDER_CLAIMS_TOTAL = Counter(
    "mop_rider_claims_total",
    "Rider claim attempts by result.",
    ["result"],
)

CART_OFFERS_TOTAL = Counter(
    "mop_cart_offers_total",
    "Offer application attempts by result.",
    ["result"],
)


def record_order_status(order: Order) -> None:
    ORDERS_TOTAL.labels(
        status=order.status.value,
        delivery_option=order.delivery_option.value,
    ).inc()


def record_transition(from_status: OrderStatus, to_status: OrderStatus, actor: str) -> None:
    ORDER_TRANSITION_TOTAL.labels(
        **{"from": from_status.value, "to": to_status.value, "actor": actor}
    ).inc()


def record_rejection(operation: str, rejection: Rejection) -> None:
    ORDER_REJECTIONS_TOTAL.labels(operation=operation, code=rejection.code.value).inc()


def record_time_to_accept(order: Order) -> None:
    if order.accepted_at is None:
        return
    ORDER_TIME_TO_ACCEPT_SECONDS.observe(
        max((order.accepted_at - order.placed_at).total_seconds(), 0.0)
    )


def record_rider_claim(result: str) -> None:
    RIDER_CLAIMS_TOTAL.labels(result=result).inc()


def record_offer_attempt(result: str) -> None:
    CART_OFFERS_TOTAL.labels(result=result).inc()
