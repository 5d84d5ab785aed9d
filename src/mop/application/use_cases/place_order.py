from __future__ import annotations

import logging
import secrets
from uuid import uuid4

from mop.application.dto.requests import CheckoutRequest
from mop.application.dto.responses import CheckoutResponse
from mop.application.mappers.event_envelope import serialize_order_event
from mop.application.mappers.order_mapper import to_checkout_response
from mop.application.metrics.order_lifecycle import record_order_status, record_rejection
from mop.application.ports.clock import Clock
from mop.application.ports.publisher import ORDER_EVENTS_CHANNEL, EventPublisher
from mop.application.ports.repositories import CartRepository, OrderRepository
from mop.application.use_cases.context import TraceContext
from mop.application.use_cases.get_cart import load_or_create_cart
from mop.domain.common.ids import AddressId, CartId, OrderId
from mop.domain.common.outcome import Outcome
from mop.domain.order.entities import Address
from mop.domain.order.events import OrderPlaced
from mop.domain.order.factory import create_order

logger = logging.getLogger(__name__)


def _delivery_otp() -> str:
    return f"{secrets.randbelow(9000) + 1000}"


class PlaceOrder:
    def __init__(
        self,
        cart_repository: CartRepository,
        order_repository: OrderRepository,
        publisher: EventPublisher,
        clock: Clock,
    ) -> None:
        self._cart_repository = cart_repository
        self._order_repository = order_repository
        self._publisher = publisher
        self._clock = clock

    def execute(
        self,
        cart_id: CartId,
        request_dto: CheckoutRequest,
        trace_ctx: TraceContext,
    ) -> Outcome[CheckoutResponse]:
        cart = load_or_create_cart(self._cart_repository, cart_id)
        loaded = cart.snapshot()
        address = (
            Address(
                address_id=AddressId(request_dto.address.address_id),
                label=request_dto.address.label,
                details=request_dto.address.details,
            )
            if request_dto.address is not None
            else None
        )

        now = self._clock.now()
        outcome = create_order(
            cart,
            address,
            request_dto.payment_method,
            request_dto.delivery_option,
            order_id=OrderId(f"ord_{uuid4().hex[:12]}"),
            delivery_otp=_delivery_otp(),
            now=now,
            delivery_instructions=request_dto.delivery_instructions,
        )
        if not outcome.ok:
            record_rejection("place_order", outcome.rejection)
            return Outcome(rejection=outcome.rejection)

        order = outcome.unwrap()
        # The cart is emptied before the order exists, so a failed write never
        # leaves both an order and the cart it came from.
        self._cart_repository.save(cart)
        try:
            self._order_repository.add(order)
        except Exception:
            logger.warning(
                "checkout_cart_restored",
                extra={"cart_id": cart_id, "order_id": order.order_id},
            )
            self._cart_repository.save(loaded)
            raise

        event = OrderPlaced(order_id=order.order_id, total=order.total, occurred_at=now)
        message = serialize_order_event(
            event_type="order.placed",
            occurred_at=event.occurred_at,
            order=order,
            trace_id=trace_ctx.trace_id,
            request_id=trace_ctx.request_id,
        )
        record_order_status(order)
        try:
            self._publisher.publish(channel=ORDER_EVENTS_CHANNEL, message=message)
        except Exception:
            logger.exception("event_publish_failed", extra={"order_id": order.order_id})

        return Outcome.success(to_checkout_response(order, now))
