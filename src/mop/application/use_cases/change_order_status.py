from __future__ import annotations

import logging

from mop.application.dto.requests import ChangeOrderStatusRequest
from mop.application.dto.responses import OrderResponse
from mop.application.mappers.event_envelope import serialize_order_event
from mop.application.mappers.order_mapper import to_order_response
from mop.application.metrics.order_lifecycle import (
    record_order_status,
    record_rejection,
    record_time_to_accept,
    record_transition,
)
from mop.application.ports.clock import Clock
from mop.application.ports.publisher import ORDER_EVENTS_CHANNEL, EventPublisher
from mop.application.ports.repositories import OptimisticConcurrencyError, OrderRepository
from mop.application.use_cases.context import TraceContext
from mop.application.use_cases.errors import OrderConflictError, OrderNotFoundError
from mop.domain.common.ids import OrderId
from mop.domain.common.outcome import Outcome
from mop.domain.order.entities import Actor, Order, OrderStatus
from mop.domain.order.events import OrderStatusChanged

logger = logging.getLogger(__name__)


class ChangeOrderStatus:
    """Vendor and moderator status updates.

    Returns the authoritative order or a rejection; callers never guess a
    new state ahead of the result.
    """

    def __init__(
        self,
        order_repository: OrderRepository,
        publisher: EventPublisher,
        clock: Clock,
    ) -> None:
        self._order_repository = order_repository
        self._publisher = publisher
        self._clock = clock

    def execute(
        self,
        order_id: OrderId,
        request_dto: ChangeOrderStatusRequest,
        trace_ctx: TraceContext,
        otp: str | None = None,
    ) -> Outcome[OrderResponse]:
        actor = Actor(role=request_dto.actor_role, actor_id=request_dto.actor_id)
        target = request_dto.status

        order = self._order_repository.get(order_id)
        if order is None:
            raise OrderNotFoundError(f"order {order_id} not found")

        now = self._clock.now()
        outcome = order.transition(actor, target, now, otp=otp)
        if not outcome.ok:
            record_rejection("change_status", outcome.rejection)
            return Outcome(rejection=outcome.rejection)

        updated = outcome.unwrap()
        if updated is order:
            return Outcome.success(to_order_response(order, now))

        try:
            persisted = self._order_repository.update(updated, expected_version=order.version)
        except OptimisticConcurrencyError:
            current = self._order_repository.get(order_id)
            if current is None:
                raise OrderNotFoundError(f"order {order_id} not found")
            if current.status == target:
                return Outcome.success(to_order_response(current, now))
            raise OrderConflictError(f"order {order_id} status update conflict")

        self._announce(order, persisted, actor, trace_ctx)
        return Outcome.success(to_order_response(persisted, now))

    def _announce(
        self,
        previous: Order,
        persisted: Order,
        actor: Actor,
        trace_ctx: TraceContext,
    ) -> None:
        now = self._clock.now()
        event = OrderStatusChanged(
            order_id=persisted.order_id,
            from_status=previous.status,
            to_status=persisted.status,
            actor_role=actor.role.value,
            occurred_at=now,
        )
        message = serialize_order_event(
            event_type="order.status_changed",
            occurred_at=event.occurred_at,
            order=persisted,
            trace_id=trace_ctx.trace_id,
            request_id=trace_ctx.request_id,
            extra={"fromStatus": event.from_status.value, "actorRole": event.actor_role},
        )
        record_transition(event.from_status, event.to_status, actor=event.actor_role)
        record_order_status(persisted)
        if previous.accepted_at is None and persisted.status == OrderStatus.PREPARING:
            record_time_to_accept(persisted)
        logger.info(
            "order_status_changed",
            extra={
                "order_id": persisted.order_id,
                "from_status": event.from_status.value,
                "to_status": event.to_status.value,
            },
        )
        try:
            self._publisher.publish(channel=ORDER_EVENTS_CHANNEL, message=message)
        except Exception:
            logger.exception("event_publish_failed", extra={"order_id": persisted.order_id})
