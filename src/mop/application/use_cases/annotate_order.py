from __future__ import annotations

import logging

from mop.application.dto.requests import OrderNoteRequest
from mop.application.dto.responses import OrderResponse
from mop.application.mappers.event_envelope import serialize_order_event
from mop.application.mappers.order_mapper import to_order_response
from mop.application.ports.clock import Clock
from mop.application.ports.publisher import ORDER_EVENTS_CHANNEL, EventPublisher
from mop.application.ports.repositories import OptimisticConcurrencyError, OrderRepository
from mop.application.use_cases.context import TraceContext
from mop.application.use_cases.errors import OrderConflictError, OrderNotFoundError
from mop.domain.common.ids import OrderId
from mop.domain.order.events import OrderNoteUpdated

logger = logging.getLogger(__name__)


class UpdateModeratorNote:
    """Attach or replace the moderator's note; status is left alone."""

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
        request_dto: OrderNoteRequest,
        trace_ctx: TraceContext,
    ) -> OrderResponse:
        order = self._order_repository.get(order_id)
        if order is None:
            raise OrderNotFoundError(f"order {order_id} not found")

        try:
            persisted = self._order_repository.update(
                order.with_moderator_note(request_dto.note),
                expected_version=order.version,
            )
        except OptimisticConcurrencyError as exc:
            raise OrderConflictError(f"order {order_id} note update conflict") from exc

        now = self._clock.now()
        event = OrderNoteUpdated(order_id=persisted.order_id, occurred_at=now)
        message = serialize_order_event(
            event_type="order.note_updated",
            occurred_at=event.occurred_at,
            order=persisted,
            trace_id=trace_ctx.trace_id,
            request_id=trace_ctx.request_id,
            extra={"moderatorId": request_dto.moderator_id},
        )
        try:
            self._publisher.publish(channel=ORDER_EVENTS_CHANNEL, message=message)
        except Exception:
            logger.exception("event_publish_failed", extra={"order_id": persisted.order_id})

        return to_order_response(persisted, now)
