from __future__ import annotations

import logging

from mop.application.dto.responses import OrderResponse
from mop.application.mappers.event_envelope import serialize_order_event
from mop.application.mappers.order_mapper import to_order_response
from mop.application.metrics.order_lifecycle import record_rejection, record_rider_claim
from mop.application.ports.clock import Clock
from mop.application.ports.publisher import ORDER_EVENTS_CHANNEL, EventPublisher
from mop.application.ports.repositories import OrderRepository
from mop.application.use_cases.context import TraceContext
from mop.application.use_cases.errors import OrderNotFoundError
from mop.domain.common.ids import OrderId, RiderId
from mop.domain.common.outcome import Outcome, Rejection, RejectionCode
from mop.domain.order.entities import MAX_ACTIVE_CLAIMS_PER_RIDER
from mop.domain.order.events import OrderClaimed

logger = logging.getLogger(__name__)


class ClaimOrder:
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
        rider_id: RiderId,
        trace_ctx: TraceContext,
    ) -> Outcome[OrderResponse]:
        order = self._order_repository.get(order_id)
        if order is None:
            raise OrderNotFoundError(f"order {order_id} not found")

        active_claims = self._order_repository.count_active_for_rider(rider_id)
        outcome = order.claim(rider_id, active_claims)
        if not outcome.ok:
            record_rider_claim(outcome.rejection.code.value)
            record_rejection("claim", outcome.rejection)
            return Outcome(rejection=outcome.rejection)

        # The pre-check above can race with other claims; the repository's
        # compare-and-set decides the winner and enforces the rider cap.
        claimed = self._order_repository.claim_for_rider(
            order_id, rider_id, MAX_ACTIVE_CLAIMS_PER_RIDER
        )
        if claimed is None:
            lost = self._lost_claim(order_id, rider_id)
            record_rider_claim(lost.code.value)
            record_rejection("claim", lost)
            return Outcome(rejection=lost)

        record_rider_claim("claimed")
        now = self._clock.now()
        event = OrderClaimed(order_id=claimed.order_id, rider_id=rider_id, occurred_at=now)
        message = serialize_order_event(
            event_type="order.claimed",
            occurred_at=event.occurred_at,
            order=claimed,
            trace_id=trace_ctx.trace_id,
            request_id=trace_ctx.request_id,
        )
        try:
            self._publisher.publish(channel=ORDER_EVENTS_CHANNEL, message=message)
        except Exception:
            logger.exception("event_publish_failed", extra={"order_id": claimed.order_id})

        return Outcome.success(to_order_response(claimed, now))

    def _lost_claim(self, order_id: OrderId, rider_id: RiderId) -> Rejection:
        active_claims = self._order_repository.count_active_for_rider(rider_id)
        if active_claims >= MAX_ACTIVE_CLAIMS_PER_RIDER:
            return Rejection(
                code=RejectionCode.RIDER_AT_CAPACITY,
                message=f"rider {rider_id} already has {active_claims} active orders",
            )
        return Rejection(
            code=RejectionCode.ORDER_ALREADY_CLAIMED,
            message=f"order {order_id} is already taken",
        )
