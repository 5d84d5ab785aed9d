from __future__ import annotations

from mop.application.dto.responses import OrderResponse
from mop.application.mappers.order_mapper import to_order_response
from mop.application.ports.clock import Clock
from mop.application.ports.repositories import OrderRepository
from mop.application.use_cases.errors import OrderNotFoundError
from mop.domain.common.ids import OrderId


class GetOrder:
    def __init__(self, order_repository: OrderRepository, clock: Clock) -> None:
        self._order_repository = order_repository
        self._clock = clock

    def execute(self, order_id: OrderId) -> OrderResponse:
        order = self._order_repository.get(order_id)
        if order is None:
            raise OrderNotFoundError(f"order {order_id} not found")
        return to_order_response(order, self._clock.now())
