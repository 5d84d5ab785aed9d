from __future__ import annotations

from mop.application.dto.responses import OrderListResponse
from mop.application.mappers.order_mapper import to_order_response
from mop.application.ports.clock import Clock
from mop.application.ports.repositories import OrderRepository
from mop.domain.common.ids import RestaurantId, RiderId
from mop.domain.order.entities import OrderStatus


class InvalidOrderQueueStatusError(Exception):
    pass


def _parse_status(status: str | None) -> OrderStatus | None:
    if status is None:
        return None
    try:
        return OrderStatus(status)
    except ValueError as exc:
        raise InvalidOrderQueueStatusError(f"invalid status: {status}") from exc


class ListRestaurantOrders:
    def __init__(self, order_repository: OrderRepository, clock: Clock) -> None:
        self._order_repository = order_repository
        self._clock = clock

    def execute(self, restaurant_id: RestaurantId, status: str | None = None) -> OrderListResponse:
        orders = self._order_repository.list_for_restaurant(restaurant_id, _parse_status(status))
        now = self._clock.now()
        return OrderListResponse(orders=[to_order_response(order, now) for order in orders])


class ListClaimableOrders:
    def __init__(self, order_repository: OrderRepository, clock: Clock) -> None:
        self._order_repository = order_repository
        self._clock = clock

    def execute(self) -> OrderListResponse:
        now = self._clock.now()
        return OrderListResponse(
            orders=[to_order_response(order, now) for order in self._order_repository.list_claimable()]
        )


class ListRiderOrders:
    def __init__(self, order_repository: OrderRepository, clock: Clock) -> None:
        self._order_repository = order_repository
        self._clock = clock

    def execute(self, rider_id: RiderId) -> OrderListResponse:
        now = self._clock.now()
        return OrderListResponse(
            orders=[
                to_order_response(order, now)
                for order in self._order_repository.list_for_rider(rider_id)
            ]
        )
