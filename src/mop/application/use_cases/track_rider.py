from __future__ import annotations

import logging

from mop.application.dto.requests import RiderLocationRequest
from mop.application.dto.responses import OrderListResponse
from mop.application.mappers.order_mapper import to_order_response
from mop.application.ports.clock import Clock
from mop.application.ports.repositories import OptimisticConcurrencyError, OrderRepository
from mop.application.use_cases.errors import OrderConflictError
from mop.domain.common.ids import RiderId
from mop.domain.order.entities import Order, RiderLocation

logger = logging.getLogger(__name__)

_WRITE_ATTEMPTS = 3


class UpdateRiderLocation:
    """Copy the rider's position onto every order they are still delivering."""

    def __init__(self, order_repository: OrderRepository, clock: Clock) -> None:
        self._order_repository = order_repository
        self._clock = clock

    def execute(self, rider_id: RiderId, request_dto: RiderLocationRequest) -> OrderListResponse:
        now = self._clock.now()
        location = RiderLocation(lat=request_dto.lat, lng=request_dto.lng, recorded_at=now)

        tracked: list[Order] = []
        for order in self._order_repository.list_for_rider(rider_id):
            stored = self._track(order, rider_id, location)
            if stored is not None:
                tracked.append(stored)

        logger.debug(
            "rider_location_updated",
            extra={"rider_id": rider_id, "orders": len(tracked)},
        )
        return OrderListResponse(orders=[to_order_response(order, now) for order in tracked])

    def _track(self, order: Order, rider_id: RiderId, location: RiderLocation) -> Order | None:
        current: Order | None = order
        for _ in range(_WRITE_ATTEMPTS):
            # Finished or reassigned orders keep their last known position.
            if current is None or not current.is_active_claim or current.rider_id != rider_id:
                return None
            updated = current.track_rider(rider_id, location).unwrap()
            try:
                return self._order_repository.update(updated, expected_version=current.version)
            except OptimisticConcurrencyError:
                current = self._order_repository.get(current.order_id)
        raise OrderConflictError(f"order {order.order_id} location update conflict")
