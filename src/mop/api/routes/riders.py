from __future__ import annotations

from fastapi import APIRouter

from mop.api import dependencies
from mop.application.dto.requests import RiderLocationRequest
from mop.application.dto.responses import OrderListResponse
from mop.application.use_cases.order_queues import ListClaimableOrders, ListRiderOrders
from mop.application.use_cases.track_rider import UpdateRiderLocation
from mop.domain.common.ids import RiderId

router = APIRouter()


@router.get("/v1/riders/available-orders", response_model=OrderListResponse)
def list_available_orders() -> OrderListResponse:
    use_case = ListClaimableOrders(
        order_repository=dependencies.get_order_repository(),
        clock=dependencies.get_clock(),
    )
    return use_case.execute()


@router.get("/v1/riders/{rider_id}/orders", response_model=OrderListResponse)
def list_rider_orders(rider_id: str) -> OrderListResponse:
    use_case = ListRiderOrders(
        order_repository=dependencies.get_order_repository(),
        clock=dependencies.get_clock(),
    )
    return use_case.execute(rider_id=RiderId(rider_id))


@router.put("/v1/riders/{rider_id}/location", response_model=OrderListResponse)
def update_rider_location(rider_id: str, request_dto: RiderLocationRequest) -> OrderListResponse:
    use_case = UpdateRiderLocation(
        order_repository=dependencies.get_order_repository(),
        clock=dependencies.get_clock(),
    )
    return use_case.execute(RiderId(rider_id), request_dto)
