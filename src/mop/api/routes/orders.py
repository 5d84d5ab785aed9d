from __future__ import annotations

from typing import Any

from fastapi import APIRouter

from mop.api import dependencies
from mop.api.error_handling import outcome_response
from mop.application.dto.requests import (
    ChangeOrderStatusRequest,
    ClaimOrderRequest,
    CompleteDeliveryRequest,
    OrderNoteRequest,
)
from mop.application.dto.responses import OrderListResponse, OrderResponse
from mop.application.use_cases.annotate_order import UpdateModeratorNote
from mop.application.use_cases.change_order_status import ChangeOrderStatus
from mop.application.use_cases.claim_order import ClaimOrder
from mop.application.use_cases.complete_delivery import CompleteDelivery
from mop.application.use_cases.get_order import GetOrder
from mop.application.use_cases.order_queues import ListRestaurantOrders
from mop.domain.common.ids import OrderId, RestaurantId, RiderId

router = APIRouter()


def _change_order_status_use_case() -> ChangeOrderStatus:
    return ChangeOrderStatus(
        order_repository=dependencies.get_order_repository(),
        publisher=dependencies.get_event_publisher(),
        clock=dependencies.get_clock(),
    )


@router.get("/v1/orders/{order_id}", response_model=OrderResponse)
def get_order(order_id: str) -> OrderResponse:
    use_case = GetOrder(
        order_repository=dependencies.get_order_repository(),
        clock=dependencies.get_clock(),
    )
    return use_case.execute(order_id=OrderId(order_id))


@router.post("/v1/orders/{order_id}/status", response_model=OrderResponse)
def change_order_status(order_id: str, request_dto: ChangeOrderStatusRequest) -> Any:
    return outcome_response(
        _change_order_status_use_case().execute(
            order_id=OrderId(order_id),
            request_dto=request_dto,
            trace_ctx=dependencies.current_trace_context(),
        )
    )


@router.put("/v1/orders/{order_id}/note", response_model=OrderResponse)
def update_moderator_note(order_id: str, request_dto: OrderNoteRequest) -> OrderResponse:
    use_case = UpdateModeratorNote(
        order_repository=dependencies.get_order_repository(),
        publisher=dependencies.get_event_publisher(),
        clock=dependencies.get_clock(),
    )
    return use_case.execute(
        order_id=OrderId(order_id),
        request_dto=request_dto,
        trace_ctx=dependencies.current_trace_context(),
    )


@router.post("/v1/orders/{order_id}/claim", response_model=OrderResponse)
def claim_order(order_id: str, request_dto: ClaimOrderRequest) -> Any:
    use_case = ClaimOrder(
        order_repository=dependencies.get_order_repository(),
        publisher=dependencies.get_event_publisher(),
        clock=dependencies.get_clock(),
    )
    return outcome_response(
        use_case.execute(
            order_id=OrderId(order_id),
            rider_id=RiderId(request_dto.rider_id),
            trace_ctx=dependencies.current_trace_context(),
        )
    )


@router.post("/v1/orders/{order_id}/deliver", response_model=OrderResponse)
def complete_delivery(order_id: str, request_dto: CompleteDeliveryRequest) -> Any:
    use_case = CompleteDelivery(change_order_status=_change_order_status_use_case())
    return outcome_response(
        use_case.execute(
            order_id=OrderId(order_id),
            request_dto=request_dto,
            trace_ctx=dependencies.current_trace_context(),
        )
    )


@router.get("/v1/restaurants/{restaurant_id}/orders", response_model=OrderListResponse)
def list_restaurant_orders(restaurant_id: str, status: str | None = None) -> OrderListResponse:
    use_case = ListRestaurantOrders(
        order_repository=dependencies.get_order_repository(),
        clock=dependencies.get_clock(),
    )
    return use_case.execute(restaurant_id=RestaurantId(restaurant_id), status=status)
