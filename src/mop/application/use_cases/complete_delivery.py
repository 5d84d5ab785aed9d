from __future__ import annotations

from mop.application.dto.requests import ChangeOrderStatusRequest, CompleteDeliveryRequest
from mop.application.dto.responses import OrderResponse
from mop.application.use_cases.change_order_status import ChangeOrderStatus
from mop.application.use_cases.context import TraceContext
from mop.domain.common.ids import OrderId
from mop.domain.common.outcome import Outcome
from mop.domain.order.entities import ActorRole, OrderStatus


class CompleteDelivery:
    def __init__(self, change_order_status: ChangeOrderStatus) -> None:
        self._change_order_status = change_order_status

    def execute(
        self,
        order_id: OrderId,
        request_dto: CompleteDeliveryRequest,
        trace_ctx: TraceContext,
    ) -> Outcome[OrderResponse]:
        return self._change_order_status.execute(
            order_id=order_id,
            request_dto=ChangeOrderStatusRequest(
                actor_role=ActorRole.RIDER,
                actor_id=request_dto.rider_id,
                status=OrderStatus.DELIVERED,
            ),
            trace_ctx=trace_ctx,
            otp=request_dto.otp,
        )
