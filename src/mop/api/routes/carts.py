from __future__ import annotations

from typing import Any

from fastapi import APIRouter, status

from mop.api import dependencies
from mop.api.error_handling import outcome_response
from mop.application.dto.requests import (
    AddCartItemRequest,
    ApplyOfferRequest,
    CheckoutRequest,
    UpdateCartItemRequest,
)
from mop.application.dto.responses import CartResponse, CheckoutResponse
from mop.application.use_cases.add_cart_item import AddCartItem
from mop.application.use_cases.apply_offer import ApplyOffer, RemoveOffer
from mop.application.use_cases.get_cart import GetCart
from mop.application.use_cases.place_order import PlaceOrder
from mop.application.use_cases.update_cart_item import RemoveCartItem, UpdateCartItemQuantity
from mop.domain.common.ids import CartId, CartItemId

router = APIRouter()


def _add_cart_item_use_case() -> AddCartItem:
    return AddCartItem(
        menu_repository=dependencies.get_menu_repository(),
        restaurant_repository=dependencies.get_restaurant_repository(),
        cart_repository=dependencies.get_cart_repository(),
        clock=dependencies.get_clock(),
    )


def _apply_offer_use_case() -> ApplyOffer:
    return ApplyOffer(
        offer_repository=dependencies.get_offer_repository(),
        cart_repository=dependencies.get_cart_repository(),
        clock=dependencies.get_clock(),
    )


def _place_order_use_case() -> PlaceOrder:
    return PlaceOrder(
        cart_repository=dependencies.get_cart_repository(),
        order_repository=dependencies.get_order_repository(),
        publisher=dependencies.get_event_publisher(),
        clock=dependencies.get_clock(),
    )


@router.get("/v1/carts/{cart_id}", response_model=CartResponse)
def get_cart(cart_id: str) -> CartResponse:
    return GetCart(cart_repository=dependencies.get_cart_repository()).execute(CartId(cart_id))


@router.post("/v1/carts/{cart_id}/items", response_model=CartResponse)
def add_cart_item(cart_id: str, request_dto: AddCartItemRequest) -> Any:
    return outcome_response(
        _add_cart_item_use_case().execute(cart_id=CartId(cart_id), request_dto=request_dto)
    )


@router.patch("/v1/carts/{cart_id}/items/{cart_item_id}", response_model=CartResponse)
def update_cart_item(cart_id: str, cart_item_id: str, request_dto: UpdateCartItemRequest) -> Any:
    use_case = UpdateCartItemQuantity(cart_repository=dependencies.get_cart_repository())
    return outcome_response(
        use_case.execute(
            cart_id=CartId(cart_id),
            cart_item_id=CartItemId(cart_item_id),
            quantity=request_dto.quantity,
        )
    )


@router.delete("/v1/carts/{cart_id}/items/{cart_item_id}", response_model=CartResponse)
def remove_cart_item(cart_id: str, cart_item_id: str) -> Any:
    use_case = RemoveCartItem(cart_repository=dependencies.get_cart_repository())
    return outcome_response(
        use_case.execute(cart_id=CartId(cart_id), cart_item_id=CartItemId(cart_item_id))
    )


@router.post("/v1/carts/{cart_id}/offer", response_model=CartResponse)
def apply_offer(cart_id: str, request_dto: ApplyOfferRequest) -> Any:
    return outcome_response(
        _apply_offer_use_case().execute(cart_id=CartId(cart_id), request_dto=request_dto)
    )


@router.delete("/v1/carts/{cart_id}/offer", response_model=CartResponse)
def remove_offer(cart_id: str) -> Any:
    use_case = RemoveOffer(cart_repository=dependencies.get_cart_repository())
    return outcome_response(use_case.execute(cart_id=CartId(cart_id)))


@router.post(
    "/v1/carts/{cart_id}/checkout",
    response_model=CheckoutResponse,
    status_code=status.HTTP_201_CREATED,
)
def checkout(cart_id: str, request_dto: CheckoutRequest) -> Any:
    return outcome_response(
        _place_order_use_case().execute(
            cart_id=CartId(cart_id),
            request_dto=request_dto,
            trace_ctx=dependencies.current_trace_context(),
        )
    )
