from __future__ import annotations

from mop.application.dto.responses import CartResponse
from mop.application.mappers.cart_mapper import to_cart_response
from mop.application.ports.repositories import CartRepository
from mop.domain.cart.entities import Cart
from mop.domain.common.ids import CartId


def load_or_create_cart(cart_repository: CartRepository, cart_id: CartId) -> Cart:
    cart = cart_repository.get(cart_id)
    if cart is None:
        return Cart(cart_id=cart_id)
    return cart


class GetCart:
    def __init__(self, cart_repository: CartRepository) -> None:
        self._cart_repository = cart_repository

    def execute(self, cart_id: CartId) -> CartResponse:
        return to_cart_response(load_or_create_cart(self._cart_repository, cart_id))
