from __future__ import annotations

import logging

from mop.application.dto.responses import CartResponse
from mop.application.mappers.cart_mapper import to_cart_response
from mop.application.ports.repositories import CartRepository
from mop.application.use_cases.get_cart import load_or_create_cart
from mop.domain.cart.entities import Cart, CartUpdate
from mop.domain.common.ids import CartId, CartItemId
from mop.domain.common.outcome import Outcome

logger = logging.getLogger(__name__)


def _finish(
    cart_repository: CartRepository,
    cart: Cart,
    update: CartUpdate,
) -> Outcome[CartResponse]:
    if not update.ok:
        return Outcome(rejection=update.rejection)
    cart_repository.save(cart)
    if update.revocation is not None:
        logger.info(
            "cart_offer_revoked",
            extra={"cart_id": cart.cart_id, "reason": update.revocation.code.value},
        )
    return Outcome.success(to_cart_response(cart, update.revocation))


class UpdateCartItemQuantity:
    def __init__(self, cart_repository: CartRepository) -> None:
        self._cart_repository = cart_repository

    def execute(
        self,
        cart_id: CartId,
        cart_item_id: CartItemId,
        quantity: int,
    ) -> Outcome[CartResponse]:
        cart = load_or_create_cart(self._cart_repository, cart_id)
        update = cart.set_quantity(cart_item_id, quantity)
        return _finish(self._cart_repository, cart, update)


class RemoveCartItem:
    def __init__(self, cart_repository: CartRepository) -> None:
        self._cart_repository = cart_repository

    def execute(self, cart_id: CartId, cart_item_id: CartItemId) -> Outcome[CartResponse]:
        cart = load_or_create_cart(self._cart_repository, cart_id)
        update = cart.remove_item(cart_item_id)
        return _finish(self._cart_repository, cart, update)
