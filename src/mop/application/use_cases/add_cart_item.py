from __future__ import annotations

import logging

from mop.application.dto.requests import AddCartItemRequest
from mop.application.dto.responses import CartResponse
from mop.application.mappers.cart_mapper import to_cart_response
from mop.application.ports.clock import Clock
from mop.application.ports.repositories import (
    CartRepository,
    MenuRepository,
    RestaurantRepository,
)
from mop.application.use_cases.errors import MenuItemNotFoundError, RestaurantNotFoundError
from mop.application.use_cases.get_cart import load_or_create_cart
from mop.domain.availability.evaluator import evaluate
from mop.domain.common.ids import CartId, MenuItemId
from mop.domain.common.outcome import Outcome, RejectionCode
from mop.domain.menu.entities import resolve_customizations

logger = logging.getLogger(__name__)


class AddCartItem:
    def __init__(
        self,
        menu_repository: MenuRepository,
        restaurant_repository: RestaurantRepository,
        cart_repository: CartRepository,
        clock: Clock,
    ) -> None:
        self._menu_repository = menu_repository
        self._restaurant_repository = restaurant_repository
        self._cart_repository = cart_repository
        self._clock = clock

    def execute(self, cart_id: CartId, request_dto: AddCartItemRequest) -> Outcome[CartResponse]:
        item = self._menu_repository.get_menu_item(MenuItemId(request_dto.item_id))
        if item is None:
            raise MenuItemNotFoundError(f"menu item {request_dto.item_id} does not exist")
        restaurant = self._restaurant_repository.get(item.restaurant_id)
        if restaurant is None:
            raise RestaurantNotFoundError(f"restaurant {item.restaurant_id} not found")

        availability = evaluate(item, restaurant, self._clock.now())
        if not availability.is_available:
            return Outcome.reject(RejectionCode.ITEM_UNAVAILABLE, availability.reason)

        resolved = resolve_customizations(item, request_dto.customizations)
        if not resolved.ok:
            return Outcome(rejection=resolved.rejection)

        cart = load_or_create_cart(self._cart_repository, cart_id)
        update = cart.add_item(item, request_dto.quantity, resolved.unwrap())
        self._cart_repository.save(cart)
        if update.revocation is not None:
            logger.info("cart_offer_revoked", extra={"cart_id": cart_id})
        return Outcome.success(to_cart_response(cart, update.revocation))
