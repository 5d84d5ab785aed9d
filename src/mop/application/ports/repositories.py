from __future__ import annotations

from typing import Protocol

from mop.domain.cart.entities import Cart
from mop.domain.common.ids import CartId, MenuItemId, OfferId, OrderId, RestaurantId, RiderId
from mop.domain.menu.entities import MenuItem
from mop.domain.offer.entities import Offer
from mop.domain.order.entities import MAX_ACTIVE_CLAIMS_PER_RIDER, Order, OrderStatus
from mop.domain.restaurant.entities import Restaurant


class MenuRepository(Protocol):
    def get_menu_item(self, item_id: MenuItemId) -> MenuItem | None: ...


class RestaurantRepository(Protocol):
    def get(self, restaurant_id: RestaurantId) -> Restaurant | None: ...


class OfferRepository(Protocol):
    def get(self, offer_id: OfferId) -> Offer | None: ...

    def find_by_coupon(self, coupon_code: str) -> Offer | None: ...


class CartRepository(Protocol):
    def get(self, cart_id: CartId) -> Cart | None: ...

    def save(self, cart: Cart) -> None: ...


class OrderRepository(Protocol):
    def add(self, order: Order) -> None: ...

    def get(self, order_id: OrderId) -> Order | None: ...

    def update(self, order: Order, expected_version: int) -> Order:
        """Persist ``order`` if the stored version still equals ``expected_version``.

        Returns the stored order with its version bumped; raises
        ``OptimisticConcurrencyError`` otherwise.
        """
        ...

    def claim_for_rider(
        self,
        order_id: OrderId,
        rider_id: RiderId,
        max_active_claims: int = MAX_ACTIVE_CLAIMS_PER_RIDER,
    ) -> Order | None:
        """Atomically assign ``rider_id`` if the order has no rider yet.

        The rider's active claims are counted in the same step, so the cap
        holds under concurrent claims. Returns the updated order, or None when
        another rider won or the rider is already at the cap.
        """
        ...

    def count_active_for_rider(self, rider_id: RiderId) -> int: ...

    def list_for_rider(self, rider_id: RiderId) -> list[Order]: ...

    def list_for_restaurant(
        self,
        restaurant_id: RestaurantId,
        status: OrderStatus | None,
    ) -> list[Order]: ...

    def list_claimable(self) -> list[Order]: ...


class OptimisticConcurrencyError(Exception):
    pass
