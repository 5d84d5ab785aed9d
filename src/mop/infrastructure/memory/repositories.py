from __future__ import annotations

import threading
from dataclasses import replace
from typing import Iterable

from mop.application.ports.repositories import (
    CartRepository,
    MenuRepository,
    OfferRepository,
    OptimisticConcurrencyError,
    OrderRepository,
    RestaurantRepository,
)
from mop.domain.cart.entities import Cart
from mop.domain.common.ids import CartId, MenuItemId, OfferId, OrderId, RestaurantId, RiderId
from mop.domain.menu.entities import MenuItem
from mop.domain.offer.entities import Offer
from mop.domain.order.entities import MAX_ACTIVE_CLAIMS_PER_RIDER, Order, OrderStatus
from mop.domain.restaurant.entities import Restaurant
from mop.infrastructure.codec.documents import cart_from_document, cart_to_document


class InMemoryMenuRepository(MenuRepository):
    def __init__(self, items: Iterable[MenuItem] = ()) -> None:
        self._items = {item.item_id: item for item in items}

    def add(self, item: MenuItem) -> None:
        self._items[item.item_id] = item

    def get_menu_item(self, item_id: MenuItemId) -> MenuItem | None:
        return self._items.get(item_id)

    def all_items(self) -> list[MenuItem]:
        return list(self._items.values())


class InMemoryRestaurantRepository(RestaurantRepository):
    def __init__(self, restaurants: Iterable[Restaurant] = ()) -> None:
        self._restaurants = {restaurant.restaurant_id: restaurant for restaurant in restaurants}

    def add(self, restaurant: Restaurant) -> None:
        self._restaurants[restaurant.restaurant_id] = restaurant

    def get(self, restaurant_id: RestaurantId) -> Restaurant | None:
        return self._restaurants.get(restaurant_id)


class InMemoryOfferRepository(OfferRepository):
    def __init__(self, offers: Iterable[Offer] = ()) -> None:
        self._offers = {offer.offer_id: offer for offer in offers}

    def add(self, offer: Offer) -> None:
        self._offers[offer.offer_id] = offer

    def get(self, offer_id: OfferId) -> Offer | None:
        return self._offers.get(offer_id)

    def find_by_coupon(self, coupon_code: str) -> Offer | None:
        code = coupon_code.strip().upper()
        for offer in self._offers.values():
            if offer.coupon_code is not None and offer.coupon_code.upper() == code:
                return offer
        return None


class InMemoryCartRepository(CartRepository):
    """Stores carts as documents so callers never share a live Cart instance."""

    def __init__(self) -> None:
        self._documents: dict[CartId, dict] = {}
        self._lock = threading.Lock()

    def get(self, cart_id: CartId) -> Cart | None:
        with self._lock:
            document = self._documents.get(cart_id)
        if document is None:
            return None
        return cart_from_document(document)

    def save(self, cart: Cart) -> None:
        document = cart_to_document(cart)
        with self._lock:
            self._documents[cart.cart_id] = document


class InMemoryOrderRepository(OrderRepository):
    def __init__(self) -> None:
        self._orders: dict[OrderId, Order] = {}
        self._lock = threading.Lock()

    def add(self, order: Order) -> None:
        with self._lock:
            if order.order_id in self._orders:
                raise ValueError(f"order {order.order_id} already exists")
            self._orders[order.order_id] = order

    def get(self, order_id: OrderId) -> Order | None:
        with self._lock:
            return self._orders.get(order_id)

    def update(self, order: Order, expected_version: int) -> Order:
        with self._lock:
            current = self._orders.get(order.order_id)
            if current is None or current.version != expected_version:
                raise OptimisticConcurrencyError(f"order {order.order_id} version conflict")
            stored = replace(order, version=expected_version + 1)
            self._orders[order.order_id] = stored
            return stored

    def claim_for_rider(
        self,
        order_id: OrderId,
        rider_id: RiderId,
        max_active_claims: int = MAX_ACTIVE_CLAIMS_PER_RIDER,
    ) -> Order | None:
        with self._lock:
            current = self._orders.get(order_id)
            if (
                current is None
                or current.rider_id is not None
                or current.status != OrderStatus.ON_ITS_WAY
            ):
                return None
            if self._active_claims(rider_id) >= max_active_claims:
                return None
            stored = replace(current, rider_id=rider_id, version=current.version + 1)
            self._orders[order_id] = stored
            return stored

    def count_active_for_rider(self, rider_id: RiderId) -> int:
        with self._lock:
            return self._active_claims(rider_id)

    def list_for_rider(self, rider_id: RiderId) -> list[Order]:
        with self._lock:
            orders = [order for order in self._orders.values() if order.rider_id == rider_id]
        return _newest_first(orders)

    def list_for_restaurant(
        self,
        restaurant_id: RestaurantId,
        status: OrderStatus | None,
    ) -> list[Order]:
        with self._lock:
            orders = [
                order
                for order in self._orders.values()
                if restaurant_id in order.restaurant_ids
                and (status is None or order.status == status)
            ]
        return _newest_first(orders)

    def list_claimable(self) -> list[Order]:
        with self._lock:
            orders = [
                order
                for order in self._orders.values()
                if order.status == OrderStatus.ON_ITS_WAY and order.rider_id is None
            ]
        return _newest_first(orders)

    def _active_claims(self, rider_id: RiderId) -> int:
        return sum(
            1
            for order in self._orders.values()
            if order.rider_id == rider_id and order.is_active_claim
        )


def _newest_first(orders: list[Order]) -> list[Order]:
    return sorted(orders, key=lambda order: (order.placed_at, order.order_id), reverse=True)
