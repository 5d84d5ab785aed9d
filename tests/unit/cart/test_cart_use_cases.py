from __future__ import annotations

import sys
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[3] / "src"))

from mop.application.dto.requests import AddCartItemRequest, ApplyOfferRequest
from mop.application.use_cases.add_cart_item import AddCartItem
from mop.application.use_cases.apply_offer import ApplyOffer, RemoveOffer
from mop.application.use_cases.check_availability import CheckAvailability
from mop.application.use_cases.errors import MenuItemNotFoundError, OfferNotFoundError
from mop.application.use_cases.get_cart import GetCart
from mop.application.use_cases.update_cart_item import RemoveCartItem, UpdateCartItemQuantity
from mop.domain.common.ids import CartId, CartItemId, MenuItemId, OfferId, RestaurantId
from mop.domain.common.money import Money
from mop.domain.common.outcome import RejectionCode
from mop.domain.menu.entities import (
    AvailabilityKind,
    CustomizationChoice,
    CustomizationOption,
    ItemAvailability,
    MenuItem,
    SelectionMode,
)
from mop.domain.offer.entities import AllItems, DiscountType, Offer
from mop.domain.restaurant.entities import Restaurant
from mop.infrastructure.memory.repositories import (
    InMemoryCartRepository,
    InMemoryMenuRepository,
    InMemoryOfferRepository,
    InMemoryRestaurantRepository,
)

NOON = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    def __init__(self, now: datetime) -> None:
        self.current = now

    def now(self) -> datetime:
        return self.current


class Harness:
    def __init__(self) -> None:
        self.clock = FakeClock(NOON)
        restaurant = Restaurant(restaurant_id=RestaurantId("r1"), name="Hub")
        self.menu = InMemoryMenuRepository(
            [
                MenuItem(
                    item_id=MenuItemId("burger"),
                    restaurant_id=restaurant.restaurant_id,
                    restaurant_name=restaurant.name,
                    name="Burger",
                    price=Money.of("10.00"),
                    customization_options=(
                        CustomizationOption(
                            option_id="size",
                            name="Size",
                            selection_mode=SelectionMode.SINGLE,
                            required=True,
                            choices=(
                                CustomizationChoice("Regular", Decimal("0")),
                                CustomizationChoice("Double", Decimal("4.00")),
                            ),
                        ),
                    ),
                ),
                MenuItem(
                    item_id=MenuItemId("tacos"),
                    restaurant_id=restaurant.restaurant_id,
                    restaurant_name=restaurant.name,
                    name="Late Night Tacos",
                    price=Money.of("8.00"),
                    availability=ItemAvailability(
                        kind=AvailabilityKind.CUSTOM_TIME,
                        start_time="22:00",
                        end_time="06:00",
                    ),
                ),
            ]
        )
        self.restaurants = InMemoryRestaurantRepository([restaurant])
        self.offers = InMemoryOfferRepository(
            [
                Offer(
                    offer_id=OfferId("offer-4"),
                    title="10 Off",
                    discount_type=DiscountType.FIXED,
                    discount_value=Decimal("10"),
                    scope=AllItems(),
                    min_order_value=Money.of("30"),
                    coupon_code="TAKE10",
                ),
                Offer(
                    offer_id=OfferId("offer-6"),
                    title="Expired Deal",
                    discount_type=DiscountType.PERCENTAGE,
                    discount_value=Decimal("15"),
                    scope=AllItems(),
                    expiry=NOON - timedelta(days=1),
                ),
            ]
        )
        self.carts = InMemoryCartRepository()

    def add_item(self, item_id: str, quantity: int = 1, **customizations: list[str]):
        return AddCartItem(self.menu, self.restaurants, self.carts, self.clock).execute(
            CartId("cart_1"),
            AddCartItemRequest(item_id=item_id, quantity=quantity, customizations=customizations),
        )

    def apply(self, **kwargs: str):
        return ApplyOffer(self.offers, self.carts, self.clock).execute(
            CartId("cart_1"),
            ApplyOfferRequest(**kwargs),
        )


def test_get_cart_creates_empty_cart() -> None:
    harness = Harness()
    response = GetCart(harness.carts).execute(CartId("new"))
    assert response.items == []
    assert response.grandTotal.amount == Decimal("0.00")


def test_add_item_prices_customizations_and_persists() -> None:
    harness = Harness()

    outcome = harness.add_item("burger", quantity=2, size=["Double"])

    response = outcome.unwrap()
    assert response.items[0].unitPrice.amount == Decimal("14.00")
    assert response.subtotal.amount == Decimal("28.00")
    assert response.deliveryFee.amount == Decimal("5.99")
    assert response.grandTotal.amount == Decimal("33.99")
    stored = harness.carts.get(CartId("cart_1"))
    assert stored is not None
    assert stored.item_count == 2


def test_add_unavailable_item_is_rejected() -> None:
    harness = Harness()
    outcome = harness.add_item("tacos")
    assert outcome.rejection is not None
    assert outcome.rejection.code == RejectionCode.ITEM_UNAVAILABLE
    assert outcome.rejection.message == "This item is available from 10:00 PM."


def test_add_item_with_bad_customization_is_rejected() -> None:
    harness = Harness()
    outcome = harness.add_item("burger", size=["Triple"])
    assert outcome.rejection is not None
    assert outcome.rejection.code == RejectionCode.INVALID_CUSTOMIZATION
    assert harness.carts.get(CartId("cart_1")) is None


def test_add_unknown_item_raises() -> None:
    with pytest.raises(MenuItemNotFoundError):
        Harness().add_item("ghost")


def test_coupon_code_applies_offer() -> None:
    harness = Harness()
    harness.add_item("burger", quantity=4, size=["Regular"])

    response = harness.apply(coupon_code=" take10 ").unwrap()

    assert response.appliedOffer is not None
    assert response.appliedOffer.offerId == "offer-4"
    assert response.discountAmount.amount == Decimal("10.00")
    assert response.grandTotal.amount == Decimal("35.99")


def test_unknown_coupon_is_rejected() -> None:
    harness = Harness()
    outcome = harness.apply(coupon_code="NOPE")
    assert outcome.rejection is not None
    assert outcome.rejection.code == RejectionCode.COUPON_NOT_FOUND
    assert outcome.rejection.message == "Invalid or expired coupon code."


def test_unknown_offer_id_raises() -> None:
    with pytest.raises(OfferNotFoundError):
        Harness().apply(offer_id="offer-404")


def test_expired_offer_is_rejected() -> None:
    harness = Harness()
    harness.add_item("burger", size=["Regular"])
    outcome = harness.apply(offer_id="offer-6")
    assert outcome.rejection is not None
    assert outcome.rejection.code == RejectionCode.OFFER_EXPIRED


def test_quantity_change_revokes_offer_and_reports_why() -> None:
    harness = Harness()
    cart_response = harness.add_item("burger", quantity=4, size=["Regular"]).unwrap()
    harness.apply(offer_id="offer-4").unwrap()
    cart_item_id = CartItemId(cart_response.items[0].cartItemId)

    response = UpdateCartItemQuantity(harness.carts).execute(
        CartId("cart_1"), cart_item_id, 2
    ).unwrap()

    assert response.appliedOffer is None
    assert response.offerRevocation is not None
    assert response.offerRevocation.code == "MIN_ORDER_NOT_MET"
    assert response.grandTotal.amount == Decimal("25.99")


def test_remove_line_and_unknown_line() -> None:
    harness = Harness()
    added = harness.add_item("burger", size=["Regular"]).unwrap()
    cart_item_id = CartItemId(added.items[0].cartItemId)

    assert RemoveCartItem(harness.carts).execute(CartId("cart_1"), cart_item_id).unwrap().items == []
    missing = RemoveCartItem(harness.carts).execute(CartId("cart_1"), cart_item_id)
    assert missing.rejection is not None
    assert missing.rejection.code == RejectionCode.CART_ITEM_NOT_FOUND


def test_remove_offer() -> None:
    harness = Harness()
    harness.add_item("burger", quantity=4, size=["Regular"])
    harness.apply(offer_id="offer-4")

    removed = RemoveOffer(harness.carts).execute(CartId("cart_1")).unwrap()
    assert removed.appliedOffer is None

    again = RemoveOffer(harness.carts).execute(CartId("cart_1"))
    assert again.rejection is not None
    assert again.rejection.code == RejectionCode.NO_OFFER_APPLIED


def test_check_availability_use_case() -> None:
    harness = Harness()
    use_case = CheckAvailability(harness.menu, harness.restaurants, harness.clock)

    at_noon = use_case.execute(RestaurantId("r1"), MenuItemId("tacos"))
    harness.clock.current = NOON.replace(hour=23, minute=30)
    late = use_case.execute(RestaurantId("r1"), MenuItemId("tacos"))

    assert at_noon.isAvailable is False
    assert at_noon.code == "ITEM_NOT_YET_AVAILABLE"
    assert late.isAvailable is True


def test_check_availability_for_wrong_restaurant_raises() -> None:
    harness = Harness()
    use_case = CheckAvailability(harness.menu, harness.restaurants, harness.clock)
    with pytest.raises(MenuItemNotFoundError):
        use_case.execute(RestaurantId("r2"), MenuItemId("tacos"))
