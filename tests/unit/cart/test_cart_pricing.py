from __future__ import annotations

import sys
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[3] / "src"))

from mop.domain.cart.entities import Cart
from mop.domain.common.ids import CartId, CartItemId, MenuItemId, OfferId, RestaurantId
from mop.domain.common.money import Money
from mop.domain.common.outcome import RejectionCode
from mop.domain.menu.entities import MenuItem
from mop.domain.offer.entities import (
    AllItems,
    DiscountType,
    ItemScope,
    Offer,
    RestaurantScope,
)

NOW = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


def _menu_item(item_id: str, restaurant_id: str, price: str) -> MenuItem:
    return MenuItem(
        item_id=MenuItemId(item_id),
        restaurant_id=RestaurantId(restaurant_id),
        name=f"Item {item_id}",
        price=Money.of(price),
    )


def _offer(
    offer_id: str = "off_1",
    discount_type: DiscountType | None = DiscountType.FIXED,
    value: str = "10",
    scope=None,
    min_order: str | None = None,
    expiry: datetime | None = None,
) -> Offer:
    return Offer(
        offer_id=OfferId(offer_id),
        title=f"Offer {offer_id}",
        discount_type=discount_type,
        discount_value=Decimal(value),
        scope=scope if scope is not None else AllItems(),
        min_order_value=Money.of(min_order) if min_order is not None else None,
        expiry=expiry,
    )


def test_empty_cart_totals_are_zero() -> None:
    cart = Cart(cart_id=CartId("c1"))
    totals = cart.totals()
    assert totals.subtotal.is_zero()
    assert totals.delivery_fee.is_zero()
    assert totals.grand_total.is_zero()
    assert totals.number_of_restaurants == 0
    assert totals.item_count == 0


def test_delivery_fee_is_charged_once_per_restaurant() -> None:
    cart = Cart(cart_id=CartId("c1"))
    cart.add_item(_menu_item("a", "r1", "10.00"))
    assert cart.delivery_fee == Money.of("5.99")

    cart.add_item(_menu_item("b", "r1", "4.00"), quantity=2)
    assert cart.delivery_fee == Money.of("5.99")

    update = cart.add_item(_menu_item("c", "r2", "3.00"), cart_item_id=CartItemId("cit_r2"))
    assert update.ok
    assert cart.delivery_fee == Money.of("11.98")
    assert cart.number_of_restaurants == 2
    assert cart.item_count == 4

    cart.remove_item(CartItemId("cit_r2"))
    assert cart.delivery_fee == Money.of("5.99")


def test_fixed_offer_and_revocation_example() -> None:
    cart = Cart(cart_id=CartId("c1"))
    cart.add_item(_menu_item("a", "r1", "5.00"), quantity=8, cart_item_id=CartItemId("cit_a"))
    assert cart.subtotal == Money.of("40.00")

    outcome = cart.apply_offer(_offer(min_order="20"), NOW)
    assert outcome.ok
    assert cart.discount_amount == Money.of("10")
    assert cart.grand_total.rounded() == Money.of("35.99")

    update = cart.set_quantity(CartItemId("cit_a"), 3)
    assert update.revocation is not None
    assert cart.applied_offer is None
    assert cart.subtotal == Money.of("15.00")
    assert cart.grand_total.rounded() == Money.of("20.99")


def test_dropping_below_minimum_revokes_offer_with_reason() -> None:
    cart = Cart(cart_id=CartId("c1"))
    cart.add_item(_menu_item("a", "r1", "20.00"), quantity=2, cart_item_id=CartItemId("cit_a"))
    cart.apply_offer(_offer(min_order="30"), NOW)

    update = cart.set_quantity(CartItemId("cit_a"), 1)

    assert update.ok
    assert update.revocation is not None
    assert update.revocation.code == RejectionCode.MIN_ORDER_NOT_MET
    assert update.revoked_offer is not None
    assert cart.applied_offer is None
    assert cart.discount_amount.is_zero()


def test_percentage_discount_is_repriced_after_changes() -> None:
    cart = Cart(cart_id=CartId("c1"))
    cart.add_item(_menu_item("a", "r1", "10.00"), cart_item_id=CartItemId("cit_a"))
    cart.apply_offer(_offer(discount_type=DiscountType.PERCENTAGE, value="50"), NOW)
    assert cart.discount_amount == Money.of("5")

    cart.set_quantity(CartItemId("cit_a"), 3)
    assert cart.discount_amount == Money.of("15")


def test_fixed_discount_is_clamped_to_applicable_subtotal() -> None:
    cart = Cart(cart_id=CartId("c1"))
    cart.add_item(_menu_item("a", "r1", "4.00"))
    cart.apply_offer(_offer(value="10"), NOW)
    assert cart.discount_amount == Money.of("4.00")
    assert cart.grand_total == Money.of("5.99")


def test_restaurant_scoped_offer_only_discounts_that_restaurant() -> None:
    cart = Cart(cart_id=CartId("c1"))
    cart.add_item(_menu_item("a", "r1", "10.00"))
    cart.add_item(_menu_item("b", "r2", "30.00"))
    offer = _offer(
        discount_type=DiscountType.PERCENTAGE,
        value="20",
        scope=RestaurantScope(restaurant_id=RestaurantId("r1")),
    )
    assert cart.apply_offer(offer, NOW).ok
    assert cart.discount_amount == Money.of("2")


def test_item_scoped_offer_without_matching_items_is_not_applicable() -> None:
    cart = Cart(cart_id=CartId("c1"))
    cart.add_item(_menu_item("a", "r1", "10.00"))
    offer = _offer(scope=ItemScope(item_ids=frozenset({MenuItemId("zzz")})))
    outcome = cart.apply_offer(offer, NOW)
    assert outcome.rejection is not None
    assert outcome.rejection.code == RejectionCode.OFFER_NOT_APPLICABLE
    assert cart.applied_offer is None


def test_item_scoped_offer_is_revoked_when_its_item_leaves() -> None:
    cart = Cart(cart_id=CartId("c1"))
    cart.add_item(_menu_item("a", "r1", "10.00"), cart_item_id=CartItemId("cit_a"))
    cart.add_item(_menu_item("b", "r1", "10.00"))
    cart.apply_offer(_offer(value="2", scope=ItemScope(item_ids=frozenset({MenuItemId("a")}))), NOW)

    update = cart.remove_item(CartItemId("cit_a"))

    assert update.revocation is not None
    assert update.revocation.code == RejectionCode.OFFER_NOT_APPLICABLE


def test_offer_rejections() -> None:
    cart = Cart(cart_id=CartId("c1"))
    cart.add_item(_menu_item("a", "r1", "10.00"))

    expired = _offer(offer_id="old", expiry=NOW - timedelta(days=1))
    assert cart.apply_offer(expired, NOW).rejection.code == RejectionCode.OFFER_EXPIRED

    too_small = _offer(offer_id="big", min_order="50")
    assert cart.apply_offer(too_small, NOW).rejection.code == RejectionCode.MIN_ORDER_NOT_MET

    no_discount = _offer(offer_id="free", discount_type=None, value="0")
    assert cart.apply_offer(no_discount, NOW).rejection.code == RejectionCode.OFFER_NOT_APPLICABLE

    applied = _offer(offer_id="ok", value="1")
    assert cart.apply_offer(applied, NOW).ok
    again = cart.apply_offer(applied, NOW)
    assert again.rejection.code == RejectionCode.OFFER_ALREADY_APPLIED


def test_applying_a_different_offer_replaces_the_current_one() -> None:
    cart = Cart(cart_id=CartId("c1"))
    cart.add_item(_menu_item("a", "r1", "10.00"))
    cart.apply_offer(_offer(offer_id="first", value="1"), NOW)
    cart.apply_offer(_offer(offer_id="second", value="3"), NOW)
    assert cart.applied_offer is not None
    assert cart.applied_offer.offer_id == "second"
    assert cart.discount_amount == Money.of("3")


def test_rejected_offer_keeps_existing_one() -> None:
    cart = Cart(cart_id=CartId("c1"))
    cart.add_item(_menu_item("a", "r1", "10.00"))
    cart.apply_offer(_offer(offer_id="first", value="1"), NOW)
    cart.apply_offer(_offer(offer_id="big", min_order="100"), NOW)
    assert cart.applied_offer is not None
    assert cart.applied_offer.offer_id == "first"


def test_grand_total_never_negative() -> None:
    cart = Cart(cart_id=CartId("c1"))
    cart.add_item(_menu_item("a", "r1", "1.00"))
    cart.apply_offer(_offer(discount_type=DiscountType.PERCENTAGE, value="100"), NOW)
    assert cart.grand_total == Money.of("5.99")
    assert cart.grand_total.amount >= 0


def test_set_quantity_zero_removes_line() -> None:
    cart = Cart(cart_id=CartId("c1"))
    cart.add_item(_menu_item("a", "r1", "10.00"), cart_item_id=CartItemId("cit_a"))
    assert cart.set_quantity(CartItemId("cit_a"), 0).ok
    assert cart.is_empty()


def test_set_quantity_negative_raises() -> None:
    cart = Cart(cart_id=CartId("c1"))
    cart.add_item(_menu_item("a", "r1", "10.00"), cart_item_id=CartItemId("cit_a"))
    with pytest.raises(ValueError):
        cart.set_quantity(CartItemId("cit_a"), -1)


def test_unknown_cart_item_is_a_rejection() -> None:
    cart = Cart(cart_id=CartId("c1"))
    update = cart.set_quantity(CartItemId("nope"), 2)
    assert update.rejection is not None
    assert update.rejection.code == RejectionCode.CART_ITEM_NOT_FOUND
    assert cart.remove_item(CartItemId("nope")).rejection.code == RejectionCode.CART_ITEM_NOT_FOUND


def test_add_item_requires_positive_quantity() -> None:
    cart = Cart(cart_id=CartId("c1"))
    with pytest.raises(ValueError):
        cart.add_item(_menu_item("a", "r1", "10.00"), quantity=0)


def test_remove_offer_returns_previous_offer() -> None:
    cart = Cart(cart_id=CartId("c1"))
    cart.add_item(_menu_item("a", "r1", "10.00"))
    cart.apply_offer(_offer(value="1"), NOW)
    removed = cart.remove_offer()
    assert removed is not None
    assert cart.remove_offer() is None


def test_revalidation_drops_an_offer_that_has_since_expired() -> None:
    cart = Cart(cart_id=CartId("c9"))
    cart.add_item(_menu_item("a", "r1", "30.00"))
    assert cart.apply_offer(_offer(expiry=NOW + timedelta(hours=1)), NOW).ok

    assert cart.revalidate_offer(NOW + timedelta(minutes=30)) is None
    assert cart.discount_amount == Money.of("10")

    reason = cart.revalidate_offer(NOW + timedelta(hours=2))

    assert reason is not None
    assert reason.code == RejectionCode.OFFER_EXPIRED
    assert cart.applied_offer is None
    assert cart.discount_amount.is_zero()
