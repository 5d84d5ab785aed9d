from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Sequence

from mop.domain.cart.items import CartItem
from mop.domain.common.ids import RestaurantId
from mop.domain.common.money import Money
from mop.domain.common.outcome import Outcome, RejectionCode
from mop.domain.offer.entities import (
    AllItems,
    AppliedOffer,
    DiscountType,
    ItemScope,
    Offer,
    RestaurantScope,
)

DELIVERY_FEE = Money.of("5.99")


def distinct_restaurants(items: Sequence[CartItem]) -> set[RestaurantId]:
    return {item.restaurant_id for item in items}


def subtotal(items: Sequence[CartItem]) -> Money:
    return Money.total(item.total_price for item in items)


def delivery_fee(items: Sequence[CartItem], fee_per_restaurant: Money = DELIVERY_FEE) -> Money:
    # One fee per vendor represented in the cart, derived from contents only.
    return fee_per_restaurant.times(len(distinct_restaurants(items)))


def applicable_subtotal(offer: Offer, items: Sequence[CartItem]) -> Money:
    scope = offer.scope
    if isinstance(scope, AllItems):
        return subtotal(items)
    if isinstance(scope, RestaurantScope):
        return subtotal([item for item in items if item.restaurant_id == scope.restaurant_id])
    if isinstance(scope, ItemScope):
        return subtotal([item for item in items if item.item_id in scope.item_ids])
    return Money.zero()


def raw_discount(offer: Offer, base: Money) -> Money:
    if offer.discount_type == DiscountType.PERCENTAGE:
        return base.percent(offer.discount_value)
    if offer.discount_type == DiscountType.FIXED:
        return Money(amount=offer.discount_value, currency=base.currency)
    return Money.zero(base.currency)


def price_offer(offer: Offer, items: Sequence[CartItem]) -> Outcome[AppliedOffer]:
    """Compute the discount ``offer`` grants on ``items``.

    Used both when an offer is first applied and every time the cart changes,
    so the two paths cannot disagree.
    """
    cart_subtotal = subtotal(items)
    if offer.min_order_value is not None and cart_subtotal < offer.min_order_value:
        return Outcome.reject(
            RejectionCode.MIN_ORDER_NOT_MET,
            f"minimum order of {offer.min_order_value.rounded().amount} not met",
        )

    base = applicable_subtotal(offer, items)
    if base.is_zero():
        return Outcome.reject(
            RejectionCode.OFFER_NOT_APPLICABLE,
            "offer does not apply to any item in the cart",
        )

    discount = raw_discount(offer, base).min(base)
    if discount.is_zero():
        return Outcome.reject(
            RejectionCode.OFFER_NOT_APPLICABLE,
            "offer gives no discount on this cart",
        )
    return Outcome.success(AppliedOffer(offer=offer, discount_amount=discount))


def check_offer(
    offer: Offer,
    items: Sequence[CartItem],
    current: AppliedOffer | None,
    now: datetime,
) -> Outcome[AppliedOffer]:
    if current is not None and current.offer_id == offer.offer_id:
        return Outcome.reject(
            RejectionCode.OFFER_ALREADY_APPLIED,
            f"offer {offer.offer_id} is already applied",
        )
    if offer.is_expired(now):
        return Outcome.reject(RejectionCode.OFFER_EXPIRED, f"offer {offer.offer_id} has expired")
    return price_offer(offer, items)


def grand_total(cart_subtotal: Money, fee: Money, discount: Money) -> Money:
    return (cart_subtotal + fee).minus_floor_zero(discount)


def online_payment_discount(cart_subtotal: Money, rate: Decimal) -> Money:
    return cart_subtotal.percent(rate)
