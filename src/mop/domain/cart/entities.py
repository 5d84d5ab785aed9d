from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable
from uuid import uuid4

from mop.domain.cart import pricing
from mop.domain.cart.items import CartItem
from mop.domain.common.ids import CartId, CartItemId
from mop.domain.common.money import Money
from mop.domain.common.outcome import Outcome, Rejection, RejectionCode
from mop.domain.menu.entities import MenuItem, SelectedCustomization
from mop.domain.offer.entities import AppliedOffer, Offer


@dataclass(frozen=True)
class CartUpdate:
    """What a cart mutation did.

    ``rejection`` is set when the mutation itself was refused. ``revoked_offer``
    and ``revocation`` are set when the mutation succeeded but the applied
    offer no longer holds and was removed.
    """

    rejection: Rejection | None = None
    revoked_offer: AppliedOffer | None = None
    revocation: Rejection | None = None

    @property
    def ok(self) -> bool:
        return self.rejection is None


@dataclass(frozen=True)
class CartTotals:
    subtotal: Money
    delivery_fee: Money
    discount_amount: Money
    grand_total: Money
    number_of_restaurants: int
    item_count: int


def new_cart_item_id() -> CartItemId:
    return CartItemId(f"cit_{uuid4().hex[:12]}")


class Cart:
    """Line items and the single applied offer for one checkout session."""

    def __init__(
        self,
        cart_id: CartId,
        items: Iterable[CartItem] = (),
        applied_offer: AppliedOffer | None = None,
        fee_per_restaurant: Money = pricing.DELIVERY_FEE,
    ) -> None:
        self.cart_id = cart_id
        self._items: list[CartItem] = list(items)
        self._applied_offer = applied_offer
        self._fee_per_restaurant = fee_per_restaurant

    @property
    def items(self) -> tuple[CartItem, ...]:
        return tuple(self._items)

    @property
    def applied_offer(self) -> AppliedOffer | None:
        return self._applied_offer

    def snapshot(self) -> Cart:
        return Cart(
            cart_id=self.cart_id,
            items=self._items,
            applied_offer=self._applied_offer,
            fee_per_restaurant=self._fee_per_restaurant,
        )

    def is_empty(self) -> bool:
        return not self._items

    def get_item(self, cart_item_id: CartItemId) -> CartItem | None:
        for item in self._items:
            if item.cart_item_id == cart_item_id:
                return item
        return None

    def add_item(
        self,
        menu_item: MenuItem,
        quantity: int = 1,
        customizations: tuple[SelectedCustomization, ...] = (),
        cart_item_id: CartItemId | None = None,
    ) -> CartUpdate:
        self._items.append(
            CartItem(
                cart_item_id=cart_item_id or new_cart_item_id(),
                base_item=menu_item,
                quantity=quantity,
                selected_customizations=customizations,
            )
        )
        return self._after_mutation()

    def remove_item(self, cart_item_id: CartItemId) -> CartUpdate:
        if self.get_item(cart_item_id) is None:
            return _missing(cart_item_id)
        self._items = [item for item in self._items if item.cart_item_id != cart_item_id]
        return self._after_mutation()

    def set_quantity(self, cart_item_id: CartItemId, quantity: int) -> CartUpdate:
        if quantity < 0:
            raise ValueError("quantity must be >= 0")
        if self.get_item(cart_item_id) is None:
            return _missing(cart_item_id)
        if quantity == 0:
            return self.remove_item(cart_item_id)
        self._items = [
            item.with_quantity(quantity) if item.cart_item_id == cart_item_id else item
            for item in self._items
        ]
        return self._after_mutation()

    def apply_offer(self, offer: Offer, now: datetime) -> Outcome[AppliedOffer]:
        outcome = pricing.check_offer(offer, self._items, self._applied_offer, now)
        if outcome.ok:
            self._applied_offer = outcome.value
        return outcome

    def remove_offer(self) -> AppliedOffer | None:
        removed, self._applied_offer = self._applied_offer, None
        return removed

    def revalidate_offer(self, now: datetime | None = None) -> Rejection | None:
        """Re-price the applied offer against current contents.

        With ``now`` the offer is also dropped once it has expired. Returns the
        reason when the offer had to be dropped.
        """
        if self._applied_offer is None:
            return None
        offer = self._applied_offer.offer
        if now is not None and offer.is_expired(now):
            self._applied_offer = None
            return Rejection(
                code=RejectionCode.OFFER_EXPIRED,
                message=f"offer {offer.offer_id} has expired",
            )
        outcome = pricing.price_offer(offer, self._items)
        if outcome.ok:
            self._applied_offer = outcome.value
            return None
        self._applied_offer = None
        return outcome.rejection

    def clear(self) -> None:
        self._items = []
        self._applied_offer = None

    @property
    def subtotal(self) -> Money:
        return pricing.subtotal(self._items)

    @property
    def delivery_fee(self) -> Money:
        return pricing.delivery_fee(self._items, self._fee_per_restaurant)

    @property
    def discount_amount(self) -> Money:
        if self._applied_offer is None:
            return Money.zero()
        return self._applied_offer.discount_amount

    @property
    def grand_total(self) -> Money:
        return pricing.grand_total(self.subtotal, self.delivery_fee, self.discount_amount)

    @property
    def number_of_restaurants(self) -> int:
        return len(pricing.distinct_restaurants(self._items))

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self._items)

    def totals(self) -> CartTotals:
        return CartTotals(
            subtotal=self.subtotal,
            delivery_fee=self.delivery_fee,
            discount_amount=self.discount_amount,
            grand_total=self.grand_total,
            number_of_restaurants=self.number_of_restaurants,
            item_count=self.item_count,
        )

    def _after_mutation(self) -> CartUpdate:
        previous = self._applied_offer
        revocation = self.revalidate_offer()
        if revocation is None:
            return CartUpdate()
        return CartUpdate(revoked_offer=previous, revocation=revocation)


def _missing(cart_item_id: CartItemId) -> CartUpdate:
    return CartUpdate(
        rejection=Rejection(
            code=RejectionCode.CART_ITEM_NOT_FOUND,
            message=f"cart item {cart_item_id} not found",
        )
    )
