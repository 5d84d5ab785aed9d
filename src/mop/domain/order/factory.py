from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from mop.domain.cart import pricing
from mop.domain.cart.entities import Cart
from mop.domain.common.ids import OrderId
from mop.domain.common.money import Money
from mop.domain.common.outcome import Outcome, RejectionCode
from mop.domain.order.entities import (
    Address,
    DeliveryOption,
    Order,
    OrderStatus,
    PaymentMethod,
)

ONLINE_PAYMENT_DISCOUNT_RATE = Decimal("5")


def create_order(
    cart: Cart,
    address: Address | None,
    payment_method: PaymentMethod,
    delivery_option: DeliveryOption,
    *,
    order_id: OrderId,
    delivery_otp: str,
    now: datetime,
    delivery_instructions: str | None = None,
) -> Outcome[Order]:
    """Freeze ``cart`` into a placed order and empty it.

    The cart is only cleared when the order was built; a rejected checkout
    leaves it untouched.
    """
    if cart.is_empty():
        return Outcome.reject(RejectionCode.EMPTY_CART, "cart is empty")
    if address is None:
        return Outcome.reject(RejectionCode.ADDRESS_REQUIRED, "a delivery address is required")
    # An offer that lapsed after it was applied grants nothing at checkout.
    cart.revalidate_offer(now)

    subtotal = cart.subtotal
    fee = cart.delivery_fee if delivery_option == DeliveryOption.HOME else Money.zero()
    discount = cart.discount_amount
    if payment_method == PaymentMethod.ONLINE:
        discount = discount + pricing.online_payment_discount(subtotal, ONLINE_PAYMENT_DISCOUNT_RATE)
    # Stored amounts are rounded first so the snapshot adds up to the cent.
    subtotal, fee, discount = subtotal.rounded(), fee.rounded(), discount.rounded()
    total = pricing.grand_total(subtotal, fee, discount)

    applied = cart.applied_offer
    order = Order(
        order_id=order_id,
        cart_id=cart.cart_id,
        items=cart.items,
        subtotal=subtotal,
        delivery_fee=fee,
        discount=discount,
        total=total,
        address=address,
        payment_method=payment_method,
        delivery_option=delivery_option,
        status=OrderStatus.PLACED,
        placed_at=now,
        delivery_otp=delivery_otp,
        applied_offer_id=applied.offer_id if applied is not None else None,
        delivery_instructions=delivery_instructions,
    )
    cart.clear()
    return Outcome.success(order)
