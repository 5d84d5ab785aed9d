from __future__ import annotations

from mop.application.dto.responses import (
    AppliedOfferResponse,
    CartItemResponse,
    CartResponse,
    CustomizationChoiceResponse,
    MoneyResponse,
    RejectionResponse,
    SelectedCustomizationResponse,
)
from mop.domain.cart.entities import Cart
from mop.domain.cart.items import CartItem
from mop.domain.common.money import Money
from mop.domain.common.outcome import Rejection


def to_money_response(money: Money) -> MoneyResponse:
    rounded = money.rounded()
    return MoneyResponse(amount=rounded.amount, currency=rounded.currency)


def to_rejection_response(rejection: Rejection) -> RejectionResponse:
    return RejectionResponse(code=rejection.code.value, message=rejection.message)


def to_cart_item_response(item: CartItem) -> CartItemResponse:
    return CartItemResponse(
        cartItemId=str(item.cart_item_id),
        itemId=str(item.item_id),
        restaurantId=str(item.restaurant_id),
        restaurantName=item.base_item.restaurant_name,
        name=item.base_item.name,
        quantity=item.quantity,
        unitPrice=to_money_response(item.unit_price),
        totalPrice=to_money_response(item.total_price),
        customizations=[
            SelectedCustomizationResponse(
                optionId=selection.option_id,
                optionName=selection.option_name,
                choices=[
                    CustomizationChoiceResponse(name=choice.name, priceDelta=choice.price_delta)
                    for choice in selection.choices
                ],
            )
            for selection in item.selected_customizations
        ],
    )


def to_cart_response(cart: Cart, offer_revocation: Rejection | None = None) -> CartResponse:
    totals = cart.totals()
    applied = cart.applied_offer
    return CartResponse(
        cartId=str(cart.cart_id),
        items=[to_cart_item_response(item) for item in cart.items],
        subtotal=to_money_response(totals.subtotal),
        deliveryFee=to_money_response(totals.delivery_fee),
        discountAmount=to_money_response(totals.discount_amount),
        grandTotal=to_money_response(totals.grand_total),
        numberOfRestaurants=totals.number_of_restaurants,
        itemCount=totals.item_count,
        appliedOffer=(
            AppliedOfferResponse(
                offerId=str(applied.offer_id),
                title=applied.offer.title,
                discountAmount=to_money_response(applied.discount_amount),
            )
            if applied is not None
            else None
        ),
        offerRevocation=(
            to_rejection_response(offer_revocation) if offer_revocation is not None else None
        ),
    )
