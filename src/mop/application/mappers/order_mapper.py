from __future__ import annotations

from datetime import datetime

from mop.application.dto.responses import (
    AddressResponse,
    CheckoutResponse,
    DelayResponse,
    LocationResponse,
    OrderResponse,
)
from mop.application.mappers.cart_mapper import to_cart_item_response, to_money_response
from mop.domain.order.delays import classify_delay
from mop.domain.order.entities import Order, RiderLocation


def to_delay_response(order: Order, now: datetime) -> DelayResponse:
    delay = classify_delay(order.status, order.placed_at, order.accepted_at, now)
    return DelayResponse(
        level=delay.level.value,
        severity=delay.severity.value,
        elapsedSeconds=max(int(delay.elapsed.total_seconds()), 0),
        message=delay.message,
    )


def to_location_response(location: RiderLocation | None) -> LocationResponse | None:
    if location is None:
        return None
    return LocationResponse(lat=location.lat, lng=location.lng, recordedAt=location.recorded_at)


def to_order_response(order: Order, now: datetime) -> OrderResponse:
    return OrderResponse(
        orderId=str(order.order_id),
        cartId=str(order.cart_id),
        status=order.status.value,
        restaurantName=order.restaurant_name,
        restaurantIds=sorted(str(restaurant_id) for restaurant_id in order.restaurant_ids),
        items=[to_cart_item_response(item) for item in order.items],
        subtotal=to_money_response(order.subtotal),
        deliveryFee=to_money_response(order.delivery_fee),
        discount=to_money_response(order.discount),
        total=to_money_response(order.total),
        appliedOfferId=str(order.applied_offer_id) if order.applied_offer_id else None,
        address=AddressResponse(
            addressId=str(order.address.address_id),
            label=order.address.label,
            details=order.address.details,
        ),
        paymentMethod=order.payment_method.value,
        deliveryOption=order.delivery_option.value,
        deliveryInstructions=order.delivery_instructions,
        placedAt=order.placed_at,
        acceptedAt=order.accepted_at,
        deliveredAt=order.delivered_at,
        riderId=str(order.rider_id) if order.rider_id else None,
        moderatorNote=order.moderator_note,
        riderLocation=to_location_response(order.rider_location),
        delay=to_delay_response(order, now),
        version=order.version,
    )


def to_checkout_response(order: Order, now: datetime) -> CheckoutResponse:
    return CheckoutResponse(
        **to_order_response(order, now).model_dump(),
        deliveryOtp=order.delivery_otp,
    )
