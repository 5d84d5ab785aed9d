from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any

from mop.domain.cart.entities import Cart
from mop.domain.cart.items import CartItem
from mop.domain.common.ids import CartId, CartItemId, MenuItemId, OfferId, RestaurantId
from mop.domain.common.money import Money
from mop.domain.menu.entities import (
    AvailabilityKind,
    CustomizationChoice,
    CustomizationOption,
    ItemAvailability,
    MenuItem,
    SelectedCustomization,
    SelectionMode,
)
from mop.domain.offer.entities import (
    AllItems,
    AppliedOffer,
    DiscountType,
    ItemScope,
    Offer,
    OfferScope,
    RestaurantScope,
)


def money_to_document(money: Money) -> dict[str, str]:
    return {"amount": str(money.amount), "currency": money.currency}


def money_from_document(document: dict[str, Any]) -> Money:
    return Money(amount=Decimal(document["amount"]), currency=document["currency"])


def _choice_to_document(choice: CustomizationChoice) -> dict[str, str]:
    return {"name": choice.name, "priceDelta": str(choice.price_delta)}


def _choice_from_document(document: dict[str, Any]) -> CustomizationChoice:
    return CustomizationChoice(name=document["name"], price_delta=Decimal(document["priceDelta"]))


def menu_item_to_document(item: MenuItem) -> dict[str, Any]:
    availability = item.availability
    return {
        "itemId": str(item.item_id),
        "restaurantId": str(item.restaurant_id),
        "restaurantName": item.restaurant_name,
        "name": item.name,
        "price": money_to_document(item.price),
        "category": item.category,
        "availability": (
            {
                "kind": availability.kind.value,
                "startTime": availability.start_time,
                "endTime": availability.end_time,
            }
            if availability is not None
            else None
        ),
        "customizationOptions": [
            {
                "optionId": option.option_id,
                "name": option.name,
                "selectionMode": option.selection_mode.value,
                "required": option.required,
                "choices": [_choice_to_document(choice) for choice in option.choices],
            }
            for option in item.customization_options
        ],
    }


def menu_item_from_document(document: dict[str, Any]) -> MenuItem:
    availability = document.get("availability")
    return MenuItem(
        item_id=MenuItemId(document["itemId"]),
        restaurant_id=RestaurantId(document["restaurantId"]),
        restaurant_name=document.get("restaurantName", ""),
        name=document["name"],
        price=money_from_document(document["price"]),
        category=document.get("category"),
        availability=(
            ItemAvailability(
                kind=AvailabilityKind(availability["kind"]),
                start_time=availability.get("startTime"),
                end_time=availability.get("endTime"),
            )
            if availability
            else None
        ),
        customization_options=tuple(
            CustomizationOption(
                option_id=option["optionId"],
                name=option["name"],
                selection_mode=SelectionMode(option["selectionMode"]),
                required=bool(option["required"]),
                choices=tuple(_choice_from_document(choice) for choice in option["choices"]),
            )
            for option in document.get("customizationOptions", [])
        ),
    )


def cart_item_to_document(item: CartItem) -> dict[str, Any]:
    return {
        "cartItemId": str(item.cart_item_id),
        "quantity": item.quantity,
        "baseItem": menu_item_to_document(item.base_item),
        "selectedCustomizations": [
            {
                "optionId": selection.option_id,
                "optionName": selection.option_name,
                "choices": [_choice_to_document(choice) for choice in selection.choices],
            }
            for selection in item.selected_customizations
        ],
    }


def cart_item_from_document(document: dict[str, Any]) -> CartItem:
    return CartItem(
        cart_item_id=CartItemId(document["cartItemId"]),
        base_item=menu_item_from_document(document["baseItem"]),
        quantity=int(document["quantity"]),
        selected_customizations=tuple(
            SelectedCustomization(
                option_id=selection["optionId"],
                option_name=selection["optionName"],
                choices=tuple(_choice_from_document(choice) for choice in selection["choices"]),
            )
            for selection in document.get("selectedCustomizations", [])
        ),
    )


def _scope_to_document(scope: OfferScope | None) -> dict[str, Any] | None:
    if scope is None:
        return None
    if isinstance(scope, RestaurantScope):
        return {"type": "RESTAURANT", "restaurantId": str(scope.restaurant_id)}
    if isinstance(scope, ItemScope):
        return {"type": "ITEMS", "itemIds": sorted(str(item_id) for item_id in scope.item_ids)}
    return {"type": "ALL"}


def _scope_from_document(document: dict[str, Any] | None) -> OfferScope | None:
    if document is None:
        return None
    scope_type = document["type"]
    if scope_type == "RESTAURANT":
        return RestaurantScope(restaurant_id=RestaurantId(document["restaurantId"]))
    if scope_type == "ITEMS":
        return ItemScope(item_ids=frozenset(MenuItemId(item_id) for item_id in document["itemIds"]))
    if scope_type == "ALL":
        return AllItems()
    raise ValueError(f"unknown offer scope type: {scope_type}")


def offer_to_document(offer: Offer) -> dict[str, Any]:
    return {
        "offerId": str(offer.offer_id),
        "title": offer.title,
        "discountType": offer.discount_type.value if offer.discount_type else None,
        "discountValue": str(offer.discount_value),
        "scope": _scope_to_document(offer.scope),
        "minOrderValue": (
            money_to_document(offer.min_order_value) if offer.min_order_value else None
        ),
        "expiry": offer.expiry.isoformat() if offer.expiry else None,
        "couponCode": offer.coupon_code,
    }


def offer_from_document(document: dict[str, Any]) -> Offer:
    discount_type = document.get("discountType")
    min_order_value = document.get("minOrderValue")
    expiry = document.get("expiry")
    return Offer(
        offer_id=OfferId(document["offerId"]),
        title=document["title"],
        discount_type=DiscountType(discount_type) if discount_type else None,
        discount_value=Decimal(document.get("discountValue", "0")),
        scope=_scope_from_document(document.get("scope")),
        min_order_value=money_from_document(min_order_value) if min_order_value else None,
        expiry=datetime.fromisoformat(expiry) if expiry else None,
        coupon_code=document.get("couponCode"),
    )


def cart_to_document(cart: Cart) -> dict[str, Any]:
    applied = cart.applied_offer
    return {
        "cartId": str(cart.cart_id),
        "items": [cart_item_to_document(item) for item in cart.items],
        "appliedOffer": (
            {
                "offer": offer_to_document(applied.offer),
                "discountAmount": money_to_document(applied.discount_amount),
            }
            if applied is not None
            else None
        ),
    }


def cart_from_document(document: dict[str, Any]) -> Cart:
    applied = document.get("appliedOffer")
    return Cart(
        cart_id=CartId(document["cartId"]),
        items=[cart_item_from_document(item) for item in document.get("items", [])],
        applied_offer=(
            AppliedOffer(
                offer=offer_from_document(applied["offer"]),
                discount_amount=money_from_document(applied["discountAmount"]),
            )
            if applied
            else None
        ),
    )
