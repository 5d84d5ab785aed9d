from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field


class MoneyResponse(BaseModel):
    amount: Decimal
    currency: str


class RejectionResponse(BaseModel):
    code: str
    message: str


class AvailabilityResponse(BaseModel):
    itemId: str
    restaurantId: str
    isAvailable: bool
    code: str
    reason: str


class CustomizationChoiceResponse(BaseModel):
    name: str
    priceDelta: Decimal


class SelectedCustomizationResponse(BaseModel):
    optionId: str
    optionName: str
    choices: list[CustomizationChoiceResponse] = Field(default_factory=list)


class CartItemResponse(BaseModel):
    cartItemId: str
    itemId: str
    restaurantId: str
    restaurantName: str
    name: str
    quantity: int
    unitPrice: MoneyResponse
    totalPrice: MoneyResponse
    customizations: list[SelectedCustomizationResponse] = Field(default_factory=list)


class AppliedOfferResponse(BaseModel):
    offerId: str
    title: str
    discountAmount: MoneyResponse


class CartResponse(BaseModel):
    cartId: str
    items: list[CartItemResponse] = Field(default_factory=list)
    subtotal: MoneyResponse
    deliveryFee: MoneyResponse
    discountAmount: MoneyResponse
    grandTotal: MoneyResponse
    numberOfRestaurants: int
    itemCount: int
    appliedOffer: AppliedOfferResponse | None = None
    offerRevocation: RejectionResponse | None = None


class AddressResponse(BaseModel):
    addressId: str
    label: str
    details: str


class DelayResponse(BaseModel):
    level: str
    severity: str
    elapsedSeconds: int
    message: str


class LocationResponse(BaseModel):
    lat: float
    lng: float
    recordedAt: datetime


class OrderResponse(BaseModel):
    orderId: str
    cartId: str
    status: str
    restaurantName: str
    restaurantIds: list[str] = Field(default_factory=list)
    items: list[CartItemResponse] = Field(default_factory=list)
    subtotal: MoneyResponse
    deliveryFee: MoneyResponse
    discount: MoneyResponse
    total: MoneyResponse
    appliedOfferId: str | None = None
    address: AddressResponse
    paymentMethod: str
    deliveryOption: str
    deliveryInstructions: str | None = None
    placedAt: datetime
    acceptedAt: datetime | None = None
    deliveredAt: datetime | None = None
    riderId: str | None = None
    moderatorNote: str | None = None
    riderLocation: LocationResponse | None = None
    delay: DelayResponse
    version: int


class CheckoutResponse(OrderResponse):
    deliveryOtp: str


class OrderListResponse(BaseModel):
    orders: list[OrderResponse] = Field(default_factory=list)
