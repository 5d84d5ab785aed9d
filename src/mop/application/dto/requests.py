from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator

from mop.domain.order.entities import ActorRole, DeliveryOption, OrderStatus, PaymentMethod


def _to_camel(value: str) -> str:
    parts = value.split("_")
    return parts[0] + "".join(part.capitalize() for part in parts[1:])


class CamelBaseModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=_to_camel,
        populate_by_name=True,
    )


class AddCartItemRequest(CamelBaseModel):
    item_id: str
    quantity: int = Field(default=1, ge=1)
    # option id -> chosen choice names
    customizations: dict[str, list[str]] = Field(default_factory=dict)


class UpdateCartItemRequest(CamelBaseModel):
    quantity: int = Field(ge=0)


class ApplyOfferRequest(CamelBaseModel):
    offer_id: str | None = None
    coupon_code: str | None = None

    @model_validator(mode="after")
    def _exactly_one_reference(self) -> ApplyOfferRequest:
        if (self.offer_id is None) == (self.coupon_code is None):
            raise ValueError("provide exactly one of offerId or couponCode")
        return self


class AddressRequest(CamelBaseModel):
    address_id: str
    label: str
    details: str = Field(min_length=1)


class CheckoutRequest(CamelBaseModel):
    address: AddressRequest | None = None
    payment_method: PaymentMethod = PaymentMethod.CASH_ON_DELIVERY
    delivery_option: DeliveryOption = DeliveryOption.HOME
    delivery_instructions: str | None = None


class ChangeOrderStatusRequest(CamelBaseModel):
    actor_role: ActorRole
    actor_id: str
    status: OrderStatus


class OrderNoteRequest(CamelBaseModel):
    moderator_id: str
    note: str


class ClaimOrderRequest(CamelBaseModel):
    rider_id: str


class CompleteDeliveryRequest(CamelBaseModel):
    rider_id: str
    otp: str = Field(pattern=r"^\d{4}$")


class RiderLocationRequest(CamelBaseModel):
    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180)
