from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Union

from mop.domain.common.ids import MenuItemId, OfferId, RestaurantId
from mop.domain.common.money import Money


class DiscountType(str, Enum):
    PERCENTAGE = "PERCENTAGE"
    FIXED = "FIXED"


@dataclass(frozen=True)
class AllItems:
    pass


@dataclass(frozen=True)
class RestaurantScope:
    restaurant_id: RestaurantId


@dataclass(frozen=True)
class ItemScope:
    item_ids: frozenset[MenuItemId]


OfferScope = Union[AllItems, RestaurantScope, ItemScope]


@dataclass(frozen=True)
class Offer:
    offer_id: OfferId
    title: str
    discount_type: DiscountType | None = None
    discount_value: Decimal = Decimal("0")
    scope: OfferScope | None = None
    min_order_value: Money | None = None
    expiry: datetime | None = None
    coupon_code: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.discount_value, Decimal):
            object.__setattr__(self, "discount_value", Decimal(str(self.discount_value)))
        if self.discount_value < 0:
            raise ValueError("discount_value must be >= 0")
        if self.discount_type == DiscountType.PERCENTAGE and self.discount_value > 100:
            raise ValueError("percentage discount must be <= 100")

    def is_expired(self, now: datetime) -> bool:
        return self.expiry is not None and self.expiry <= now


@dataclass(frozen=True)
class AppliedOffer:
    offer: Offer
    discount_amount: Money

    @property
    def offer_id(self) -> OfferId:
        return self.offer.offer_id
