from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class RejectionCode(str, Enum):
    ITEM_UNAVAILABLE = "ITEM_UNAVAILABLE"
    INVALID_CUSTOMIZATION = "INVALID_CUSTOMIZATION"
    CART_ITEM_NOT_FOUND = "CART_ITEM_NOT_FOUND"
    OFFER_ALREADY_APPLIED = "OFFER_ALREADY_APPLIED"
    OFFER_EXPIRED = "OFFER_EXPIRED"
    MIN_ORDER_NOT_MET = "MIN_ORDER_NOT_MET"
    OFFER_NOT_APPLICABLE = "OFFER_NOT_APPLICABLE"
    NO_OFFER_APPLIED = "NO_OFFER_APPLIED"
    COUPON_NOT_FOUND = "COUPON_NOT_FOUND"
    EMPTY_CART = "EMPTY_CART"
    ADDRESS_REQUIRED = "ADDRESS_REQUIRED"
    TRANSITION_NOT_ALLOWED = "TRANSITION_NOT_ALLOWED"
    ORDER_NOT_READY_FOR_PICKUP = "ORDER_NOT_READY_FOR_PICKUP"
    ORDER_ALREADY_CLAIMED = "ORDER_ALREADY_CLAIMED"
    RIDER_AT_CAPACITY = "RIDER_AT_CAPACITY"
    RIDER_NOT_ASSIGNED = "RIDER_NOT_ASSIGNED"
    INVALID_DELIVERY_OTP = "INVALID_DELIVERY_OTP"


@dataclass(frozen=True)
class Rejection:
    code: RejectionCode
    message: str


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Result of an operation that can be refused by a business rule.

    Callers branch on ``ok``; a refusal is data, not an exception.
    """

    value: T | None = None
    rejection: Rejection | None = None

    @property
    def ok(self) -> bool:
        return self.rejection is None

    @classmethod
    def success(cls, value: T) -> Outcome[T]:
        return cls(value=value)

    @classmethod
    def reject(cls, code: RejectionCode, message: str) -> Outcome[T]:
        return cls(rejection=Rejection(code=code, message=message))

    def unwrap(self) -> T:
        if self.rejection is not None:
            raise ValueError(f"outcome was rejected: {self.rejection.code.value}")
        if self.value is None:
            raise ValueError("outcome has no value")
        return self.value
