from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from typing import Mapping

from mop.domain.cart.items import CartItem
from mop.domain.common.ids import AddressId, CartId, OfferId, OrderId, RestaurantId, RiderId
from mop.domain.common.money import Money
from mop.domain.common.outcome import Outcome, RejectionCode

MAX_ACTIVE_CLAIMS_PER_RIDER = 2


class OrderStatus(str, Enum):
    PENDING = "Pending"
    PLACED = "Placed"
    PREPARING = "Preparing"
    ON_ITS_WAY = "On its way"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES


TERMINAL_STATUSES = frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED})


class ActorRole(str, Enum):
    CUSTOMER = "CUSTOMER"
    VENDOR = "VENDOR"
    MODERATOR = "MODERATOR"
    RIDER = "RIDER"


@dataclass(frozen=True)
class Actor:
    role: ActorRole
    actor_id: str


class PaymentMethod(str, Enum):
    CASH_ON_DELIVERY = "cod"
    ONLINE = "online"


class DeliveryOption(str, Enum):
    HOME = "home"
    PICKUP = "pickup"


@dataclass(frozen=True)
class Address:
    address_id: AddressId
    label: str
    details: str

    def __post_init__(self) -> None:
        if not self.details.strip():
            raise ValueError("address details must be non-empty")


@dataclass(frozen=True)
class RiderLocation:
    lat: float
    lng: float
    recorded_at: datetime

    def __post_init__(self) -> None:
        if not -90 <= self.lat <= 90:
            raise ValueError("lat must be between -90 and 90")
        if not -180 <= self.lng <= 180:
            raise ValueError("lng must be between -180 and 180")


_VENDOR_TRANSITIONS: Mapping[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PLACED: frozenset({OrderStatus.PREPARING, OrderStatus.CANCELLED}),
    OrderStatus.PREPARING: frozenset({OrderStatus.ON_ITS_WAY}),
}

ALLOWED_TRANSITIONS: Mapping[ActorRole, Mapping[OrderStatus, frozenset[OrderStatus]]] = {
    ActorRole.CUSTOMER: {},
    ActorRole.VENDOR: _VENDOR_TRANSITIONS,
    ActorRole.MODERATOR: {
        OrderStatus.PENDING: frozenset({OrderStatus.CANCELLED}),
        OrderStatus.PLACED: frozenset({OrderStatus.PREPARING, OrderStatus.CANCELLED}),
        OrderStatus.PREPARING: frozenset({OrderStatus.ON_ITS_WAY, OrderStatus.CANCELLED}),
    },
    ActorRole.RIDER: {
        OrderStatus.ON_ITS_WAY: frozenset({OrderStatus.DELIVERED}),
    },
}


def can_transition(role: ActorRole, current: OrderStatus, target: OrderStatus) -> bool:
    return target in ALLOWED_TRANSITIONS[role].get(current, frozenset())


def _can_set(role: ActorRole, target: OrderStatus) -> bool:
    return any(target in targets for targets in ALLOWED_TRANSITIONS[role].values())


@dataclass(frozen=True)
class Order:
    order_id: OrderId
    cart_id: CartId
    items: tuple[CartItem, ...]
    subtotal: Money
    delivery_fee: Money
    discount: Money
    total: Money
    address: Address
    payment_method: PaymentMethod
    delivery_option: DeliveryOption
    status: OrderStatus
    placed_at: datetime
    delivery_otp: str
    applied_offer_id: OfferId | None = None
    delivery_instructions: str | None = None
    accepted_at: datetime | None = None
    delivered_at: datetime | None = None
    rider_id: RiderId | None = None
    moderator_note: str | None = None
    rider_location: RiderLocation | None = None
    version: int = 1

    def __post_init__(self) -> None:
        if not self.items:
            raise ValueError("order must contain at least one item")
        if self.version < 1:
            raise ValueError("version must be >= 1")
        if self.delivery_option == DeliveryOption.PICKUP and not self.delivery_fee.is_zero():
            raise ValueError("pickup orders carry no delivery fee")

    @property
    def restaurant_ids(self) -> frozenset[RestaurantId]:
        return frozenset(item.restaurant_id for item in self.items)

    @property
    def restaurant_name(self) -> str:
        names: list[str] = []
        for item in self.items:
            name = item.base_item.restaurant_name or str(item.restaurant_id)
            if name not in names:
                names.append(name)
        return ", ".join(names)

    @property
    def is_active_claim(self) -> bool:
        return self.rider_id is not None and not self.status.is_terminal

    def transition(
        self,
        actor: Actor,
        target: OrderStatus,
        now: datetime,
        otp: str | None = None,
    ) -> Outcome[Order]:
        """Move to ``target`` on behalf of ``actor``.

        Raises ``OrderTransitionError`` when the order is already terminal.
        Refusals for the actor's role come back as a rejected outcome. A rider
        can only finalise delivery with the order's delivery code.
        """
        if self.status.is_terminal:
            raise OrderTransitionError(
                f"order {self.order_id} is {self.status.value} and cannot change status"
            )

        if actor.role == ActorRole.VENDOR and actor.actor_id not in self.restaurant_ids:
            return Outcome.reject(
                RejectionCode.TRANSITION_NOT_ALLOWED,
                f"vendor {actor.actor_id} has no items in order {self.order_id}",
            )
        if actor.role == ActorRole.RIDER and self.rider_id != actor.actor_id:
            return Outcome.reject(
                RejectionCode.RIDER_NOT_ASSIGNED,
                f"rider {actor.actor_id} is not assigned to order {self.order_id}",
            )

        if target == self.status and _can_set(actor.role, target):
            return Outcome.success(self)
        if not can_transition(actor.role, self.status, target):
            return Outcome.reject(
                RejectionCode.TRANSITION_NOT_ALLOWED,
                f"{actor.role.value} cannot move order from {self.status.value} to {target.value}",
            )
        if target == OrderStatus.DELIVERED and otp != self.delivery_otp:
            return Outcome.reject(RejectionCode.INVALID_DELIVERY_OTP, "delivery code does not match")

        updated = replace(self, status=target)
        if target == OrderStatus.PREPARING and self.accepted_at is None:
            updated = replace(updated, accepted_at=now)
        if target == OrderStatus.DELIVERED:
            updated = replace(updated, delivered_at=now)
        return Outcome.success(updated)

    def claim(self, rider_id: RiderId, active_claims: int) -> Outcome[Order]:
        if self.status != OrderStatus.ON_ITS_WAY:
            return Outcome.reject(
                RejectionCode.ORDER_NOT_READY_FOR_PICKUP,
                f"order {self.order_id} is {self.status.value}, not ready for pickup",
            )
        if self.rider_id is not None:
            return Outcome.reject(
                RejectionCode.ORDER_ALREADY_CLAIMED,
                f"order {self.order_id} is already taken",
            )
        if active_claims >= MAX_ACTIVE_CLAIMS_PER_RIDER:
            return Outcome.reject(
                RejectionCode.RIDER_AT_CAPACITY,
                f"rider {rider_id} already has {active_claims} active orders",
            )
        return Outcome.success(replace(self, rider_id=rider_id))

    def deliver(self, rider_id: RiderId, otp: str, now: datetime) -> Outcome[Order]:
        rider = Actor(role=ActorRole.RIDER, actor_id=rider_id)
        return self.transition(rider, OrderStatus.DELIVERED, now, otp=otp)

    def track_rider(self, rider_id: RiderId, location: RiderLocation) -> Outcome[Order]:
        """Record where the assigned rider is; the status is left as it is."""
        if self.status.is_terminal:
            raise OrderTransitionError(
                f"order {self.order_id} is {self.status.value} and is no longer tracked"
            )
        if self.rider_id != rider_id:
            return Outcome.reject(
                RejectionCode.RIDER_NOT_ASSIGNED,
                f"rider {rider_id} is not assigned to order {self.order_id}",
            )
        return Outcome.success(replace(self, rider_location=location))

    def with_moderator_note(self, note: str) -> Order:
        return replace(self, moderator_note=note)


class OrderTransitionError(Exception):
    pass
