from __future__ import annotations

import sys
from dataclasses import FrozenInstanceError, replace
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[3] / "src"))

from mop.domain.cart.items import CartItem
from mop.domain.common.ids import AddressId, CartId, CartItemId, MenuItemId, OrderId, RestaurantId, RiderId
from mop.domain.common.money import Money
from mop.domain.common.outcome import RejectionCode
from mop.domain.menu.entities import MenuItem
from mop.domain.order.entities import (
    Actor,
    ActorRole,
    Address,
    DeliveryOption,
    Order,
    OrderStatus,
    OrderTransitionError,
    PaymentMethod,
    RiderLocation,
    can_transition,
)

PLACED_AT = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
VENDOR = Actor(role=ActorRole.VENDOR, actor_id="rst_001")
OTHER_VENDOR = Actor(role=ActorRole.VENDOR, actor_id="rst_999")
MODERATOR = Actor(role=ActorRole.MODERATOR, actor_id="mod_1")
CUSTOMER = Actor(role=ActorRole.CUSTOMER, actor_id="cus_1")


def _order(status: OrderStatus = OrderStatus.PLACED, **overrides) -> Order:
    item = MenuItem(
        item_id=MenuItemId("itm_001"),
        restaurant_id=RestaurantId("rst_001"),
        restaurant_name="Hub",
        name="Pizza",
        price=Money.of("12.00"),
    )
    order = Order(
        order_id=OrderId("ord_1"),
        cart_id=CartId("cart_1"),
        items=(CartItem(cart_item_id=CartItemId("cit_1"), base_item=item, quantity=1),),
        subtotal=Money.of("12.00"),
        delivery_fee=Money.of("5.99"),
        discount=Money.zero(),
        total=Money.of("17.99"),
        address=Address(address_id=AddressId("addr-1"), label="Home", details="123 Main St"),
        payment_method=PaymentMethod.CASH_ON_DELIVERY,
        delivery_option=DeliveryOption.HOME,
        status=status,
        placed_at=PLACED_AT,
        delivery_otp="4821",
    )
    return replace(order, **overrides)


@pytest.mark.parametrize(
    ("role", "current", "target", "allowed"),
    [
        (ActorRole.VENDOR, OrderStatus.PLACED, OrderStatus.PREPARING, True),
        (ActorRole.VENDOR, OrderStatus.PLACED, OrderStatus.CANCELLED, True),
        (ActorRole.VENDOR, OrderStatus.PREPARING, OrderStatus.ON_ITS_WAY, True),
        (ActorRole.VENDOR, OrderStatus.PREPARING, OrderStatus.CANCELLED, False),
        (ActorRole.VENDOR, OrderStatus.PLACED, OrderStatus.DELIVERED, False),
        (ActorRole.MODERATOR, OrderStatus.PREPARING, OrderStatus.CANCELLED, True),
        (ActorRole.MODERATOR, OrderStatus.PENDING, OrderStatus.CANCELLED, True),
        (ActorRole.MODERATOR, OrderStatus.ON_ITS_WAY, OrderStatus.DELIVERED, False),
        (ActorRole.RIDER, OrderStatus.ON_ITS_WAY, OrderStatus.DELIVERED, True),
        (ActorRole.RIDER, OrderStatus.PREPARING, OrderStatus.ON_ITS_WAY, False),
        (ActorRole.CUSTOMER, OrderStatus.PLACED, OrderStatus.CANCELLED, False),
    ],
)
def test_transition_table(
    role: ActorRole,
    current: OrderStatus,
    target: OrderStatus,
    allowed: bool,
) -> None:
    assert can_transition(role, current, target) is allowed


def test_vendor_accepts_and_accepted_at_is_set() -> None:
    now = PLACED_AT + timedelta(minutes=2)
    updated = _order().transition(VENDOR, OrderStatus.PREPARING, now).unwrap()
    assert updated.status == OrderStatus.PREPARING
    assert updated.accepted_at == now


def test_accepted_at_is_set_exactly_once() -> None:
    first = PLACED_AT + timedelta(minutes=2)
    preparing = _order().transition(VENDOR, OrderStatus.PREPARING, first).unwrap()

    again = preparing.transition(VENDOR, OrderStatus.PREPARING, first + timedelta(minutes=5))

    assert again.ok
    assert again.unwrap() is preparing
    assert again.unwrap().accepted_at == first
    on_its_way = preparing.transition(VENDOR, OrderStatus.ON_ITS_WAY, first + timedelta(minutes=9))
    assert on_its_way.unwrap().accepted_at == first


def test_vendor_placed_to_cancelled() -> None:
    cancelled = _order().transition(VENDOR, OrderStatus.CANCELLED, PLACED_AT).unwrap()
    assert cancelled.status == OrderStatus.CANCELLED
    assert cancelled.accepted_at is None


def test_vendor_cannot_skip_to_delivered() -> None:
    outcome = _order().transition(VENDOR, OrderStatus.DELIVERED, PLACED_AT)
    assert outcome.rejection is not None
    assert outcome.rejection.code == RejectionCode.TRANSITION_NOT_ALLOWED


def test_vendor_outside_order_is_rejected() -> None:
    outcome = _order().transition(OTHER_VENDOR, OrderStatus.PREPARING, PLACED_AT)
    assert outcome.rejection is not None
    assert outcome.rejection.code == RejectionCode.TRANSITION_NOT_ALLOWED


def test_moderator_can_cancel_while_preparing() -> None:
    order = _order(OrderStatus.PREPARING, accepted_at=PLACED_AT)
    assert order.transition(MODERATOR, OrderStatus.CANCELLED, PLACED_AT).ok


def test_customer_cannot_change_status() -> None:
    assert not _order().transition(CUSTOMER, OrderStatus.CANCELLED, PLACED_AT).ok


@pytest.mark.parametrize("terminal", [OrderStatus.DELIVERED, OrderStatus.CANCELLED])
def test_terminal_orders_cannot_move(terminal: OrderStatus) -> None:
    with pytest.raises(OrderTransitionError):
        _order(terminal).transition(MODERATOR, OrderStatus.PREPARING, PLACED_AT)


def test_claim_requires_on_its_way() -> None:
    outcome = _order(OrderStatus.PREPARING).claim(RiderId("rid_1"), active_claims=0)
    assert outcome.rejection is not None
    assert outcome.rejection.code == RejectionCode.ORDER_NOT_READY_FOR_PICKUP


def test_claim_rejected_when_rider_assigned() -> None:
    order = _order(OrderStatus.ON_ITS_WAY, rider_id=RiderId("rid_1"))
    outcome = order.claim(RiderId("rid_2"), active_claims=0)
    assert outcome.rejection is not None
    assert outcome.rejection.code == RejectionCode.ORDER_ALREADY_CLAIMED


def test_claim_respects_rider_capacity() -> None:
    order = _order(OrderStatus.ON_ITS_WAY)
    assert order.claim(RiderId("rid_1"), active_claims=1).ok
    outcome = order.claim(RiderId("rid_1"), active_claims=2)
    assert outcome.rejection is not None
    assert outcome.rejection.code == RejectionCode.RIDER_AT_CAPACITY


def test_rider_delivers_with_matching_code() -> None:
    order = _order(OrderStatus.ON_ITS_WAY, rider_id=RiderId("rid_1"))
    now = PLACED_AT + timedelta(minutes=40)

    delivered = order.deliver(RiderId("rid_1"), "4821", now).unwrap()

    assert delivered.status == OrderStatus.DELIVERED
    assert delivered.delivered_at == now
    assert delivered.is_active_claim is False


def test_wrong_code_blocks_delivery() -> None:
    order = _order(OrderStatus.ON_ITS_WAY, rider_id=RiderId("rid_1"))
    outcome = order.deliver(RiderId("rid_1"), "0000", PLACED_AT)
    assert outcome.rejection is not None
    assert outcome.rejection.code == RejectionCode.INVALID_DELIVERY_OTP


def test_unassigned_rider_cannot_deliver() -> None:
    order = _order(OrderStatus.ON_ITS_WAY, rider_id=RiderId("rid_1"))
    outcome = order.deliver(RiderId("rid_2"), "4821", PLACED_AT)
    assert outcome.rejection is not None
    assert outcome.rejection.code == RejectionCode.RIDER_NOT_ASSIGNED


def test_assigned_rider_location_is_recorded_without_status_change() -> None:
    order = _order(OrderStatus.ON_ITS_WAY, rider_id=RiderId("rid_1"))
    location = RiderLocation(lat=34.0522, lng=-118.2437, recorded_at=PLACED_AT)

    tracked = order.track_rider(RiderId("rid_1"), location).unwrap()

    assert tracked.rider_location == location
    assert tracked.status == OrderStatus.ON_ITS_WAY
    assert tracked.version == order.version


def test_other_rider_cannot_move_the_marker() -> None:
    order = _order(OrderStatus.ON_ITS_WAY, rider_id=RiderId("rid_1"))
    location = RiderLocation(lat=34.0, lng=-118.0, recorded_at=PLACED_AT)

    outcome = order.track_rider(RiderId("rid_2"), location)

    assert outcome.rejection is not None
    assert outcome.rejection.code == RejectionCode.RIDER_NOT_ASSIGNED


def test_finished_orders_are_not_tracked() -> None:
    order = _order(OrderStatus.DELIVERED, rider_id=RiderId("rid_1"))
    with pytest.raises(OrderTransitionError):
        order.track_rider(
            RiderId("rid_1"),
            RiderLocation(lat=34.0, lng=-118.0, recorded_at=PLACED_AT),
        )


@pytest.mark.parametrize(("lat", "lng"), [(91.0, 0.0), (-90.5, 0.0), (0.0, 180.5)])
def test_location_must_be_on_the_globe(lat: float, lng: float) -> None:
    with pytest.raises(ValueError):
        RiderLocation(lat=lat, lng=lng, recorded_at=PLACED_AT)


def test_moderator_note_leaves_status_alone() -> None:
    order = _order(OrderStatus.DELIVERED)
    noted = order.with_moderator_note("Customer called about a missing drink")
    assert noted.status == OrderStatus.DELIVERED
    assert noted.moderator_note == "Customer called about a missing drink"


def test_order_snapshot_is_frozen() -> None:
    with pytest.raises(FrozenInstanceError):
        _order().status = OrderStatus.CANCELLED  # type: ignore[misc]


def test_pickup_order_cannot_carry_a_fee() -> None:
    with pytest.raises(ValueError):
        _order(delivery_option=DeliveryOption.PICKUP)


def test_order_needs_items() -> None:
    with pytest.raises(ValueError):
        _order(items=())
