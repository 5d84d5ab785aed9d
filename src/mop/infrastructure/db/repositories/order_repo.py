from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import Engine, Select, func, select, update
from sqlalchemy.orm import Session, aliased, selectinload

from mop.application.ports.repositories import OptimisticConcurrencyError, OrderRepository
from mop.domain.common.ids import AddressId, CartId, OfferId, OrderId, RestaurantId, RiderId
from mop.domain.common.money import Money
from mop.domain.order.entities import (
    MAX_ACTIVE_CLAIMS_PER_RIDER,
    Address,
    DeliveryOption,
    Order,
    OrderStatus,
    PaymentMethod,
    RiderLocation,
    TERMINAL_STATUSES,
)
from mop.infrastructure.codec.documents import cart_item_from_document, cart_item_to_document
from mop.infrastructure.db.models.order import OrderModel, OrderRestaurantModel
from mop.infrastructure.db.session import get_engine

_TERMINAL_VALUES = sorted(status.value for status in TERMINAL_STATUSES)


def _aware(value: datetime | None) -> datetime | None:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _location_columns(location: RiderLocation | None) -> dict[str, Any]:
    if location is None:
        return {"rider_lat": None, "rider_lng": None, "rider_located_at": None}
    return {
        "rider_lat": location.lat,
        "rider_lng": location.lng,
        "rider_located_at": location.recorded_at,
    }


def _location(model: OrderModel) -> RiderLocation | None:
    located_at = _aware(model.rider_located_at)
    if model.rider_lat is None or model.rider_lng is None or located_at is None:
        return None
    return RiderLocation(lat=model.rider_lat, lng=model.rider_lng, recorded_at=located_at)


class SqlAlchemyOrderRepository(OrderRepository):
    def __init__(self, engine: Engine | None = None) -> None:
        self._engine = engine or get_engine()

    def add(self, order: Order) -> None:
        with Session(self._engine) as session:
            session.add(self._to_model(order))
            session.commit()

    def get(self, order_id: OrderId) -> Order | None:
        statement = self._select().where(OrderModel.id == str(order_id)).limit(1)
        with Session(self._engine) as session:
            model = session.execute(statement).scalar_one_or_none()
            if model is None:
                return None
            return self._to_domain(model)

    def update(self, order: Order, expected_version: int) -> Order:
        statement = (
            update(OrderModel)
            .where(
                OrderModel.id == str(order.order_id),
                OrderModel.version == expected_version,
            )
            .values(
                status=order.status.value,
                accepted_at=order.accepted_at,
                delivered_at=order.delivered_at,
                rider_id=order.rider_id,
                moderator_note=order.moderator_note,
                **_location_columns(order.rider_location),
                version=OrderModel.version + 1,
            )
        )
        with Session(self._engine) as session:
            result = session.execute(statement)
            if result.rowcount != 1:
                session.rollback()
                raise OptimisticConcurrencyError(f"order {order.order_id} version conflict")
            session.commit()

        return self._reload(order.order_id)

    def claim_for_rider(
        self,
        order_id: OrderId,
        rider_id: RiderId,
        max_active_claims: int = MAX_ACTIVE_CLAIMS_PER_RIDER,
    ) -> Order | None:
        held = aliased(OrderModel)
        active_claims = (
            select(func.count())
            .select_from(held)
            .where(held.rider_id == str(rider_id), held.status.not_in(_TERMINAL_VALUES))
            .scalar_subquery()
        )
        statement = (
            update(OrderModel)
            .where(
                OrderModel.id == str(order_id),
                OrderModel.rider_id.is_(None),
                OrderModel.status == OrderStatus.ON_ITS_WAY.value,
                active_claims < max_active_claims,
            )
            .values(rider_id=str(rider_id), version=OrderModel.version + 1)
        )
        with Session(self._engine) as session:
            if self._engine.dialect.name == "postgresql":
                # Claims by one rider run one at a time so the count sees committed claims.
                lock = func.pg_advisory_xact_lock(func.hashtext(str(rider_id)))
                session.execute(select(lock))
            result = session.execute(statement)
            if result.rowcount != 1:
                session.rollback()
                return None
            session.commit()

        return self._reload(order_id)

    def count_active_for_rider(self, rider_id: RiderId) -> int:
        statement = (
            select(func.count())
            .select_from(OrderModel)
            .where(
                OrderModel.rider_id == str(rider_id),
                OrderModel.status.not_in(_TERMINAL_VALUES),
            )
        )
        with Session(self._engine) as session:
            return int(session.execute(statement).scalar_one())

    def list_for_rider(self, rider_id: RiderId) -> list[Order]:
        return self._list(self._select().where(OrderModel.rider_id == str(rider_id)))

    def list_for_restaurant(
        self,
        restaurant_id: RestaurantId,
        status: OrderStatus | None,
    ) -> list[Order]:
        statement = self._select().where(
            OrderModel.restaurants.any(OrderRestaurantModel.restaurant_id == str(restaurant_id))
        )
        if status is not None:
            statement = statement.where(OrderModel.status == status.value)
        return self._list(statement)

    def list_claimable(self) -> list[Order]:
        return self._list(
            self._select().where(
                OrderModel.status == OrderStatus.ON_ITS_WAY.value,
                OrderModel.rider_id.is_(None),
            )
        )

    def _select(self) -> Select[tuple[OrderModel]]:
        return select(OrderModel).options(selectinload(OrderModel.restaurants))

    def _list(self, statement: Select[tuple[OrderModel]]) -> list[Order]:
        statement = statement.order_by(OrderModel.placed_at.desc(), OrderModel.id.desc())
        with Session(self._engine) as session:
            models = list(session.execute(statement).scalars().all())
            return [self._to_domain(model) for model in models]

    def _reload(self, order_id: OrderId) -> Order:
        stored = self.get(order_id)
        if stored is None:
            raise RuntimeError(f"order {order_id} not found after update")
        return stored

    def _to_model(self, order: Order) -> OrderModel:
        model = OrderModel(
            id=str(order.order_id),
            cart_id=str(order.cart_id),
            status=order.status.value,
            items=[cart_item_to_document(item) for item in order.items],
            subtotal=order.subtotal.amount,
            delivery_fee=order.delivery_fee.amount,
            discount=order.discount.amount,
            total=order.total.amount,
            currency=order.total.currency,
            applied_offer_id=str(order.applied_offer_id) if order.applied_offer_id else None,
            address_id=str(order.address.address_id),
            address_label=order.address.label,
            address_details=order.address.details,
            payment_method=order.payment_method.value,
            delivery_option=order.delivery_option.value,
            delivery_instructions=order.delivery_instructions,
            delivery_otp=order.delivery_otp,
            placed_at=order.placed_at,
            accepted_at=order.accepted_at,
            delivered_at=order.delivered_at,
            rider_id=str(order.rider_id) if order.rider_id else None,
            moderator_note=order.moderator_note,
            **_location_columns(order.rider_location),
            version=order.version,
        )
        model.restaurants = [
            OrderRestaurantModel(order_id=str(order.order_id), restaurant_id=str(restaurant_id))
            for restaurant_id in sorted(order.restaurant_ids)
        ]
        return model

    def _to_domain(self, model: OrderModel) -> Order:
        currency = model.currency
        placed_at = _aware(model.placed_at)
        if placed_at is None:
            raise RuntimeError(f"order {model.id} has no placed_at")
        return Order(
            order_id=OrderId(model.id),
            cart_id=CartId(model.cart_id),
            items=tuple(cart_item_from_document(item) for item in model.items),
            subtotal=Money(amount=model.subtotal, currency=currency),
            delivery_fee=Money(amount=model.delivery_fee, currency=currency),
            discount=Money(amount=model.discount, currency=currency),
            total=Money(amount=model.total, currency=currency),
            address=Address(
                address_id=AddressId(model.address_id),
                label=model.address_label,
                details=model.address_details,
            ),
            payment_method=PaymentMethod(model.payment_method),
            delivery_option=DeliveryOption(model.delivery_option),
            status=OrderStatus(model.status),
            placed_at=placed_at,
            delivery_otp=model.delivery_otp,
            applied_offer_id=OfferId(model.applied_offer_id) if model.applied_offer_id else None,
            delivery_instructions=model.delivery_instructions,
            accepted_at=_aware(model.accepted_at),
            delivered_at=_aware(model.delivered_at),
            rider_id=RiderId(model.rider_id) if model.rider_id else None,
            moderator_note=model.moderator_note,
            rider_location=_location(model),
            version=model.version,
        )
