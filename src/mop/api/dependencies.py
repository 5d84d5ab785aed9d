from __future__ import annotations

import logging
from functools import lru_cache

from opentelemetry import trace

from mop.api.middleware.request_id import get_request_id
from mop.application.ports.clock import Clock, SystemClock
from mop.application.ports.publisher import EventPublisher
from mop.application.ports.repositories import CartRepository, OrderRepository
from mop.application.use_cases.context import TraceContext
from mop.infrastructure.cache.cart_store import RedisCartRepository
from mop.infrastructure.cache.redis_client import redis_url
from mop.infrastructure.db.repositories.order_repo import SqlAlchemyOrderRepository
from mop.infrastructure.db.session import database_url
from mop.infrastructure.memory.repositories import (
    InMemoryCartRepository,
    InMemoryMenuRepository,
    InMemoryOfferRepository,
    InMemoryOrderRepository,
    InMemoryRestaurantRepository,
)
from mop.infrastructure.messaging.redis_publisher import (
    LoggingEventPublisher,
    RedisEventPublisher,
)
from mop.tools.seed import demo_catalog, seed

logger = logging.getLogger(__name__)


def current_trace_context() -> TraceContext:
    span_context = trace.get_current_span().get_span_context()
    trace_id = format(span_context.trace_id, "032x") if span_context.is_valid else None
    return TraceContext(trace_id=trace_id, request_id=get_request_id())


@lru_cache(maxsize=1)
def get_clock() -> Clock:
    return SystemClock()


@lru_cache(maxsize=1)
def _catalog() -> tuple[InMemoryMenuRepository, InMemoryRestaurantRepository, InMemoryOfferRepository]:
    menu_repository = InMemoryMenuRepository()
    restaurant_repository = InMemoryRestaurantRepository()
    offer_repository = InMemoryOfferRepository()
    seed(
        menu_repository,
        restaurant_repository,
        offer_repository,
        catalog=demo_catalog(get_clock().now()),
    )
    return menu_repository, restaurant_repository, offer_repository


def get_menu_repository() -> InMemoryMenuRepository:
    return _catalog()[0]


def get_restaurant_repository() -> InMemoryRestaurantRepository:
    return _catalog()[1]


def get_offer_repository() -> InMemoryOfferRepository:
    return _catalog()[2]


@lru_cache(maxsize=1)
def get_cart_repository() -> CartRepository:
    if redis_url():
        return RedisCartRepository()
    logger.info("cart_store_in_memory", extra={"reason": "REDIS_URL missing"})
    return InMemoryCartRepository()


@lru_cache(maxsize=1)
def get_order_repository() -> OrderRepository:
    if database_url():
        return SqlAlchemyOrderRepository()
    logger.info("order_store_in_memory", extra={"reason": "DATABASE_URL missing"})
    return InMemoryOrderRepository()


@lru_cache(maxsize=1)
def get_event_publisher() -> EventPublisher:
    if redis_url():
        return RedisEventPublisher()
    return LoggingEventPublisher()


def reset_dependencies() -> None:
    for cached in (
        get_clock,
        _catalog,
        get_cart_repository,
        get_order_repository,
        get_event_publisher,
    ):
        cached.cache_clear()
