from __future__ import annotations

import json
import os
from typing import Any, Callable

import redis

from mop.application.ports.repositories import CartRepository
from mop.domain.cart.entities import Cart
from mop.domain.common.ids import CartId
from mop.infrastructure.cache.redis_client import get_redis_client
from mop.infrastructure.codec.documents import cart_from_document, cart_to_document

_KEY_PREFIX = "cart:"


def _default_ttl_seconds() -> int:
    return int(os.getenv("CART_TTL_SECONDS", str(7 * 24 * 3600)))


class RedisCartRepository(CartRepository):
    """Carts as JSON documents under ``cart:<id>`` with a sliding TTL."""

    def __init__(
        self,
        timeout_seconds: float = 1.0,
        ttl_seconds: int | None = None,
        client_factory: Callable[[], redis.Redis] | None = None,
    ) -> None:
        self._timeout_seconds = timeout_seconds
        self._ttl_seconds = ttl_seconds if ttl_seconds is not None else _default_ttl_seconds()
        self._client_factory = client_factory

    def _client(self) -> Any:
        if self._client_factory is not None:
            return self._client_factory()
        return get_redis_client(timeout_seconds=self._timeout_seconds)

    def get(self, cart_id: CartId) -> Cart | None:
        value = self._client().get(f"{_KEY_PREFIX}{cart_id}")
        if value is None:
            return None
        if isinstance(value, bytes):
            value = value.decode("utf-8")
        return cart_from_document(json.loads(value))

    def save(self, cart: Cart) -> None:
        self._client().set(
            name=f"{_KEY_PREFIX}{cart.cart_id}",
            value=json.dumps(cart_to_document(cart), separators=(",", ":")),
            ex=self._ttl_seconds,
        )
