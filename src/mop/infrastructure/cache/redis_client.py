from __future__ import annotations

import logging
import os
from functools import lru_cache

import redis

logger = logging.getLogger(__name__)


def redis_url() -> str | None:
    return os.getenv("REDIS_URL") or None


def _max_connections() -> int:
    return int(os.getenv("REDIS_MAX_CONNECTIONS", "20"))


@lru_cache(maxsize=8)
def _build_client(url: str, timeout_seconds: float, max_connections: int) -> redis.Redis:
    pool = redis.ConnectionPool.from_url(
        url,
        max_connections=max_connections,
        socket_connect_timeout=timeout_seconds,
        socket_timeout=timeout_seconds,
        health_check_interval=30,
    )
    return redis.Redis(connection_pool=pool)


def get_redis_client(timeout_seconds: float = 1.0) -> redis.Redis:
    url = redis_url()
    if url is None:
        raise RuntimeError("REDIS_URL is not set")
    return _build_client(url, timeout_seconds, _max_connections())


def ping_redis(timeout_seconds: float = 1.0) -> bool:
    try:
        return bool(get_redis_client(timeout_seconds).ping())
    except (redis.RedisError, RuntimeError) as exc:
        logger.warning("redis_ping_failed", extra={"reason": str(exc)})
        return False
