from __future__ import annotations

import logging

from mop.application.ports.publisher import EventPublisher
from mop.infrastructure.cache.redis_client import get_redis_client

logger = logging.getLogger(__name__)


class RedisEventPublisher(EventPublisher):
    def __init__(self, timeout_seconds: float = 1.0) -> None:
        self._timeout_seconds = timeout_seconds

    def publish(self, channel: str, message: str) -> None:
        get_redis_client(timeout_seconds=self._timeout_seconds).publish(channel, message)


class LoggingEventPublisher(EventPublisher):
    """Used when no broker is configured; events only reach the log stream."""

    def publish(self, channel: str, message: str) -> None:
        logger.info("event_published", extra={"channel": channel, "event": message})
