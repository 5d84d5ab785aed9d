from __future__ import annotations

import logging
import os
from functools import lru_cache

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


def database_url() -> str | None:
    return os.getenv("DATABASE_URL") or None


def _pool_size() -> int:
    return int(os.getenv("DB_POOL_SIZE", "5"))


@lru_cache(maxsize=8)
def _build_engine(url: str, connect_timeout: int, pool_size: int) -> Engine:
    # sqlite drivers accept neither a connect timeout nor a sized queue pool.
    if url.startswith("sqlite"):
        return create_engine(url, pool_pre_ping=True)
    return create_engine(
        url,
        pool_pre_ping=True,
        pool_size=pool_size,
        max_overflow=pool_size,
        connect_args={"connect_timeout": connect_timeout},
    )


def get_engine(timeout_seconds: float = 1.0) -> Engine:
    url = database_url()
    if url is None:
        raise RuntimeError("DATABASE_URL is not set")
    return _build_engine(url, max(1, int(timeout_seconds)), _pool_size())


def ping_database(timeout_seconds: float = 1.0) -> bool:
    try:
        with get_engine(timeout_seconds).connect() as connection:
            connection.execute(text("SELECT 1"))
        return True
    except (SQLAlchemyError, RuntimeError) as exc:
        logger.warning("database_ping_failed", extra={"reason": str(exc)})
        return False
