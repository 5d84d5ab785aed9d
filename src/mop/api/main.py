from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from mop.api import dependencies
from mop.api.error_handling import register_exception_handlers
from mop.api.middleware.access_log import AccessLogMiddleware
from mop.api.middleware.request_id import REQUEST_ID_HEADER, RequestIDMiddleware
from mop.api.routes.availability import router as availability_router
from mop.api.routes.carts import router as carts_router
from mop.api.routes.health import router as health_router
from mop.api.routes.metrics import router as metrics_router
from mop.api.routes.orders import router as orders_router
from mop.api.routes.riders import router as riders_router
from mop.infrastructure.observability.logging_config import configure_logging
from mop.infrastructure.observability.otel import configure_otel

logger = logging.getLogger(__name__)

_ROUTERS = (
    health_router,
    metrics_router,
    availability_router,
    carts_router,
    orders_router,
    riders_router,
)


def _cors_allow_origins() -> list[str]:
    if os.getenv("APP_ENV", "dev").lower() in {"dev", "test"}:
        return ["*"]
    raw_value = os.getenv("CORS_ALLOW_ORIGINS", "https://marketplace.example.com")
    return [origin.strip() for origin in raw_value.split(",") if origin.strip()]


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(
        "app_started",
        extra={
            "order_store": type(dependencies.get_order_repository()).__name__,
            "cart_store": type(dependencies.get_cart_repository()).__name__,
            "catalog_items": len(dependencies.get_menu_repository().all_items()),
        },
    )
    yield
    logger.info("app_stopped")


def create_app() -> FastAPI:
    configure_logging()

    app = FastAPI(title="MOP Backend", version="0.1.0", lifespan=lifespan)
    register_exception_handlers(app)
    for router in _ROUTERS:
        app.include_router(router)

    # Last added runs first: CORS, then request id, then access log.
    app.add_middleware(AccessLogMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=_cors_allow_origins(),
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER],
    )

    configure_otel(app)
    return app


app = create_app()
