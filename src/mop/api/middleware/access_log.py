from __future__ import annotations

import logging
import time

from prometheus_client import Counter, Histogram
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

logger = logging.getLogger("mop.api.access")

REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total number of HTTP requests",
    ["method", "path", "status_code"],
)
REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "path"],
)


def route_template(request: Request) -> str:
    """Matched route path such as ``/v1/orders/{order_id}``, else the raw path."""
    route = request.scope.get("route")
    return getattr(route, "path", None) or request.url.path


def _observe(request: Request, status_code: int, started: float) -> float:
    elapsed = time.perf_counter() - started
    template = route_template(request)
    REQUEST_COUNT.labels(method=request.method, path=template, status_code=str(status_code)).inc()
    REQUEST_LATENCY.labels(method=request.method, path=template).observe(elapsed)
    return round(elapsed * 1000, 2)


class AccessLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                "request_error",
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "status_code": 500,
                    "duration_ms": _observe(request, 500, started),
                },
            )
            raise

        logger.info(
            "request_complete",
            extra={
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": _observe(request, response.status_code, started),
            },
        )
        return response
