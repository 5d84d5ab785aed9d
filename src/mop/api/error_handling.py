from __future__ import annotations

from typing import Any, TypeVar, cast

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from mop.api.middleware.request_id import get_request_id
from mop.application.use_cases.errors import (
    MenuItemNotFoundError,
    OfferNotFoundError,
    OrderConflictError,
    OrderNotFoundError,
    RestaurantNotFoundError,
)
from mop.application.use_cases.order_queues import InvalidOrderQueueStatusError
from mop.domain.common.outcome import Outcome, Rejection, RejectionCode
from mop.domain.order.entities import OrderTransitionError

T = TypeVar("T")

# Rejections that describe a bad request body rather than a state conflict.
_UNPROCESSABLE_CODES = frozenset(
    {
        RejectionCode.INVALID_CUSTOMIZATION,
        RejectionCode.ADDRESS_REQUIRED,
        RejectionCode.INVALID_DELIVERY_OTP,
        RejectionCode.COUPON_NOT_FOUND,
    }
)

_HTTP_ERROR_CODES = {
    400: "BAD_REQUEST",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    409: "CONFLICT",
}


def _error_response(
    *,
    status_code: int,
    code: str,
    message: str,
    details: dict[str, Any] | None = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": {
                "code": code,
                "message": message,
                "details": details or {},
            },
            "requestId": get_request_id(),
        },
    )


def rejection_status_code(rejection: Rejection) -> int:
    if rejection.code in _UNPROCESSABLE_CODES:
        return 422
    return 409


def rejection_response(
    rejection: Rejection,
    details: dict[str, Any] | None = None,
) -> JSONResponse:
    return _error_response(
        status_code=rejection_status_code(rejection),
        code=rejection.code.value,
        message=rejection.message,
        details=details,
    )


def _exception_handler(status_code: int, code: str):
    async def handler(_: Request, exc: Exception) -> JSONResponse:
        details = getattr(exc, "details", None)
        return _error_response(
            status_code=status_code,
            code=code,
            message=str(exc),
            details=details if isinstance(details, dict) else None,
        )

    return handler


async def _http_exception_handler(_: Request, exc: Exception) -> JSONResponse:
    http_exc = cast(StarletteHTTPException, exc)
    return _error_response(
        status_code=http_exc.status_code,
        code=_HTTP_ERROR_CODES.get(http_exc.status_code, "HTTP_ERROR"),
        message=str(http_exc.detail) if http_exc.detail else "request failed",
    )


async def _validation_exception_handler(_: Request, exc: Exception) -> JSONResponse:
    validation_exc = cast(RequestValidationError, exc)
    return _error_response(
        status_code=400,
        code="INVALID_REQUEST",
        message="request validation failed",
        details={"errors": jsonable_encoder(validation_exc.errors())},
    )


def register_exception_handlers(app: FastAPI) -> None:
    mappings: list[tuple[type[Exception], int, str]] = [
        (OrderNotFoundError, 404, "ORDER_NOT_FOUND"),
        (MenuItemNotFoundError, 404, "MENU_ITEM_NOT_FOUND"),
        (RestaurantNotFoundError, 404, "RESTAURANT_NOT_FOUND"),
        (OfferNotFoundError, 404, "OFFER_NOT_FOUND"),
        (OrderTransitionError, 409, "ORDER_FINALIZED"),
        (OrderConflictError, 409, "CONFLICT"),
        (InvalidOrderQueueStatusError, 400, "INVALID_ORDER_STATUS"),
        (ValueError, 422, "INVALID_VALUE"),
    ]

    for exc_cls, status_code, code in mappings:
        app.add_exception_handler(exc_cls, _exception_handler(status_code, code))

    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)


def outcome_response(outcome: Outcome[T]) -> T | JSONResponse:
    if outcome.ok:
        return outcome.unwrap()
    return rejection_response(cast(Rejection, outcome.rejection))
