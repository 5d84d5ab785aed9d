from __future__ import annotations

from mop.application.dto.requests import ApplyOfferRequest
from mop.application.dto.responses import CartResponse
from mop.application.mappers.cart_mapper import to_cart_response
from mop.application.metrics.order_lifecycle import record_offer_attempt
from mop.application.ports.clock import Clock
from mop.application.ports.repositories import CartRepository, OfferRepository
from mop.application.use_cases.errors import OfferNotFoundError
from mop.application.use_cases.get_cart import load_or_create_cart
from mop.domain.common.ids import CartId, OfferId
from mop.domain.common.outcome import Outcome, RejectionCode


class ApplyOffer:
    def __init__(
        self,
        offer_repository: OfferRepository,
        cart_repository: CartRepository,
        clock: Clock,
    ) -> None:
        self._offer_repository = offer_repository
        self._cart_repository = cart_repository
        self._clock = clock

    def execute(self, cart_id: CartId, request_dto: ApplyOfferRequest) -> Outcome[CartResponse]:
        if request_dto.coupon_code is not None:
            offer = self._offer_repository.find_by_coupon(request_dto.coupon_code.strip())
            if offer is None:
                record_offer_attempt(RejectionCode.COUPON_NOT_FOUND.value)
                return Outcome.reject(
                    RejectionCode.COUPON_NOT_FOUND,
                    "Invalid or expired coupon code.",
                )
        else:
            offer = self._offer_repository.get(OfferId(request_dto.offer_id or ""))
            if offer is None:
                raise OfferNotFoundError(f"offer {request_dto.offer_id} not found")

        cart = load_or_create_cart(self._cart_repository, cart_id)
        outcome = cart.apply_offer(offer, self._clock.now())
        if not outcome.ok:
            record_offer_attempt(outcome.rejection.code.value)
            return Outcome(rejection=outcome.rejection)

        record_offer_attempt("applied")
        self._cart_repository.save(cart)
        return Outcome.success(to_cart_response(cart))


class RemoveOffer:
    def __init__(self, cart_repository: CartRepository) -> None:
        self._cart_repository = cart_repository

    def execute(self, cart_id: CartId) -> Outcome[CartResponse]:
        cart = load_or_create_cart(self._cart_repository, cart_id)
        if cart.remove_offer() is None:
            return Outcome.reject(RejectionCode.NO_OFFER_APPLIED, "no offer is applied to this cart")
        self._cart_repository.save(cart)
        return Outcome.success(to_cart_response(cart))
