from __future__ import annotations

from fastapi import APIRouter

from mop.api import dependencies
from mop.application.dto.responses import AvailabilityResponse
from mop.application.use_cases.check_availability import CheckAvailability
from mop.domain.common.ids import MenuItemId, RestaurantId

router = APIRouter()


def _check_availability_use_case() -> CheckAvailability:
    return CheckAvailability(
        menu_repository=dependencies.get_menu_repository(),
        restaurant_repository=dependencies.get_restaurant_repository(),
        clock=dependencies.get_clock(),
    )


@router.get(
    "/v1/restaurants/{restaurant_id}/items/{item_id}/availability",
    response_model=AvailabilityResponse,
)
def get_item_availability(restaurant_id: str, item_id: str) -> AvailabilityResponse:
    return _check_availability_use_case().execute(
        restaurant_id=RestaurantId(restaurant_id),
        item_id=MenuItemId(item_id),
    )
