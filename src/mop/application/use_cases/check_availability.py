from __future__ import annotations

from mop.application.dto.responses import AvailabilityResponse
from mop.application.ports.clock import Clock
from mop.application.ports.repositories import MenuRepository, RestaurantRepository
from mop.application.use_cases.errors import MenuItemNotFoundError, RestaurantNotFoundError
from mop.domain.availability.evaluator import evaluate
from mop.domain.common.ids import MenuItemId, RestaurantId


class CheckAvailability:
    def __init__(
        self,
        menu_repository: MenuRepository,
        restaurant_repository: RestaurantRepository,
        clock: Clock,
    ) -> None:
        self._menu_repository = menu_repository
        self._restaurant_repository = restaurant_repository
        self._clock = clock

    def execute(self, restaurant_id: RestaurantId, item_id: MenuItemId) -> AvailabilityResponse:
        item = self._menu_repository.get_menu_item(item_id)
        if item is None or item.restaurant_id != restaurant_id:
            raise MenuItemNotFoundError(
                f"menu item {item_id} not found for restaurant_id={restaurant_id}"
            )
        restaurant = self._restaurant_repository.get(restaurant_id)
        if restaurant is None:
            raise RestaurantNotFoundError(f"restaurant {restaurant_id} not found")

        result = evaluate(item, restaurant, self._clock.now())
        return AvailabilityResponse(
            itemId=str(item.item_id),
            restaurantId=str(restaurant.restaurant_id),
            isAvailable=result.is_available,
            code=result.code.value,
            reason=result.reason,
        )
