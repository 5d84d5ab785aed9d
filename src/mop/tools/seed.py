from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from mop.domain.common.ids import MenuItemId, OfferId, RestaurantId
from mop.domain.common.money import Money
from mop.domain.menu.entities import (
    AvailabilityKind,
    CustomizationChoice,
    CustomizationOption,
    ItemAvailability,
    MenuItem,
    SelectionMode,
)
from mop.domain.offer.entities import (
    AllItems,
    DiscountType,
    ItemScope,
    Offer,
    RestaurantScope,
)
from mop.domain.restaurant.entities import (
    DaySchedule,
    OperatingHours,
    Restaurant,
    TimeSlot,
    Weekday,
)
from mop.infrastructure.memory.repositories import (
    InMemoryMenuRepository,
    InMemoryOfferRepository,
    InMemoryRestaurantRepository,
)


@dataclass(frozen=True)
class DemoCatalog:
    restaurants: tuple[Restaurant, ...]
    menu_items: tuple[MenuItem, ...]
    offers: tuple[Offer, ...]


def _open_daily(open_time: str, close_time: str) -> OperatingHours:
    slot = DaySchedule(is_open=True, slots=(TimeSlot(open=open_time, close=close_time),))
    return OperatingHours(days={day: slot for day in Weekday})


_HUB_HOURS = OperatingHours(
    days={
        Weekday.MONDAY: DaySchedule(is_open=True, slots=(TimeSlot("09:00", "21:00"),)),
        Weekday.TUESDAY: DaySchedule(is_open=True, slots=(TimeSlot("09:00", "21:00"),)),
        Weekday.WEDNESDAY: DaySchedule(
            is_open=True,
            slots=(TimeSlot("09:00", "14:00"), TimeSlot("17:00", "21:00")),
        ),
        Weekday.THURSDAY: DaySchedule(is_open=True, slots=(TimeSlot("09:00", "21:00"),)),
        Weekday.FRIDAY: DaySchedule(is_open=True, slots=(TimeSlot("09:00", "22:00"),)),
        Weekday.SATURDAY: DaySchedule(is_open=True, slots=(TimeSlot("11:00", "22:00"),)),
        Weekday.SUNDAY: DaySchedule(is_open=False),
    }
)

_SIZE = CustomizationOption(
    option_id="size",
    name="Size",
    selection_mode=SelectionMode.SINGLE,
    required=True,
    choices=(
        CustomizationChoice("Regular", Decimal("0.00")),
        CustomizationChoice("Large", Decimal("3.00")),
        CustomizationChoice("Extra Large", Decimal("5.00")),
    ),
)

_TOPPINGS = CustomizationOption(
    option_id="toppings",
    name="Add Toppings",
    selection_mode=SelectionMode.MULTIPLE,
    required=False,
    choices=(
        CustomizationChoice("Extra Cheese", Decimal("1.50")),
        CustomizationChoice("Mushrooms", Decimal("0.75")),
        CustomizationChoice("Pepperoni", Decimal("1.25")),
    ),
)


def demo_catalog(now: datetime | None = None) -> DemoCatalog:
    now = now or datetime.now(timezone.utc)

    hub = Restaurant(
        restaurant_id=RestaurantId("restaurant-1"),
        name="Restaurant Hub 1",
        operating_hours=_HUB_HOURS,
    )
    grill = Restaurant(
        restaurant_id=RestaurantId("restaurant-2"),
        name="Restaurant Hub 2",
        operating_hours=_open_daily("08:00", "23:00"),
    )
    diner = Restaurant(
        restaurant_id=RestaurantId("restaurant-26"),
        name="24/7 Diner",
        operating_hours=_open_daily("00:00", "23:59"),
    )

    def item(
        item_id: str,
        restaurant: Restaurant,
        name: str,
        price: str,
        **kwargs: object,
    ) -> MenuItem:
        return MenuItem(
            item_id=MenuItemId(item_id),
            restaurant_id=restaurant.restaurant_id,
            restaurant_name=restaurant.name,
            name=name,
            price=Money.of(price),
            **kwargs,  # type: ignore[arg-type]
        )

    menu_items = (
        item(
            "food-10",
            hub,
            "Customizable Pizza",
            "12.00",
            category="Main Course",
            customization_options=(_SIZE, _TOPPINGS),
        ),
        item("food-11", hub, "Lunch Special Package", "15.00", category="Deals"),
        item("food-12", hub, "Garlic Bread", "4.50", category="Appetizers"),
        item("food-20", grill, "Classic Burger", "9.50", category="Main Course"),
        item("food-21", grill, "Fries", "3.00", category="Sides"),
        item("food-260", diner, "Pancake Stack", "7.25", category="Breakfast"),
        item(
            "food-264",
            diner,
            "Late Night Tacos",
            "8.00",
            category="Main Course",
            availability=ItemAvailability(
                kind=AvailabilityKind.CUSTOM_TIME,
                start_time="22:00",
                end_time="06:00",
            ),
        ),
    )

    offers = (
        Offer(
            offer_id=OfferId("offer-1"),
            title="50% Off This Weekend",
            discount_type=DiscountType.PERCENTAGE,
            discount_value=Decimal("50"),
            scope=AllItems(),
            coupon_code="WEEKEND50",
            expiry=now + timedelta(days=3),
        ),
        Offer(
            offer_id=OfferId("offer-2"),
            title="Free Delivery on Orders Over 50",
            min_order_value=Money.of("50"),
            scope=AllItems(),
            coupon_code="FREEDEL",
        ),
        Offer(
            offer_id=OfferId("offer-3"),
            title="20% Off at Restaurant Hub 1",
            discount_type=DiscountType.PERCENTAGE,
            discount_value=Decimal("20"),
            scope=RestaurantScope(restaurant_id=hub.restaurant_id),
        ),
        Offer(
            offer_id=OfferId("offer-4"),
            title="10 Off Your Next Order",
            discount_type=DiscountType.FIXED,
            discount_value=Decimal("10"),
            min_order_value=Money.of("30"),
            scope=AllItems(),
            coupon_code="TAKE10",
        ),
        Offer(
            offer_id=OfferId("offer-5"),
            title="Combo Meal Deal",
            discount_type=DiscountType.FIXED,
            discount_value=Decimal("2"),
            scope=ItemScope(item_ids=frozenset({MenuItemId("food-20"), MenuItemId("food-21")})),
        ),
        Offer(
            offer_id=OfferId("offer-6"),
            title="Expired Deal",
            discount_type=DiscountType.PERCENTAGE,
            discount_value=Decimal("15"),
            scope=AllItems(),
            expiry=now - timedelta(days=1),
        ),
    )

    return DemoCatalog(restaurants=(hub, grill, diner), menu_items=menu_items, offers=offers)


def seed(
    menu_repository: InMemoryMenuRepository,
    restaurant_repository: InMemoryRestaurantRepository,
    offer_repository: InMemoryOfferRepository,
    catalog: DemoCatalog | None = None,
) -> DemoCatalog:
    catalog = catalog or demo_catalog()
    for restaurant in catalog.restaurants:
        restaurant_repository.add(restaurant)
    for menu_item in catalog.menu_items:
        menu_repository.add(menu_item)
    for offer in catalog.offers:
        offer_repository.add(offer)
    return catalog


def main() -> None:
    catalog = demo_catalog()
    for restaurant in catalog.restaurants:
        print(f"restaurant {restaurant.restaurant_id}: {restaurant.name}")
    for menu_item in catalog.menu_items:
        print(f"  item {menu_item.item_id}: {menu_item.name} ({menu_item.price.amount})")
    for offer in catalog.offers:
        print(f"offer {offer.offer_id}: {offer.title}")


if __name__ == "__main__":
    main()
