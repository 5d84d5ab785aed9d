from __future__ import annotations

from dataclasses import dataclass, replace

from mop.domain.common.ids import CartItemId, MenuItemId, RestaurantId
from mop.domain.common.money import Money
from mop.domain.menu.entities import MenuItem, SelectedCustomization


@dataclass(frozen=True)
class CartItem:
    cart_item_id: CartItemId
    base_item: MenuItem
    quantity: int
    selected_customizations: tuple[SelectedCustomization, ...] = ()

    def __post_init__(self) -> None:
        if self.quantity < 1:
            raise ValueError("quantity must be >= 1")

    @property
    def restaurant_id(self) -> RestaurantId:
        return self.base_item.restaurant_id

    @property
    def item_id(self) -> MenuItemId:
        return self.base_item.item_id

    @property
    def unit_price(self) -> Money:
        deltas = sum(
            (selection.price_delta for selection in self.selected_customizations),
            start=self.base_item.price.amount,
        )
        return Money(amount=deltas, currency=self.base_item.price.currency)

    @property
    def total_price(self) -> Money:
        return self.unit_price.times(self.quantity)

    def with_quantity(self, quantity: int) -> CartItem:
        return replace(self, quantity=quantity)
