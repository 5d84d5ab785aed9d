from __future__ import annotations

from typing import NewType

RestaurantId = NewType("RestaurantId", str)
MenuItemId = NewType("MenuItemId", str)
CartId = NewType("CartId", str)
CartItemId = NewType("CartItemId", str)
OfferId = NewType("OfferId", str)
OrderId = NewType("OrderId", str)
RiderId = NewType("RiderId", str)
AddressId = NewType("AddressId", str)
