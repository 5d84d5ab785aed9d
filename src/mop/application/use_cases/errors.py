from __future__ import annotations


class OrderNotFoundError(Exception):
    pass


class OrderConflictError(Exception):
    pass


class MenuItemNotFoundError(Exception):
    pass


class RestaurantNotFoundError(Exception):
    pass


class OfferNotFoundError(Exception):
    pass
