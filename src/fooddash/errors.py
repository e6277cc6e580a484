"""Error taxonomy for carts and orders.

Validation failures subclass Protean's ``ValidationError`` and lookup
failures subclass ``ObjectNotFoundError``, so unit-of-work rollback and the
FastAPI exception handlers treat them like any other framework error.
"""

from protean.exceptions import ObjectNotFoundError, ValidationError


class InvalidQuantity(ValidationError):
    """A cart line was given a quantity below one."""


class ItemNotFound(ValidationError):
    """The cart has no line for the referenced product."""


class ItemUnavailable(ValidationError):
    """The menu item exists but is not currently orderable."""


class EmptyOrder(ValidationError):
    """An order was requested without any lines."""


class InvalidTransition(ValidationError):
    """The requested status change is not allowed from the order's current status."""


class OrderNotFound(ObjectNotFoundError):
    pass


class CartNotFound(ObjectNotFoundError):
    pass


class FoodItemNotFound(ObjectNotFoundError):
    pass
