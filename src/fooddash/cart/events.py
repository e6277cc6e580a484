"""Domain events for the ShoppingCart aggregate."""

from protean.fields import Float, Identifier, Integer, String

from fooddash.domain import fooddash


@fooddash.event(part_of="ShoppingCart")
class CartItemAdded:
    """A product was added to the cart, or its quantity increased."""

    __version__ = 1

    cart_id = Identifier(required=True)
    food_item_id = Identifier(required=True)
    name = String()
    unit_price = Float(required=True)
    quantity_added = Integer(required=True)
    new_quantity = Integer(required=True)


@fooddash.event(part_of="ShoppingCart")
class CartQuantityUpdated:
    __version__ = 1

    cart_id = Identifier(required=True)
    food_item_id = Identifier(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)


@fooddash.event(part_of="ShoppingCart")
class CartItemRemoved:
    __version__ = 1

    cart_id = Identifier(required=True)
    food_item_id = Identifier(required=True)


@fooddash.event(part_of="ShoppingCart")
class CartCleared:
    """All lines were dropped by the shopper or after checkout."""

    __version__ = 1

    cart_id = Identifier(required=True)
    items_removed = Integer(required=True)
    reason = String(max_length=50)
