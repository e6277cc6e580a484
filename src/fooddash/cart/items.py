"""Cart line management.

``AddToCart`` looks the dish up on the menu and snapshots its current price
and name onto the cart line.
"""

from protean import handle
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from fooddash.cart.cart import ShoppingCart
from fooddash.cart.management import load_cart
from fooddash.domain import fooddash
from fooddash.errors import ItemUnavailable
from fooddash.menu.management import load_food_item


@fooddash.command(part_of="ShoppingCart")
class AddToCart:
    cart_id = Identifier(required=True)
    food_item_id = Identifier(required=True)
    quantity = Integer(default=1)


@fooddash.command(part_of="ShoppingCart")
class UpdateCartQuantity:
    cart_id = Identifier(required=True)
    food_item_id = Identifier(required=True)
    new_quantity = Integer(required=True)


@fooddash.command(part_of="ShoppingCart")
class RemoveFromCart:
    cart_id = Identifier(required=True)
    food_item_id = Identifier(required=True)


@fooddash.command_handler(part_of=ShoppingCart)
class ManageCartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = load_cart(command.cart_id)

        food_item = load_food_item(command.food_item_id)
        if not food_item.available:
            raise ItemUnavailable({"food_item_id": [f"{food_item.name} is not available right now"]})

        cart.add_item(
            food_item_id=str(food_item.id),
            unit_price=food_item.price,
            quantity=command.quantity if command.quantity is not None else 1,
            name=food_item.name,
        )
        repo.add(cart)

    @handle(UpdateCartQuantity)
    def update_cart_quantity(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = load_cart(command.cart_id)
        cart.update_quantity(command.food_item_id, command.new_quantity)
        repo.add(cart)

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = load_cart(command.cart_id)
        cart.remove_item(command.food_item_id)
        repo.add(cart)
