"""Cart creation and clearing."""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier
from protean.utils.globals import current_domain

from fooddash.cart.cart import ShoppingCart
from fooddash.domain import fooddash
from fooddash.errors import CartNotFound


@fooddash.command(part_of="ShoppingCart")
class CreateCart:
    customer_id = Identifier(required=True)


@fooddash.command(part_of="ShoppingCart")
class ClearCart:
    cart_id = Identifier(required=True)


def load_cart(cart_id):
    try:
        return current_domain.repository_for(ShoppingCart).get(cart_id)
    except ObjectNotFoundError as exc:
        raise CartNotFound({"cart_id": [f"Cart {cart_id} does not exist"]}) from exc


@fooddash.command_handler(part_of=ShoppingCart)
class ManageCartHandler:
    @handle(CreateCart)
    def create_cart(self, command):
        cart = ShoppingCart.create(customer_id=command.customer_id)
        current_domain.repository_for(ShoppingCart).add(cart)
        return str(cart.id)

    @handle(ClearCart)
    def clear_cart(self, command):
        cart = load_cart(command.cart_id)
        cart.clear()
        current_domain.repository_for(ShoppingCart).add(cart)
