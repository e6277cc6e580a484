"""Cart checkout — turns the cart's current lines into an order.

The order, its loyalty credit and the emptied cart are saved in one unit of
work. An empty cart fails with ``EmptyOrder`` and is left as it was.
"""

import structlog
from protean import handle
from protean.fields import Identifier, Text
from protean.utils.globals import current_domain

from fooddash.cart.cart import ShoppingCart
from fooddash.cart.management import load_cart
from fooddash.domain import fooddash
from fooddash.order.placement import place_new_order

logger = structlog.get_logger(__name__)


@fooddash.command(part_of="ShoppingCart")
class CheckoutCart:
    cart_id = Identifier(required=True)
    address_id = Identifier(required=True)
    payment_method_id = Identifier(required=True)
    delivery_notes = Text()


@fooddash.command_handler(part_of=ShoppingCart)
class CheckoutCartHandler:
    @handle(CheckoutCart)
    def checkout(self, command):
        cart = load_cart(command.cart_id)

        order = place_new_order(
            customer_id=cart.customer_id,
            lines=cart.snapshot_lines(),
            address_id=command.address_id,
            payment_method_id=command.payment_method_id,
            delivery_notes=command.delivery_notes,
        )

        cart.clear(reason="checked_out")
        current_domain.repository_for(ShoppingCart).add(cart)

        logger.info("Cart checked out", cart_id=str(cart.id), order_id=str(order.id))
        return order
