"""Placing orders.

The new order and the customer's loyalty credit are saved in the handler's
unit of work, so both commit or neither does.
"""

import json

import structlog
from protean import handle
from protean.fields import Identifier, Text
from protean.utils.globals import current_domain

from fooddash.domain import fooddash
from fooddash.loyalty.account import LoyaltyAccount, account_for
from fooddash.order.gateway import OrderGateway
from fooddash.order.order import Order
from fooddash.pricing import loyalty_points_for

logger = structlog.get_logger(__name__)


@fooddash.command(part_of="Order")
class PlaceOrder:
    customer_id = Identifier(required=True)
    items = Text(required=True)  # JSON: list of {food_item_id, name, quantity, unit_price}
    address_id = Identifier(required=True)
    payment_method_id = Identifier(required=True)
    delivery_notes = Text()


def place_new_order(customer_id, lines, address_id, payment_method_id, delivery_notes=None):
    """Create the order and credit loyalty points; must run inside a unit of work."""
    order = Order.place(
        customer_id=customer_id,
        lines=lines,
        address_id=address_id,
        payment_method_id=payment_method_id,
        delivery_notes=delivery_notes,
    )
    OrderGateway().persist_new(order)

    # Points are earned at placement, before the order is fulfilled
    points = loyalty_points_for(order.pricing.total)
    account = account_for(customer_id)
    account.credit(points, order_id=order.id)
    current_domain.repository_for(LoyaltyAccount).add(account)

    logger.info(
        "Order placed",
        order_id=str(order.id),
        customer_id=str(customer_id),
        item_count=len(order.items),
        total=order.pricing.total,
        loyalty_points=points,
    )
    return order


@fooddash.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        lines = json.loads(command.items) if isinstance(command.items, str) else command.items
        return place_new_order(
            customer_id=command.customer_id,
            lines=lines,
            address_id=command.address_id,
            payment_method_id=command.payment_method_id,
            delivery_notes=command.delivery_notes,
        )
