"""Order status updates.

Admins and delivery people drive every transition after placement through
this single command; the Order aggregate decides whether it is legal.
"""

import structlog
from protean import handle
from protean.fields import Identifier, String

from fooddash.domain import fooddash
from fooddash.order.gateway import OrderGateway
from fooddash.order.order import Order

logger = structlog.get_logger(__name__)


@fooddash.command(part_of="Order")
class UpdateOrderStatus:
    order_id = Identifier(required=True)
    status = String(required=True, max_length=20)
    notes = String(max_length=500)
    delivery_person_id = Identifier()


@fooddash.command_handler(part_of=Order)
class UpdateOrderStatusHandler:
    @handle(UpdateOrderStatus)
    def update_order_status(self, command):
        gateway = OrderGateway()
        previous = {}

        def transition(order):
            previous["status"] = order.status
            order.update_status(
                command.status,
                notes=command.notes,
                delivery_person_id=command.delivery_person_id,
            )

        order = gateway.persist_transition(command.order_id, transition)

        logger.info(
            "Order status updated",
            order_id=str(order.id),
            from_status=previous["status"],
            to_status=order.status,
            delivery_person_id=str(order.delivery_person_id) if order.delivery_person_id else None,
        )
        return order
