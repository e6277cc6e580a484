"""Order directory: who owns, who delivers and where each order stands.

Backs the customer order history and the delivery-person queues, neither of
which can be answered from the event-sourced Order stream directly.
"""

import json

from protean.core.projector import on
from protean.fields import DateTime, Float, Identifier, Integer, String
from protean.utils.globals import current_domain

from fooddash.domain import fooddash
from fooddash.order.events import (
    OrderCancelled,
    OrderDelivered,
    OrderDispatched,
    OrderPlaced,
    OrderProcessingStarted,
)
from fooddash.order.order import Order, OrderStatus


@fooddash.projection
class OrderDirectory:
    order_id = Identifier(identifier=True, required=True)
    customer_id = Identifier(required=True)
    delivery_person_id = Identifier()
    status = String(required=True)
    item_count = Integer(default=0)
    total = Float()
    placed_at = DateTime()
    estimated_delivery = DateTime()
    actual_delivery = DateTime()
    updated_at = DateTime()


@fooddash.projector(projector_for=OrderDirectory, aggregates=[Order])
class OrderDirectoryProjector:
    @on(OrderPlaced)
    def on_order_placed(self, event):
        items = json.loads(event.items) if isinstance(event.items, str) else []
        current_domain.repository_for(OrderDirectory).add(
            OrderDirectory(
                order_id=event.order_id,
                customer_id=event.customer_id,
                status=OrderStatus.PENDING.value,
                item_count=len(items),
                total=event.total,
                placed_at=event.placed_at,
                estimated_delivery=event.estimated_delivery,
                updated_at=event.placed_at,
            )
        )

    def _update_status(self, event, status, updated_at):
        repo = current_domain.repository_for(OrderDirectory)
        entry = repo.get(event.order_id)
        entry.status = status.value
        entry.updated_at = updated_at
        if event.delivery_person_id:
            entry.delivery_person_id = event.delivery_person_id
        if status == OrderStatus.DELIVERED:
            entry.actual_delivery = updated_at
        repo.add(entry)

    @on(OrderProcessingStarted)
    def on_processing_started(self, event):
        self._update_status(event, OrderStatus.PROCESSING, event.started_at)

    @on(OrderDispatched)
    def on_order_dispatched(self, event):
        self._update_status(event, OrderStatus.IN_TRANSIT, event.dispatched_at)

    @on(OrderDelivered)
    def on_order_delivered(self, event):
        self._update_status(event, OrderStatus.DELIVERED, event.delivered_at)

    @on(OrderCancelled)
    def on_order_cancelled(self, event):
        self._update_status(event, OrderStatus.CANCELLED, event.cancelled_at)
