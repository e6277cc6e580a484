"""Domain events for the Order aggregate.

Events are the Order's source of truth: they are written to the event store,
replayed through ``@apply`` to rebuild state, and consumed by projectors to
maintain the read models.
"""

from protean.fields import DateTime, Float, Identifier, String, Text

from fooddash.domain import fooddash


@fooddash.event(part_of="Order")
class OrderPlaced:
    """A customer placed an order; it starts out pending."""

    __version__ = 1

    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    items = Text(required=True)  # JSON: list of line dicts, ids included
    address_id = Identifier(required=True)
    payment_method_id = Identifier(required=True)
    delivery_notes = Text()
    subtotal = Float(required=True)
    tax = Float(required=True)
    delivery_fee = Float(required=True)
    total = Float(required=True)
    notes = String(max_length=500)
    placed_at = DateTime(required=True)
    estimated_delivery = DateTime(required=True)


@fooddash.event(part_of="Order")
class OrderProcessingStarted:
    """The kitchen accepted the order and started preparing it."""

    __version__ = 1

    order_id = Identifier(required=True)
    notes = String(max_length=500)
    delivery_person_id = Identifier()
    started_at = DateTime(required=True)


@fooddash.event(part_of="Order")
class OrderDispatched:
    """A delivery person picked the order up; it is in transit."""

    __version__ = 1

    order_id = Identifier(required=True)
    notes = String(max_length=500)
    delivery_person_id = Identifier()
    dispatched_at = DateTime(required=True)


@fooddash.event(part_of="Order")
class OrderDelivered:
    __version__ = 1

    order_id = Identifier(required=True)
    notes = String(max_length=500)
    delivery_person_id = Identifier()
    delivered_at = DateTime(required=True)


@fooddash.event(part_of="Order")
class OrderCancelled:
    __version__ = 1

    order_id = Identifier(required=True)
    notes = String(max_length=500)
    delivery_person_id = Identifier()
    cancelled_at = DateTime(required=True)
