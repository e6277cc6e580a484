"""Order aggregate (Event Sourced) — the core of the fooddash domain.

Every state change is captured as a domain event and the current state is
rebuilt by replaying events through the ``@apply`` methods. The event stream
doubles as the status history and gives each order optimistic concurrency:
two writers that loaded the same version cannot both append.

State Machine (5 states):
    PENDING → PROCESSING → IN_TRANSIT → DELIVERED
    CANCELLED (from PENDING or PROCESSING)

DELIVERED and CANCELLED are terminal.
"""

import json
from datetime import UTC, datetime
from enum import Enum
from uuid import uuid4

from protean import apply, invariant
from protean.exceptions import ValidationError
from protean.fields import (
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    String,
    Text,
    ValueObject,
)

from fooddash.domain import fooddash
from fooddash.errors import EmptyOrder, InvalidQuantity, InvalidTransition
from fooddash.order.events import (
    OrderCancelled,
    OrderDelivered,
    OrderDispatched,
    OrderPlaced,
    OrderProcessingStarted,
)
from fooddash.pricing import ESTIMATED_DELIVERY_WINDOW, compute_totals, lines_subtotal, to_money


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    IN_TRANSIT = "in-transit"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.PROCESSING, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.IN_TRANSIT, OrderStatus.CANCELLED},
    OrderStatus.IN_TRANSIT: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
}

TERMINAL_STATUSES = frozenset(status for status, targets in _VALID_TRANSITIONS.items() if not targets)

PLACED_NOTE = "Order placed"


def default_note(status):
    return f"Order {status.value}"


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@fooddash.value_object(part_of="Order")
class OrderPricing:
    """Billable breakdown, fixed when the order is placed and never recomputed."""

    subtotal = Float(default=0.0)
    tax = Float(default=0.0)
    delivery_fee = Float(default=0.0)
    total = Float(default=0.0)

    @invariant.post
    def total_must_equal_its_components(self):
        components = to_money(self.subtotal) + to_money(self.tax) + to_money(self.delivery_fee)
        if to_money(self.total) != components:
            raise ValidationError({"total": [f"Total {self.total} does not equal subtotal + tax + delivery fee"]})


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@fooddash.entity(part_of="Order")
class OrderItem:
    """A snapshot of one cart line at the moment the order was placed."""

    food_item_id = Identifier(required=True)
    name = String(max_length=150)
    quantity = Integer(required=True, min_value=1)
    unit_price = Float(required=True, min_value=0.0)


@fooddash.entity(part_of="Order")
class StatusUpdate:
    """One entry in the order's append-only status history."""

    status = String(required=True, choices=OrderStatus)
    notes = String(max_length=500)
    recorded_at = DateTime(required=True)


# ---------------------------------------------------------------------------
# Aggregate Root (Event Sourced)
# ---------------------------------------------------------------------------
@fooddash.aggregate(is_event_sourced=True)
class Order:
    customer_id = Identifier(required=True)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    items = HasMany(OrderItem)
    pricing = ValueObject(OrderPricing)
    address_id = Identifier()
    payment_method_id = Identifier()
    delivery_notes = Text()
    delivery_person_id = Identifier()
    status_history = HasMany(StatusUpdate)
    created_at = DateTime()
    estimated_delivery = DateTime()
    actual_delivery = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def place(cls, customer_id, lines, address_id, payment_method_id, delivery_notes=None):
        """Place a new order from a snapshot of cart lines.

        Args:
            customer_id: The customer placing the order.
            lines: List of dicts with food_item_id, name, quantity, unit_price.
            address_id: Delivery address reference.
            payment_method_id: Payment method reference.
            delivery_notes: Free-text instructions for the courier.
        """
        if not lines:
            raise EmptyOrder({"items": ["An order needs at least one item"]})
        for line in lines:
            if int(line.get("quantity") or 0) < 1:
                raise InvalidQuantity({"quantity": [f"Quantity for {line.get('food_item_id')} must be at least 1"]})

        breakdown = compute_totals(lines_subtotal(lines))
        now = datetime.now(UTC)

        # Pre-generate item IDs for deterministic replay
        items_with_ids = [
            {
                "id": str(uuid4()),
                "food_item_id": str(line["food_item_id"]),
                "name": line.get("name"),
                "quantity": int(line["quantity"]),
                "unit_price": float(line["unit_price"]),
            }
            for line in lines
        ]

        order = cls._create_new()
        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                customer_id=str(customer_id),
                items=json.dumps(items_with_ids),
                address_id=str(address_id),
                payment_method_id=str(payment_method_id),
                delivery_notes=delivery_notes,
                notes=PLACED_NOTE,
                placed_at=now,
                estimated_delivery=now + ESTIMATED_DELIVERY_WINDOW,
                **breakdown.as_floats(),
            )
        )
        return order

    # -------------------------------------------------------------------
    # State transition helpers
    # -------------------------------------------------------------------
    @property
    def is_terminal(self):
        return OrderStatus(self.status) in TERMINAL_STATUSES

    def can_transition_to(self, target_status):
        return target_status in _VALID_TRANSITIONS.get(OrderStatus(self.status), set())

    def _assert_can_transition(self, target_status):
        """Validate that the current state allows transition to target."""
        current = OrderStatus(self.status)
        if not self.can_transition_to(target_status):
            raise InvalidTransition({"status": [f"Cannot transition from {current.value} to {target_status.value}"]})

    @staticmethod
    def _parse_status(value):
        if isinstance(value, OrderStatus):
            return value
        try:
            return OrderStatus(value)
        except ValueError:
            raise InvalidTransition({"status": [f"Unknown order status: {value}"]}) from None

    # -------------------------------------------------------------------
    # Order lifecycle transitions
    # -------------------------------------------------------------------
    def update_status(self, new_status, notes=None, delivery_person_id=None):
        """Move the order to ``new_status``, appending exactly one history entry."""
        target = self._parse_status(new_status)
        self._assert_can_transition(target)

        transition = {
            OrderStatus.PROCESSING: self.start_processing,
            OrderStatus.IN_TRANSIT: self.dispatch,
            OrderStatus.DELIVERED: self.record_delivery,
            OrderStatus.CANCELLED: self.cancel,
        }[target]
        transition(notes=notes, delivery_person_id=delivery_person_id)

    def start_processing(self, notes=None, delivery_person_id=None):
        self._assert_can_transition(OrderStatus.PROCESSING)
        self.raise_(
            OrderProcessingStarted(
                order_id=str(self.id),
                notes=notes or default_note(OrderStatus.PROCESSING),
                delivery_person_id=delivery_person_id,
                started_at=datetime.now(UTC),
            )
        )

    def dispatch(self, notes=None, delivery_person_id=None):
        """Hand the order to a courier."""
        self._assert_can_transition(OrderStatus.IN_TRANSIT)
        self.raise_(
            OrderDispatched(
                order_id=str(self.id),
                notes=notes or default_note(OrderStatus.IN_TRANSIT),
                delivery_person_id=delivery_person_id,
                dispatched_at=datetime.now(UTC),
            )
        )

    def record_delivery(self, notes=None, delivery_person_id=None):
        self._assert_can_transition(OrderStatus.DELIVERED)
        self.raise_(
            OrderDelivered(
                order_id=str(self.id),
                notes=notes or default_note(OrderStatus.DELIVERED),
                delivery_person_id=delivery_person_id,
                delivered_at=datetime.now(UTC),
            )
        )

    def cancel(self, notes=None, delivery_person_id=None):
        self._assert_can_transition(OrderStatus.CANCELLED)
        self.raise_(
            OrderCancelled(
                order_id=str(self.id),
                notes=notes or default_note(OrderStatus.CANCELLED),
                delivery_person_id=delivery_person_id,
                cancelled_at=datetime.now(UTC),
            )
        )

    # -------------------------------------------------------------------
    # @apply methods: rebuild state during event replay
    # -------------------------------------------------------------------
    def _record_status(self, status, notes, recorded_at, delivery_person_id=None):
        self.status = status.value
        if delivery_person_id:
            self.delivery_person_id = delivery_person_id
        self.updated_at = recorded_at
        self.add_status_history(
            StatusUpdate(
                id=f"{self.id}-{len(self.status_history or []) + 1}",
                status=status.value,
                notes=notes,
                recorded_at=recorded_at,
            )
        )

    @apply
    def _on_order_placed(self, event: OrderPlaced):
        self.id = event.order_id
        self.customer_id = event.customer_id
        self.address_id = event.address_id
        self.payment_method_id = event.payment_method_id
        self.delivery_notes = event.delivery_notes
        self.created_at = event.placed_at
        self.estimated_delivery = event.estimated_delivery

        items_data = json.loads(event.items) if isinstance(event.items, str) else []
        self.items = [OrderItem(**item_data) for item_data in items_data]

        self.pricing = OrderPricing(
            subtotal=event.subtotal,
            tax=event.tax,
            delivery_fee=event.delivery_fee,
            total=event.total,
        )
        self._record_status(OrderStatus.PENDING, event.notes or PLACED_NOTE, event.placed_at)

    @apply
    def _on_processing_started(self, event: OrderProcessingStarted):
        self._record_status(OrderStatus.PROCESSING, event.notes, event.started_at, event.delivery_person_id)

    @apply
    def _on_order_dispatched(self, event: OrderDispatched):
        self._record_status(OrderStatus.IN_TRANSIT, event.notes, event.dispatched_at, event.delivery_person_id)

    @apply
    def _on_order_delivered(self, event: OrderDelivered):
        self.actual_delivery = event.delivered_at
        self._record_status(OrderStatus.DELIVERED, event.notes, event.delivered_at, event.delivery_person_id)

    @apply
    def _on_order_cancelled(self, event: OrderCancelled):
        self._record_status(OrderStatus.CANCELLED, event.notes, event.cancelled_at, event.delivery_person_id)
