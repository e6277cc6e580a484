"""Typed query parameters for order listings.

``status`` accepts an exact status literal or one of the scopes below:

- ``"active"``: pending, processing or in-transit
- ``"completed"``: delivered or cancelled
- ``"all"``: every status (admin listing only)

For delivery listings ``"pending"`` means the pickup queue: processing orders
with no courier yet.
"""

import math
from dataclasses import dataclass

from protean.exceptions import ValidationError

from fooddash.order.order import OrderStatus

ACTIVE_SCOPE = "active"
COMPLETED_SCOPE = "completed"
PICKUP_SCOPE = OrderStatus.PENDING.value

ACTIVE_STATUSES = frozenset(
    {OrderStatus.PENDING.value, OrderStatus.PROCESSING.value, OrderStatus.IN_TRANSIT.value}
)
COMPLETED_STATUSES = frozenset({OrderStatus.DELIVERED.value, OrderStatus.CANCELLED.value})
PICKUP_STATUSES = frozenset({OrderStatus.PROCESSING.value})

UNASSIGNED = object()


def statuses_for(scope):
    """Expand a status scope into concrete status literals; ``None`` means any."""
    if scope is None:
        return None
    if scope == ACTIVE_SCOPE:
        return ACTIVE_STATUSES
    if scope == COMPLETED_SCOPE:
        return COMPLETED_STATUSES
    return frozenset({scope})


@dataclass(frozen=True)
class CustomerOrderQuery:
    customer_id: str
    status: str | None = None

    def lookup(self):
        """``(statuses, equality filters)`` for the read-model query."""
        return statuses_for(self.status), {"customer_id": str(self.customer_id)}

    def matches(self, entry) -> bool:
        statuses = statuses_for(self.status)
        if str(entry.customer_id) != str(self.customer_id):
            return False
        return statuses is None or entry.status in statuses


@dataclass(frozen=True)
class DeliveryOrderQuery:
    delivery_person_id: str | None = None
    status: str | None = None

    def _criteria(self):
        """Return ``(statuses, assignee)``; assignee is a courier id, UNASSIGNED or None (anyone)."""
        courier = str(self.delivery_person_id) if self.delivery_person_id else None

        if self.status is None:
            if courier:
                return None, courier
            return PICKUP_STATUSES, UNASSIGNED

        if self.status == PICKUP_SCOPE:
            return PICKUP_STATUSES, UNASSIGNED

        if self.status == ACTIVE_SCOPE:
            return frozenset({OrderStatus.IN_TRANSIT.value}), courier

        if self.status == COMPLETED_SCOPE:
            return COMPLETED_STATUSES, courier

        return frozenset({self.status}), courier or UNASSIGNED

    def lookup(self):
        statuses, assignee = self._criteria()
        criteria = {"delivery_person_id": assignee} if isinstance(assignee, str) else {}
        return statuses, criteria

    def matches(self, entry) -> bool:
        statuses, assignee = self._criteria()
        if statuses is not None and entry.status not in statuses:
            return False
        if assignee is UNASSIGNED:
            return not entry.delivery_person_id
        if assignee is not None:
            return str(entry.delivery_person_id) == assignee
        return True


ALL_SCOPE = "all"


@dataclass(frozen=True)
class AdminOrderQuery:
    """Back-office listing over every order, newest first and paginated.

    ``search`` is a case-insensitive substring of the order id or customer id.
    """

    status: str | None = None
    search: str | None = None
    page: int = 1
    limit: int = 10

    def __post_init__(self):
        if self.page < 1:
            raise ValidationError({"page": ["Page must be at least 1"]})
        if self.limit < 1:
            raise ValidationError({"limit": ["Limit must be at least 1"]})

    def _statuses(self):
        if self.status in (None, ALL_SCOPE):
            return frozenset(status.value for status in OrderStatus)
        return statuses_for(self.status)

    def lookup(self):
        # Query one status at a time so a single read never hits the default page size
        return self._statuses(), {}

    def matches(self, entry) -> bool:
        if entry.status not in self._statuses():
            return False
        if not self.search:
            return True
        needle = self.search.lower()
        return needle in str(entry.order_id).lower() or needle in str(entry.customer_id).lower()


@dataclass
class OrderPage:
    orders: list
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.total else 0
