"""Loyalty accounts and the points customers earn by ordering.

Points are credited when an order is placed, in the same unit of work as the
order itself.
"""

from datetime import UTC, datetime

from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import DateTime, Identifier, Integer
from protean.utils.globals import current_domain

from fooddash.domain import fooddash


@fooddash.event(part_of="LoyaltyAccount")
class LoyaltyPointsCredited:
    __version__ = 1

    customer_id = Identifier(required=True)
    order_id = Identifier(required=True)
    points = Integer(required=True)
    balance = Integer(required=True)
    credited_at = DateTime(required=True)


@fooddash.aggregate
class LoyaltyAccount:
    customer_id = Identifier(identifier=True, required=True)
    points = Integer(default=0, min_value=0)
    updated_at = DateTime()

    def credit(self, points, order_id):
        if points < 0:
            raise ValidationError({"points": ["Cannot credit a negative number of points"]})

        now = datetime.now(UTC)
        self.points = (self.points or 0) + points
        self.updated_at = now

        self.raise_(
            LoyaltyPointsCredited(
                customer_id=str(self.customer_id),
                order_id=str(order_id),
                points=points,
                balance=self.points,
                credited_at=now,
            )
        )


def account_for(customer_id):
    """Fetch the customer's account, opening an empty one on first use."""
    try:
        return current_domain.repository_for(LoyaltyAccount).get(str(customer_id))
    except ObjectNotFoundError:
        return LoyaltyAccount(customer_id=str(customer_id), points=0)


def loyalty_balance(customer_id) -> int:
    try:
        return current_domain.repository_for(LoyaltyAccount).get(str(customer_id)).points or 0
    except ObjectNotFoundError:
        return 0
