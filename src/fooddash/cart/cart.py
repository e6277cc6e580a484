"""Shopping Cart aggregate (CQRS) — the shopper's pending lines before checkout.

Each line snapshots the unit price at add-to-cart time; the price is never
re-read from the menu afterwards. Lines are keyed by product, so adding a
product that is already in the cart bumps its quantity instead of creating a
second line.
"""

from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String

from fooddash.cart.events import CartCleared, CartItemAdded, CartItemRemoved, CartQuantityUpdated
from fooddash.domain import fooddash
from fooddash.errors import InvalidQuantity, ItemNotFound
from fooddash.pricing import compute_totals, lines_subtotal


@fooddash.entity(part_of="ShoppingCart")
class CartLine:
    food_item_id = Identifier(required=True)
    name = String(max_length=150)
    unit_price = Float(required=True, min_value=0.0)
    quantity = Integer(required=True, min_value=1)
    added_at = DateTime()


@fooddash.aggregate
class ShoppingCart:
    customer_id = Identifier(required=True)
    items = HasMany(CartLine)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def create(cls, customer_id):
        now = datetime.now(UTC)
        return cls(customer_id=customer_id, created_at=now, updated_at=now)

    def _line_for(self, food_item_id):
        return next((line for line in self.items if str(line.food_item_id) == str(food_item_id)), None)

    # -------------------------------------------------------------------
    # Line management
    # -------------------------------------------------------------------
    def add_item(self, food_item_id, unit_price, quantity=1, name=None):
        """Add ``quantity`` of a product at the given snapshot price."""
        if quantity is None or quantity < 1:
            raise InvalidQuantity({"quantity": ["Quantity must be at least 1"]})
        if unit_price is None or unit_price < 0:
            raise ValidationError({"unit_price": ["Unit price cannot be negative"]})

        now = datetime.now(UTC)
        line = self._line_for(food_item_id)
        if line:
            line.quantity += quantity
        else:
            line = CartLine(
                food_item_id=food_item_id,
                name=name,
                unit_price=unit_price,
                quantity=quantity,
                added_at=now,
            )
            self.add_items(line)
        self.updated_at = now

        self.raise_(
            CartItemAdded(
                cart_id=str(self.id),
                food_item_id=str(food_item_id),
                name=line.name,
                unit_price=line.unit_price,
                quantity_added=quantity,
                new_quantity=line.quantity,
            )
        )

    def update_quantity(self, food_item_id, new_quantity):
        """Set a line's quantity. Values below one are ignored; removal is a separate call."""
        line = self._line_for(food_item_id)
        if line is None:
            raise ItemNotFound({"food_item_id": [f"Item {food_item_id} is not in the cart"]})
        if new_quantity is None or new_quantity < 1:
            return

        previous_quantity = line.quantity
        line.quantity = new_quantity
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartQuantityUpdated(
                cart_id=str(self.id),
                food_item_id=str(food_item_id),
                previous_quantity=previous_quantity,
                new_quantity=new_quantity,
            )
        )

    def remove_item(self, food_item_id):
        line = self._line_for(food_item_id)
        if line is None:
            return

        self.remove_items(line)
        self.updated_at = datetime.now(UTC)

        self.raise_(CartItemRemoved(cart_id=str(self.id), food_item_id=str(food_item_id)))

    def clear(self, reason="cleared"):
        count = len(self.items)
        if count == 0:
            return

        for line in list(self.items):
            self.remove_items(line)
        self.updated_at = datetime.now(UTC)

        self.raise_(CartCleared(cart_id=str(self.id), items_removed=count, reason=reason))

    # -------------------------------------------------------------------
    # Pricing
    # -------------------------------------------------------------------
    def subtotal(self):
        """Sum of ``unit_price * quantity`` over all lines, as a cent-rounded Decimal."""
        return lines_subtotal(self.items)

    def price_preview(self):
        return compute_totals(self.subtotal())

    def snapshot_lines(self):
        """Plain-dict copy of the lines, in cart order, for order placement."""
        return [
            {
                "food_item_id": str(line.food_item_id),
                "name": line.name,
                "unit_price": line.unit_price,
                "quantity": line.quantity,
            }
            for line in self.items
        ]
