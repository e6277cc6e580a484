"""FoodItem aggregate — a dish on the menu.

Carts snapshot ``price`` when an item is added, so later price changes here
never touch carts already holding the item or orders already placed.
"""

from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, Integer, String, Text

from fooddash.domain import fooddash

POPULAR_RATING_THRESHOLD = 4.5


@fooddash.aggregate
class FoodItem:
    name = String(required=True, max_length=150)
    description = Text()
    price = Float(required=True, min_value=0.0)
    category = String(required=True, max_length=100)
    image_url = String(max_length=500)
    preparation_time = Integer(default=15, min_value=0)
    rating = Float(default=0.0, min_value=0.0, max_value=5.0)
    available = Boolean(default=True)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def name_must_not_be_blank(self):
        if self.name is not None and not self.name.strip():
            raise ValidationError({"name": ["Name cannot be blank"]})

    @classmethod
    def create(cls, name, price, category, description=None, image_url=None, preparation_time=15, rating=0.0):
        now = datetime.now(UTC)
        return cls(
            name=name,
            description=description,
            price=price,
            category=category,
            image_url=image_url,
            preparation_time=preparation_time if preparation_time is not None else 15,
            rating=rating or 0.0,
            available=True,
            created_at=now,
            updated_at=now,
        )

    @property
    def is_popular(self):
        return (self.rating or 0.0) >= POPULAR_RATING_THRESHOLD

    def update_details(self, **changes):
        """Apply the non-None values in ``changes`` to the editable fields."""
        editable = ("name", "description", "price", "category", "image_url", "preparation_time", "rating")
        unknown = set(changes) - set(editable)
        if unknown:
            raise ValidationError({"fields": [f"Cannot update {', '.join(sorted(unknown))}"]})

        for field_name, value in changes.items():
            if value is not None:
                setattr(self, field_name, value)
        self.updated_at = datetime.now(UTC)

    def set_availability(self, available):
        self.available = bool(available)
        self.updated_at = datetime.now(UTC)
