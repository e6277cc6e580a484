"""Menu administration commands."""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Boolean, Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from fooddash.domain import fooddash
from fooddash.errors import FoodItemNotFound
from fooddash.menu.food_item import FoodItem

logger = structlog.get_logger(__name__)


@fooddash.command(part_of="FoodItem")
class AddFoodItem:
    name = String(required=True, max_length=150)
    description = Text()
    price = Float(required=True, min_value=0.0)
    category = String(required=True, max_length=100)
    image_url = String(max_length=500)
    preparation_time = Integer(default=15, min_value=0)
    rating = Float(default=0.0)


@fooddash.command(part_of="FoodItem")
class UpdateFoodItem:
    food_item_id = Identifier(required=True)
    name = String(max_length=150)
    description = Text()
    price = Float(min_value=0.0)
    category = String(max_length=100)
    image_url = String(max_length=500)
    preparation_time = Integer(min_value=0)
    rating = Float()


@fooddash.command(part_of="FoodItem")
class SetFoodItemAvailability:
    food_item_id = Identifier(required=True)
    available = Boolean(required=True)


@fooddash.command(part_of="FoodItem")
class RemoveFoodItem:
    food_item_id = Identifier(required=True)


def load_food_item(food_item_id):
    """Fetch a menu item, translating the framework miss into ``FoodItemNotFound``."""
    try:
        return current_domain.repository_for(FoodItem).get(food_item_id)
    except ObjectNotFoundError as exc:
        raise FoodItemNotFound({"food_item_id": [f"Food item {food_item_id} does not exist"]}) from exc


@fooddash.command_handler(part_of=FoodItem)
class ManageMenuHandler:
    @handle(AddFoodItem)
    def add_food_item(self, command):
        item = FoodItem.create(
            name=command.name,
            description=command.description,
            price=command.price,
            category=command.category,
            image_url=command.image_url,
            preparation_time=command.preparation_time,
            rating=command.rating,
        )
        current_domain.repository_for(FoodItem).add(item)
        logger.info("Food item added", food_item_id=str(item.id), category=item.category, price=item.price)
        return str(item.id)

    @handle(UpdateFoodItem)
    def update_food_item(self, command):
        item = load_food_item(command.food_item_id)
        item.update_details(
            name=command.name,
            description=command.description,
            price=command.price,
            category=command.category,
            image_url=command.image_url,
            preparation_time=command.preparation_time,
            rating=command.rating,
        )
        current_domain.repository_for(FoodItem).add(item)

    @handle(SetFoodItemAvailability)
    def set_availability(self, command):
        item = load_food_item(command.food_item_id)
        item.set_availability(command.available)
        current_domain.repository_for(FoodItem).add(item)
        logger.info("Food item availability changed", food_item_id=str(item.id), available=item.available)

    @handle(RemoveFoodItem)
    def remove_food_item(self, command):
        item = load_food_item(command.food_item_id)
        # Orders keep their own copy of name and price, so past orders are unaffected
        current_domain.repository_for(FoodItem)._dao.delete(item)
        logger.info("Food item removed", food_item_id=str(item.id))
