"""Browsing the menu with typed queries."""

import math
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum

from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from fooddash.menu.food_item import FoodItem

ALL_CATEGORIES = "All"
POPULAR_CATEGORY = "Popular"


class MenuSort(Enum):
    PRICE_LOW = "price-low"
    PRICE_HIGH = "price-high"
    RATING = "rating"
    TIME = "time"


# key function, reverse
_SORTS = {
    MenuSort.PRICE_LOW: (lambda item: item.price, False),
    MenuSort.PRICE_HIGH: (lambda item: item.price, True),
    MenuSort.RATING: (lambda item: item.rating or 0.0, True),
    MenuSort.TIME: (lambda item: item.preparation_time or 0, False),
}


@dataclass(frozen=True)
class MenuQuery:
    category: str | None = None
    search: str | None = None
    min_price: float | None = None
    max_price: float | None = None
    sort_by: MenuSort = MenuSort.RATING
    page: int = 1
    limit: int = 20
    include_unavailable: bool = False

    def __post_init__(self):
        if self.page < 1:
            raise ValidationError({"page": ["Page must be at least 1"]})
        if self.limit < 1:
            raise ValidationError({"limit": ["Limit must be at least 1"]})

    def matches(self, item) -> bool:
        if not self.include_unavailable and not item.available:
            return False

        if self.category == POPULAR_CATEGORY:
            if not item.is_popular:
                return False
        elif self.category and self.category != ALL_CATEGORIES:
            if item.category != self.category:
                return False

        if self.search:
            needle = self.search.lower()
            haystack = (item.name or "", item.description or "", item.category or "")
            if not any(needle in text.lower() for text in haystack):
                return False

        if self.min_price is not None and item.price < self.min_price:
            return False
        if self.max_price is not None and item.price > self.max_price:
            return False

        return True


@dataclass
class MenuPage:
    items: list = field(default_factory=list)
    total: int = 0
    page: int = 1
    limit: int = 20

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.total else 0


def browse_menu(query: MenuQuery | None = None) -> MenuPage:
    query = query or MenuQuery()
    candidates = current_domain.repository_for(FoodItem)._dao.query.all().items

    matching = [item for item in candidates if query.matches(item)]
    key, reverse = _SORTS[query.sort_by]
    matching.sort(key=key, reverse=reverse)

    start = (query.page - 1) * query.limit
    return MenuPage(
        items=matching[start : start + query.limit],
        total=len(matching),
        page=query.page,
        limit=query.limit,
    )


def list_categories() -> list[tuple[str, int]]:
    """Category names with the number of menu items in each, alphabetically."""
    items = current_domain.repository_for(FoodItem)._dao.query.all().items
    counts = Counter(item.category for item in items)
    return sorted(counts.items())
