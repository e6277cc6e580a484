"""FoodDash bounded context — menu, shopping cart, orders and loyalty.

Handles the order lifecycle (event-sourced), the shopping cart (CQRS), the
menu that carts snapshot prices from, and the loyalty credit awarded when an
order is placed. Every piece shares one domain so that placing an order, its
loyalty credit and clearing the cart commit in a single unit of work.
"""

from protean.domain import Domain

from fooddash.utils.logging import configure_logging

configure_logging()

fooddash = Domain(name="fooddash")
