"""FoodDash API package."""

from fooddash.api.routes import cart_router, delivery_router, loyalty_router, menu_router, order_router

__all__ = ["menu_router", "cart_router", "order_router", "delivery_router", "loyalty_router"]
