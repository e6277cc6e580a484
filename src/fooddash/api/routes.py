"""FastAPI endpoints for the FoodDash domain."""

import json

from fastapi import APIRouter, Query
from protean.utils.globals import current_domain

from fooddash.api.schemas import (
    AddFoodItemRequest,
    AddToCartRequest,
    AdminOrderListResponse,
    CartIdResponse,
    CartLineResponse,
    CartResponse,
    CategoryListResponse,
    CategoryResponse,
    CheckoutRequest,
    CreateCartRequest,
    FoodItemIdResponse,
    FoodItemResponse,
    LoyaltyBalanceResponse,
    MenuPageResponse,
    OrderItemResponse,
    OrderListResponse,
    OrderResponse,
    PlaceOrderRequest,
    PricingSchema,
    SetAvailabilityRequest,
    StatusResponse,
    StatusUpdateResponse,
    UpdateCartQuantityRequest,
    UpdateFoodItemRequest,
    UpdateOrderStatusRequest,
)
from fooddash.cart.checkout import CheckoutCart
from fooddash.cart.items import AddToCart, RemoveFromCart, UpdateCartQuantity
from fooddash.cart.management import ClearCart, CreateCart, load_cart
from fooddash.loyalty.account import loyalty_balance
from fooddash.menu.browsing import MenuQuery, MenuSort, browse_menu, list_categories
from fooddash.menu.management import (
    AddFoodItem,
    RemoveFoodItem,
    SetFoodItemAvailability,
    UpdateFoodItem,
    load_food_item,
)
from fooddash.order.gateway import OrderGateway
from fooddash.order.placement import PlaceOrder
from fooddash.order.queries import AdminOrderQuery
from fooddash.order.status import UpdateOrderStatus
from fooddash.pricing import to_money

menu_router = APIRouter(prefix="/menu", tags=["menu"])
cart_router = APIRouter(prefix="/carts", tags=["carts"])
order_router = APIRouter(prefix="/orders", tags=["orders"])
delivery_router = APIRouter(prefix="/deliveries", tags=["deliveries"])
loyalty_router = APIRouter(prefix="/loyalty", tags=["loyalty"])


def _timestamp(value):
    return value.isoformat() if value else None


def _food_item_response(item) -> FoodItemResponse:
    return FoodItemResponse(
        food_item_id=str(item.id),
        name=item.name,
        description=item.description,
        price=item.price,
        category=item.category,
        image_url=item.image_url,
        preparation_time=item.preparation_time,
        rating=item.rating,
        available=item.available,
        popular=item.is_popular,
    )


def _cart_response(cart) -> CartResponse:
    return CartResponse(
        cart_id=str(cart.id),
        customer_id=str(cart.customer_id),
        items=[
            CartLineResponse(
                food_item_id=str(line.food_item_id),
                name=line.name,
                unit_price=line.unit_price,
                quantity=line.quantity,
                line_total=float(to_money(line.unit_price) * line.quantity),
            )
            for line in cart.items
        ],
        pricing=PricingSchema(**cart.price_preview().as_floats()),
    )


def _order_response(order) -> OrderResponse:
    return OrderResponse(
        order_id=str(order.id),
        customer_id=str(order.customer_id),
        status=order.status,
        items=[
            OrderItemResponse(
                food_item_id=str(item.food_item_id),
                name=item.name,
                quantity=item.quantity,
                unit_price=item.unit_price,
            )
            for item in order.items
        ],
        pricing=PricingSchema(
            subtotal=order.pricing.subtotal,
            tax=order.pricing.tax,
            delivery_fee=order.pricing.delivery_fee,
            total=order.pricing.total,
        ),
        address_id=str(order.address_id) if order.address_id else None,
        payment_method_id=str(order.payment_method_id) if order.payment_method_id else None,
        delivery_notes=order.delivery_notes,
        delivery_person_id=str(order.delivery_person_id) if order.delivery_person_id else None,
        status_history=[
            StatusUpdateResponse(status=entry.status, notes=entry.notes, recorded_at=_timestamp(entry.recorded_at))
            for entry in order.status_history
        ],
        created_at=_timestamp(order.created_at),
        estimated_delivery=_timestamp(order.estimated_delivery),
        actual_delivery=_timestamp(order.actual_delivery),
    )


# --- Menu endpoints ---


@menu_router.get("", response_model=MenuPageResponse)
async def get_menu(
    category: str | None = None,
    search: str | None = None,
    min_price: float | None = Query(None, ge=0),
    max_price: float | None = Query(None, ge=0),
    sort_by: MenuSort = MenuSort.RATING,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    include_unavailable: bool = False,
) -> MenuPageResponse:
    result = browse_menu(
        MenuQuery(
            category=category,
            search=search,
            min_price=min_price,
            max_price=max_price,
            sort_by=sort_by,
            page=page,
            limit=limit,
            include_unavailable=include_unavailable,
        )
    )
    return MenuPageResponse(
        items=[_food_item_response(item) for item in result.items],
        total=result.total,
        page=result.page,
        limit=result.limit,
        total_pages=result.total_pages,
    )


@menu_router.get("/categories", response_model=CategoryListResponse)
async def get_categories() -> CategoryListResponse:
    return CategoryListResponse(
        categories=[CategoryResponse(name=name, count=count) for name, count in list_categories()]
    )


@menu_router.get("/{food_item_id}", response_model=FoodItemResponse)
async def get_food_item(food_item_id: str) -> FoodItemResponse:
    return _food_item_response(load_food_item(food_item_id))


@menu_router.post("", status_code=201, response_model=FoodItemIdResponse)
async def add_food_item(body: AddFoodItemRequest) -> FoodItemIdResponse:
    command = AddFoodItem(
        name=body.name,
        description=body.description,
        price=body.price,
        category=body.category,
        image_url=body.image_url,
        preparation_time=body.preparation_time,
        rating=body.rating,
    )
    result = current_domain.process(command, asynchronous=False)
    return FoodItemIdResponse(food_item_id=result)


@menu_router.put("/{food_item_id}", response_model=StatusResponse)
async def update_food_item(food_item_id: str, body: UpdateFoodItemRequest) -> StatusResponse:
    command = UpdateFoodItem(
        food_item_id=food_item_id,
        name=body.name,
        description=body.description,
        price=body.price,
        category=body.category,
        image_url=body.image_url,
        preparation_time=body.preparation_time,
        rating=body.rating,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@menu_router.put("/{food_item_id}/availability", response_model=StatusResponse)
async def set_food_item_availability(food_item_id: str, body: SetAvailabilityRequest) -> StatusResponse:
    command = SetFoodItemAvailability(food_item_id=food_item_id, available=body.available)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@menu_router.delete("/{food_item_id}", response_model=StatusResponse)
async def remove_food_item(food_item_id: str) -> StatusResponse:
    current_domain.process(RemoveFoodItem(food_item_id=food_item_id), asynchronous=False)
    return StatusResponse()


# --- Cart endpoints ---


@cart_router.post("", status_code=201, response_model=CartIdResponse)
async def create_cart(body: CreateCartRequest) -> CartIdResponse:
    result = current_domain.process(CreateCart(customer_id=body.customer_id), asynchronous=False)
    return CartIdResponse(cart_id=result)


@cart_router.get("/{cart_id}", response_model=CartResponse)
async def get_cart(cart_id: str) -> CartResponse:
    return _cart_response(load_cart(cart_id))


@cart_router.post("/{cart_id}/items", response_model=CartResponse)
async def add_cart_item(cart_id: str, body: AddToCartRequest) -> CartResponse:
    command = AddToCart(cart_id=cart_id, food_item_id=body.food_item_id, quantity=body.quantity)
    current_domain.process(command, asynchronous=False)
    return _cart_response(load_cart(cart_id))


@cart_router.put("/{cart_id}/items/{food_item_id}", response_model=CartResponse)
async def update_cart_item_quantity(cart_id: str, food_item_id: str, body: UpdateCartQuantityRequest) -> CartResponse:
    command = UpdateCartQuantity(cart_id=cart_id, food_item_id=food_item_id, new_quantity=body.new_quantity)
    current_domain.process(command, asynchronous=False)
    return _cart_response(load_cart(cart_id))


@cart_router.delete("/{cart_id}/items/{food_item_id}", response_model=CartResponse)
async def remove_cart_item(cart_id: str, food_item_id: str) -> CartResponse:
    current_domain.process(RemoveFromCart(cart_id=cart_id, food_item_id=food_item_id), asynchronous=False)
    return _cart_response(load_cart(cart_id))


@cart_router.delete("/{cart_id}/items", response_model=CartResponse)
async def clear_cart(cart_id: str) -> CartResponse:
    current_domain.process(ClearCart(cart_id=cart_id), asynchronous=False)
    return _cart_response(load_cart(cart_id))


@cart_router.post("/{cart_id}/checkout", status_code=201, response_model=OrderResponse)
async def checkout_cart(cart_id: str, body: CheckoutRequest) -> OrderResponse:
    command = CheckoutCart(
        cart_id=cart_id,
        address_id=body.address_id,
        payment_method_id=body.payment_method_id,
        delivery_notes=body.delivery_notes,
    )
    order = current_domain.process(command, asynchronous=False)
    return _order_response(order)


# --- Order endpoints ---


@order_router.post("", status_code=201, response_model=OrderResponse)
async def place_order(body: PlaceOrderRequest) -> OrderResponse:
    command = PlaceOrder(
        customer_id=body.customer_id,
        items=json.dumps([item.model_dump() for item in body.items]),
        address_id=body.address_id,
        payment_method_id=body.payment_method_id,
        delivery_notes=body.delivery_notes,
    )
    order = current_domain.process(command, asynchronous=False)
    return _order_response(order)


@order_router.get("", response_model=OrderListResponse)
async def list_customer_orders(customer_id: str, status: str | None = None) -> OrderListResponse:
    """A customer's orders, newest first. ``status`` may be ``active``, ``completed`` or a literal status."""
    orders = OrderGateway().list_by_customer(customer_id, status=status)
    return OrderListResponse(orders=[_order_response(order) for order in orders])


@order_router.get("/admin", response_model=AdminOrderListResponse)
async def list_all_orders(
    status: str | None = None,
    search: str | None = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
) -> AdminOrderListResponse:
    """Every order, newest first. ``status`` may be ``all``, a scope or a literal status."""
    result = OrderGateway().list_for_admin(AdminOrderQuery(status=status, search=search, page=page, limit=limit))
    return AdminOrderListResponse(
        orders=[_order_response(order) for order in result.orders],
        total=result.total,
        page=result.page,
        limit=result.limit,
        total_pages=result.total_pages,
    )


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str) -> OrderResponse:
    return _order_response(OrderGateway().find_by_id(order_id))


@order_router.patch("/{order_id}/status", response_model=OrderResponse)
async def update_order_status(order_id: str, body: UpdateOrderStatusRequest) -> OrderResponse:
    command = UpdateOrderStatus(
        order_id=order_id,
        status=body.status,
        notes=body.notes,
        delivery_person_id=body.delivery_person_id,
    )
    order = current_domain.process(command, asynchronous=False)
    return _order_response(order)


# --- Delivery endpoints ---


@delivery_router.get("", response_model=OrderListResponse)
async def list_delivery_orders(delivery_person_id: str | None = None, status: str | None = None) -> OrderListResponse:
    """Orders for delivery staff.

    Without a delivery person this is the pickup queue of unassigned orders
    being prepared; with one it is that person's orders, narrowed by ``status``.
    """
    orders = OrderGateway().list_by_delivery_person(delivery_person_id, status=status)
    return OrderListResponse(orders=[_order_response(order) for order in orders])


# --- Loyalty endpoints ---


@loyalty_router.get("/{customer_id}", response_model=LoyaltyBalanceResponse)
async def get_loyalty_balance(customer_id: str) -> LoyaltyBalanceResponse:
    return LoyaltyBalanceResponse(customer_id=customer_id, points=loyalty_balance(customer_id))
