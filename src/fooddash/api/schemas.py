"""Pydantic request/response schemas for the FoodDash API."""

from __future__ import annotations

from pydantic import BaseModel, Field

# --- Shared ---


class StatusResponse(BaseModel):
    status: str = "ok"


class PricingSchema(BaseModel):
    subtotal: float
    tax: float
    delivery_fee: float
    total: float


# --- Menu ---


class AddFoodItemRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Margherita Pizza",
                    "description": "San Marzano tomatoes, fior di latte, basil.",
                    "price": 12.5,
                    "category": "Pizza",
                    "preparation_time": 20,
                    "rating": 4.6,
                }
            ]
        }
    }

    name: str = Field(..., max_length=150)
    description: str | None = None
    price: float = Field(..., ge=0)
    category: str = Field(..., max_length=100)
    image_url: str | None = Field(None, max_length=500)
    preparation_time: int = Field(15, ge=0)
    rating: float = Field(0.0, ge=0, le=5)


class UpdateFoodItemRequest(BaseModel):
    name: str | None = Field(None, max_length=150)
    description: str | None = None
    price: float | None = Field(None, ge=0)
    category: str | None = Field(None, max_length=100)
    image_url: str | None = Field(None, max_length=500)
    preparation_time: int | None = Field(None, ge=0)
    rating: float | None = Field(None, ge=0, le=5)


class SetAvailabilityRequest(BaseModel):
    available: bool


class FoodItemIdResponse(BaseModel):
    food_item_id: str


class FoodItemResponse(BaseModel):
    food_item_id: str
    name: str
    description: str | None = None
    price: float
    category: str
    image_url: str | None = None
    preparation_time: int | None = None
    rating: float | None = None
    available: bool
    popular: bool


class MenuPageResponse(BaseModel):
    items: list[FoodItemResponse]
    total: int
    page: int
    limit: int
    total_pages: int


class CategoryResponse(BaseModel):
    name: str
    count: int


class CategoryListResponse(BaseModel):
    categories: list[CategoryResponse]


# --- Cart ---


class CreateCartRequest(BaseModel):
    customer_id: str


class CartIdResponse(BaseModel):
    cart_id: str


class AddToCartRequest(BaseModel):
    food_item_id: str
    quantity: int = Field(1, ge=1)


class UpdateCartQuantityRequest(BaseModel):
    # Values below one are accepted and ignored by the cart
    new_quantity: int


class CartLineResponse(BaseModel):
    food_item_id: str
    name: str | None = None
    unit_price: float
    quantity: int
    line_total: float


class CartResponse(BaseModel):
    cart_id: str
    customer_id: str
    items: list[CartLineResponse]
    pricing: PricingSchema


class CheckoutRequest(BaseModel):
    address_id: str
    payment_method_id: str
    delivery_notes: str | None = None


# --- Orders ---


class OrderLineSchema(BaseModel):
    food_item_id: str
    name: str | None = None
    quantity: int = Field(..., ge=1)
    unit_price: float = Field(..., ge=0)


class PlaceOrderRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "customer_id": "cust-001",
                    "items": [
                        {"food_item_id": "dish-001", "name": "Pad Thai", "quantity": 2, "unit_price": 10.99},
                    ],
                    "address_id": "addr-001",
                    "payment_method_id": "pm-001",
                    "delivery_notes": "Ring twice",
                }
            ]
        }
    }

    customer_id: str
    items: list[OrderLineSchema]
    address_id: str
    payment_method_id: str
    delivery_notes: str | None = None


class UpdateOrderStatusRequest(BaseModel):
    status: str = Field(..., max_length=20)
    notes: str | None = Field(None, max_length=500)
    delivery_person_id: str | None = None


class OrderItemResponse(BaseModel):
    food_item_id: str
    name: str | None = None
    quantity: int
    unit_price: float


class StatusUpdateResponse(BaseModel):
    status: str
    notes: str | None = None
    recorded_at: str | None = None


class OrderResponse(BaseModel):
    order_id: str
    customer_id: str
    status: str
    items: list[OrderItemResponse]
    pricing: PricingSchema
    address_id: str | None = None
    payment_method_id: str | None = None
    delivery_notes: str | None = None
    delivery_person_id: str | None = None
    status_history: list[StatusUpdateResponse]
    created_at: str | None = None
    estimated_delivery: str | None = None
    actual_delivery: str | None = None


class OrderListResponse(BaseModel):
    orders: list[OrderResponse]


class AdminOrderListResponse(BaseModel):
    orders: list[OrderResponse]
    total: int
    page: int
    limit: int
    total_pages: int


# --- Loyalty ---


class LoyaltyBalanceResponse(BaseModel):
    customer_id: str
    points: int
