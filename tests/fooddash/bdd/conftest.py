"""Shared BDD fixtures and step definitions for the FoodDash domain."""

import json
from datetime import UTC, datetime, timedelta
from decimal import Decimal

import pytest
from fooddash.cart.cart import ShoppingCart
from fooddash.cart.events import CartCleared, CartItemAdded, CartItemRemoved, CartQuantityUpdated
from fooddash.errors import InvalidTransition
from fooddash.order.events import (
    OrderCancelled,
    OrderDelivered,
    OrderDispatched,
    OrderPlaced,
    OrderProcessingStarted,
)
from fooddash.order.order import Order
from fooddash.order.status import UpdateOrderStatus
from protean.exceptions import ValidationError
from protean.testing import given as given_
from pytest_bdd import given, parsers, then

# Map event name strings to classes for dynamic lookup in Then steps
_ORDER_EVENT_CLASSES = {
    "OrderPlaced": OrderPlaced,
    "OrderProcessingStarted": OrderProcessingStarted,
    "OrderDispatched": OrderDispatched,
    "OrderDelivered": OrderDelivered,
    "OrderCancelled": OrderCancelled,
}

_CART_EVENT_CLASSES = {
    "CartItemAdded": CartItemAdded,
    "CartQuantityUpdated": CartQuantityUpdated,
    "CartItemRemoved": CartItemRemoved,
    "CartCleared": CartCleared,
}


# ---------------------------------------------------------------------------
# Scalar fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def order_id():
    return "ord-001"


@pytest.fixture()
def error():
    """Container for captured validation errors (used by cart tests)."""
    return {"exc": None}


# ---------------------------------------------------------------------------
# Event fixtures (past tense: what happened)
# ---------------------------------------------------------------------------
@pytest.fixture()
def order_placed(order_id):
    placed_at = datetime.now(UTC)
    return OrderPlaced(
        order_id=order_id,
        customer_id="cust-001",
        items=json.dumps(
            [
                {
                    "id": "item-1",
                    "food_item_id": "dish-001",
                    "name": "Pad Thai",
                    "quantity": 3,
                    "unit_price": 10.99,
                }
            ]
        ),
        address_id="addr-001",
        payment_method_id="pm-001",
        subtotal=32.97,
        tax=3.30,
        delivery_fee=2.99,
        total=39.26,
        notes="Order placed",
        placed_at=placed_at,
        estimated_delivery=placed_at + timedelta(minutes=45),
    )


@pytest.fixture()
def processing_started(order_id):
    return OrderProcessingStarted(order_id=order_id, notes="Order processing", started_at=datetime.now(UTC))


@pytest.fixture()
def order_dispatched(order_id):
    return OrderDispatched(
        order_id=order_id,
        notes="Order in-transit",
        delivery_person_id="d1",
        dispatched_at=datetime.now(UTC),
    )


@pytest.fixture()
def order_delivered(order_id):
    return OrderDelivered(order_id=order_id, notes="Order delivered", delivered_at=datetime.now(UTC))


@pytest.fixture()
def order_cancelled(order_id):
    return OrderCancelled(order_id=order_id, notes="Order cancelled", cancelled_at=datetime.now(UTC))


# ---------------------------------------------------------------------------
# Command fixtures (imperative: what to do)
# ---------------------------------------------------------------------------
@pytest.fixture()
def update_status(order_id):
    def _command(status, delivery_person_id=None):
        return UpdateOrderStatus(order_id=order_id, status=status, delivery_person_id=delivery_person_id)

    return _command


# ---------------------------------------------------------------------------
# Given steps: Order (event sourcing via protean.testing)
# ---------------------------------------------------------------------------
@given("an order was placed", target_fixture="order")
def _(order_placed):
    return given_(Order, order_placed)


@given("the kitchen started preparing the order", target_fixture="order")
def _(order, processing_started):
    return order.after(processing_started)


@given(parsers.cfparse('courier "{delivery_person_id}" picked up the order'), target_fixture="order")
def _(order, order_dispatched, delivery_person_id):
    assert order_dispatched.delivery_person_id == delivery_person_id
    return order.after(order_dispatched)


@given(parsers.cfparse("the order was {outcome}"), target_fixture="order")
def _(order, outcome, processing_started, order_dispatched, order_delivered, order_cancelled):
    if outcome == "delivered":
        return order.after(processing_started).after(order_dispatched).after(order_delivered)
    if outcome == "cancelled":
        return order.after(order_cancelled)
    raise ValueError(f"Unknown outcome: {outcome}")


# ---------------------------------------------------------------------------
# Given steps: Shopping Cart
# ---------------------------------------------------------------------------
@given("an empty cart", target_fixture="cart")
def empty_cart():
    cart = ShoppingCart.create(customer_id="cust-001")
    cart._events.clear()
    return cart


@given(
    parsers.cfparse('a cart holding {quantity:d} of "{food_item_id}" at {price:f}'),
    target_fixture="cart",
)
def cart_holding(quantity, food_item_id, price):
    cart = ShoppingCart.create(customer_id="cust-001")
    cart.add_item(food_item_id, price, quantity)
    cart._events.clear()
    return cart


# ---------------------------------------------------------------------------
# Then steps: Order (shared, plain assertions)
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the order status is "{status}"'))
def _(order, status):
    assert order.status == status


@then(parsers.cfparse('the order is assigned to "{delivery_person_id}"'))
def _(order, delivery_person_id):
    assert order.delivery_person_id == delivery_person_id


@then(parsers.cfparse("the order history has {count:d} entries"))
def _(order, count):
    assert len(order.status_history) == count


@then("the order action fails with an invalid transition error")
def _(order):
    assert order.rejected
    assert isinstance(order.rejection, InvalidTransition)


@then(parsers.cfparse("an {event_type} order event is raised"))
def _(order, event_type):
    event_cls = _ORDER_EVENT_CLASSES[event_type]
    assert event_cls in order.events


# ---------------------------------------------------------------------------
# Then steps: Cart
# ---------------------------------------------------------------------------
@then(parsers.cfparse("the cart has {count:d} line(s)"))
def cart_line_count(cart, count):
    assert len(cart.items) == count


@then(parsers.cfparse("the cart subtotal is {amount}"))
def cart_subtotal_is(cart, amount):
    assert cart.subtotal() == Decimal(amount)


@then(parsers.cfparse("the cart preview shows tax {tax} and total {total}"))
def cart_preview_shows(cart, tax, total):
    preview = cart.price_preview()
    assert preview.tax == Decimal(tax)
    assert preview.total == Decimal(total)


@then(parsers.cfparse('the quantity of "{food_item_id}" is {quantity:d}'))
def cart_line_quantity(cart, food_item_id, quantity):
    line = next(line for line in cart.items if str(line.food_item_id) == food_item_id)
    assert line.quantity == quantity


@then("the cart action fails with a validation error")
def cart_action_fails(error):
    assert error["exc"] is not None, "Expected a validation error but none was raised"
    assert isinstance(error["exc"], ValidationError)


@then(parsers.cfparse("a {event_type} cart event is raised"))
def cart_event_raised(cart, event_type):
    event_cls = _CART_EVENT_CLASSES[event_type]
    assert any(
        isinstance(e, event_cls) for e in cart._events
    ), f"No {event_type} event found. Events: {[type(e).__name__ for e in cart._events]}"
