"""Application tests for order status updates through the event store."""

import json

import pytest
from fooddash.errors import InvalidTransition, OrderNotFound
from fooddash.order.order import Order, OrderStatus
from fooddash.order.placement import PlaceOrder
from fooddash.order.status import UpdateOrderStatus
from fooddash.projections.order_directory import OrderDirectory
from protean import UnitOfWork, current_domain
from protean.exceptions import ExpectedVersionError


def _place_order():
    command = PlaceOrder(
        customer_id="cust-001",
        items=json.dumps([{"food_item_id": "dish-001", "name": "Pad Thai", "quantity": 1, "unit_price": 10.99}]),
        address_id="addr-001",
        payment_method_id="pm-001",
    )
    return str(current_domain.process(command, asynchronous=False).id)


def _update(order_id, status, **kwargs):
    return current_domain.process(UpdateOrderStatus(order_id=order_id, status=status, **kwargs), asynchronous=False)


class TestOrderStatusUpdates:
    def test_delivery_run_is_rebuilt_from_the_event_store(self):
        order_id = _place_order()
        _update(order_id, "processing")
        _update(order_id, "in-transit", delivery_person_id="d1")
        _update(order_id, "delivered", notes="Handed to customer")

        order = current_domain.repository_for(Order).get(order_id)
        assert order.status == OrderStatus.DELIVERED.value
        assert order.delivery_person_id == "d1"
        assert order.actual_delivery is not None
        assert [entry.status for entry in order.status_history] == [
            "pending",
            "processing",
            "in-transit",
            "delivered",
        ]
        assert order.status_history[-1].notes == "Handed to customer"

    def test_handler_returns_updated_order(self):
        order_id = _place_order()
        order = _update(order_id, "processing")
        assert order.status == OrderStatus.PROCESSING.value

    def test_directory_follows_status_and_courier(self):
        order_id = _place_order()
        _update(order_id, "processing")
        _update(order_id, "in-transit", delivery_person_id="d1")

        entry = current_domain.repository_for(OrderDirectory).get(order_id)
        assert entry.status == OrderStatus.IN_TRANSIT.value
        assert entry.delivery_person_id == "d1"

    def test_invalid_transition_leaves_order_untouched(self):
        order_id = _place_order()

        with pytest.raises(InvalidTransition):
            _update(order_id, "in-transit")

        order = current_domain.repository_for(Order).get(order_id)
        assert order.status == OrderStatus.PENDING.value
        assert len(order.status_history) == 1

    def test_cancelled_order_is_final(self):
        order_id = _place_order()
        _update(order_id, "cancelled")

        with pytest.raises(InvalidTransition):
            _update(order_id, "processing")

    def test_unknown_order(self):
        with pytest.raises(OrderNotFound):
            _update("missing", "processing")


class TestConcurrentTransitions:
    def test_conflicting_transitions_cannot_both_commit(self):
        order_id = _place_order()
        _update(order_id, "processing")

        repo = current_domain.repository_for(Order)
        kitchen_copy = repo.get(order_id)
        courier_copy = repo.get(order_id)

        kitchen_copy.update_status("cancelled")
        with UnitOfWork():
            repo.add(kitchen_copy)

        courier_copy.update_status("in-transit", delivery_person_id="d1")
        with pytest.raises(ExpectedVersionError):
            with UnitOfWork():
                repo.add(courier_copy)

        order = repo.get(order_id)
        assert order.status == OrderStatus.CANCELLED.value
        assert order.delivery_person_id is None
        assert [entry.status for entry in order.status_history] == ["pending", "processing", "cancelled"]
