"""Tests for the order listing query parameters."""

from types import SimpleNamespace

import pytest
from fooddash.order.queries import (
    ACTIVE_STATUSES,
    COMPLETED_STATUSES,
    AdminOrderQuery,
    CustomerOrderQuery,
    DeliveryOrderQuery,
    OrderPage,
    statuses_for,
)
from protean.exceptions import ValidationError


def _entry(status, delivery_person_id=None, customer_id="cust-001"):
    return SimpleNamespace(status=status, delivery_person_id=delivery_person_id, customer_id=customer_id)


class TestStatusScopes:
    def test_scopes_expand(self):
        assert statuses_for("active") == ACTIVE_STATUSES == {"pending", "processing", "in-transit"}
        assert statuses_for("completed") == COMPLETED_STATUSES == {"delivered", "cancelled"}

    def test_literal_status_passes_through(self):
        assert statuses_for("processing") == {"processing"}

    def test_none_means_any(self):
        assert statuses_for(None) is None


class TestCustomerOrderQuery:
    def test_lookup(self):
        statuses, criteria = CustomerOrderQuery(customer_id="cust-001", status="active").lookup()
        assert statuses == ACTIVE_STATUSES
        assert criteria == {"customer_id": "cust-001"}

    def test_matches_scope(self):
        query = CustomerOrderQuery(customer_id="cust-001", status="completed")
        assert query.matches(_entry("delivered"))
        assert not query.matches(_entry("pending"))
        assert not query.matches(_entry("delivered", customer_id="cust-002"))


class TestDeliveryOrderQuery:
    def test_no_courier_means_unassigned_pickup_queue(self):
        query = DeliveryOrderQuery()
        assert query.matches(_entry("processing"))
        assert not query.matches(_entry("processing", delivery_person_id="d1"))
        assert not query.matches(_entry("pending"))

    def test_pending_scope_is_the_pickup_queue(self):
        query = DeliveryOrderQuery(delivery_person_id="d1", status="pending")
        assert query.matches(_entry("processing"))
        assert not query.matches(_entry("pending"))

    def test_active_scope_is_in_transit_for_the_courier(self):
        query = DeliveryOrderQuery(delivery_person_id="d1", status="active")
        assert query.matches(_entry("in-transit", "d1"))
        assert not query.matches(_entry("in-transit", "d2"))
        assert not query.matches(_entry("processing", "d1"))

    def test_completed_scope_for_the_courier(self):
        query = DeliveryOrderQuery(delivery_person_id="d1", status="completed")
        assert query.matches(_entry("delivered", "d1"))
        assert query.matches(_entry("cancelled", "d1"))
        assert not query.matches(_entry("in-transit", "d1"))

    @pytest.mark.parametrize("status", ["active", "completed"])
    def test_scopes_without_courier_cover_everyone(self, status):
        query = DeliveryOrderQuery(status=status)
        entry_status = "in-transit" if status == "active" else "delivered"
        assert query.matches(_entry(entry_status, "d1"))
        assert query.matches(_entry(entry_status, "d2"))

    def test_courier_without_status_sees_all_their_orders(self):
        query = DeliveryOrderQuery(delivery_person_id="d1")
        assert query.matches(_entry("in-transit", "d1"))
        assert query.matches(_entry("delivered", "d1"))
        assert not query.matches(_entry("delivered", "d2"))
        assert query.lookup() == (None, {"delivery_person_id": "d1"})

    def test_literal_status_without_courier_is_unassigned(self):
        query = DeliveryOrderQuery(status="processing")
        assert query.matches(_entry("processing"))
        assert not query.matches(_entry("processing", "d1"))


class TestAdminOrderQuery:
    def test_all_covers_every_status(self):
        statuses, criteria = AdminOrderQuery(status="all").lookup()
        assert statuses == {"pending", "processing", "in-transit", "delivered", "cancelled"}
        assert criteria == {}
        assert AdminOrderQuery().lookup()[0] == statuses

    def test_scope_and_literal_status(self):
        assert AdminOrderQuery(status="active").lookup()[0] == ACTIVE_STATUSES
        assert AdminOrderQuery(status="delivered").lookup()[0] == {"delivered"}

    def test_search_matches_order_or_customer_id(self):
        query = AdminOrderQuery(search="CUST-00")
        assert query.matches(SimpleNamespace(order_id="ord-1", customer_id="cust-001", status="pending"))
        assert query.matches(SimpleNamespace(order_id="xcust-009", customer_id="c9", status="cancelled"))
        assert not query.matches(SimpleNamespace(order_id="ord-2", customer_id="c2", status="pending"))

    def test_status_filter_applies_with_search(self):
        query = AdminOrderQuery(status="completed", search="cust")
        assert not query.matches(SimpleNamespace(order_id="ord-1", customer_id="cust-001", status="pending"))

    @pytest.mark.parametrize("field, kwargs", [("page", {"page": 0}), ("limit", {"limit": 0})])
    def test_page_and_limit_must_be_positive(self, field, kwargs):
        with pytest.raises(ValidationError) as exc:
            AdminOrderQuery(**kwargs)
        assert field in exc.value.messages


class TestOrderPage:
    def test_total_pages_rounds_up(self):
        assert OrderPage(orders=[], total=11, page=1, limit=5).total_pages == 3
        assert OrderPage(orders=[], total=0, page=1, limit=5).total_pages == 0
