"""Order persistence boundary used by the order command handlers and the API.

Writes go through the event-sourced Order repository, so every save runs in
the caller's unit of work and appends to the order's stream with an expected
version. Two transitions racing on the same order cannot both commit. Listings
are answered from the ``OrderDirectory`` projection and then hydrated from
the event store.
"""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from fooddash.errors import OrderNotFound
from fooddash.order.order import Order
from fooddash.order.queries import AdminOrderQuery, CustomerOrderQuery, DeliveryOrderQuery, OrderPage
from fooddash.projections.order_directory import OrderDirectory


class OrderGateway:
    @property
    def _orders(self):
        return current_domain.repository_for(Order)

    def find_by_id(self, order_id) -> Order:
        try:
            return self._orders.get(str(order_id))
        except ObjectNotFoundError as exc:
            raise OrderNotFound({"order_id": [f"Order {order_id} does not exist"]}) from exc

    def persist_new(self, order: Order) -> Order:
        self._orders.add(order)
        return order

    def persist_transition(self, order_id, mutation) -> Order:
        """Load the order, apply ``mutation(order)`` and save it."""
        order = self.find_by_id(order_id)
        mutation(order)
        self._orders.add(order)
        return order

    def list_by_customer(self, customer_id, status=None) -> list[Order]:
        return self._hydrate(self._directory_entries(CustomerOrderQuery(customer_id=customer_id, status=status)))

    def list_by_delivery_person(self, delivery_person_id=None, status=None) -> list[Order]:
        query = DeliveryOrderQuery(delivery_person_id=delivery_person_id, status=status)
        return self._hydrate(self._directory_entries(query))

    def list_for_admin(self, query: AdminOrderQuery) -> OrderPage:
        entries = self._directory_entries(query)
        start = (query.page - 1) * query.limit
        page = entries[start : start + query.limit]
        return OrderPage(orders=self._hydrate(page), total=len(entries), page=query.page, limit=query.limit)

    # -------------------------------------------------------------------
    # Read-model helpers
    # -------------------------------------------------------------------
    def _directory_entries(self, query):
        statuses, criteria = query.lookup()
        dao = current_domain.repository_for(OrderDirectory)._dao

        if statuses is None:
            entries = dao.query.filter(**criteria).all().items
        else:
            entries = []
            for status in sorted(statuses):
                entries.extend(dao.query.filter(status=status, **criteria).all().items)

        matching = [entry for entry in entries if query.matches(entry)]
        matching.sort(key=lambda entry: entry.placed_at, reverse=True)
        return matching

    def _hydrate(self, entries) -> list[Order]:
        return [self._orders.get(str(entry.order_id)) for entry in entries]
