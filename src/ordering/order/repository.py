"""Order repository with the read queries the engine and dashboard need."""

from ordering.domain import ordering
from ordering.order.order import Order, OrderType

_PAGE_SIZE = 100


@ordering.repository(part_of=Order)
class OrderRepository:
    def _fetch_all(self, **filters) -> list[Order]:
        orders = []
        offset = 0
        while True:
            page = self._dao.query.filter(**filters).offset(offset).limit(_PAGE_SIZE).all().items
            orders.extend(page)
            if len(page) < _PAGE_SIZE:
                return orders
            offset += _PAGE_SIZE

    def all_orders(self) -> list[Order]:
        return self._fetch_all()

    def deliveries(self, status: str | None = None) -> list[Order]:
        filters = {"order_type": OrderType.DELIVERY.value}
        if status:
            filters["status"] = status
        return self._fetch_all(**filters)
