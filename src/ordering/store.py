"""OrderStore — serialized writes over the Order repository plus a change feed.

Every mutating command runs through ``OrderStore.commit``: the store takes its
writer lock (bounded wait), processes the command synchronously in the
ordering domain, captures an immutable snapshot of the whole order set while
still holding the lock, and then notifies subscribers once the lock is
released.

Snapshots carry a sequence number assigned inside the lock, so consumers can
discard stale or duplicated notifications.
"""

import threading
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime

from protean.exceptions import ObjectNotFoundError

from ordering.order.order import Order
from shared.errors import NotFound
from shared.locking import WriterLock
from shared.logging import get_logger

logger = get_logger(__name__)


def as_utc(value) -> datetime | None:
    """Normalize stored timestamps (aware, naive or ISO strings) to aware UTC."""
    if value is None:
        return None
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


# ---------------------------------------------------------------------------
# Snapshots
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class OrderLineSnapshot:
    product_id: str
    name: str
    category: str | None
    unit_price: float
    quantity: int

    @property
    def line_total(self) -> float:
        return round(self.unit_price * self.quantity, 2)


@dataclass(frozen=True)
class OrderSnapshot:
    """Read-only copy of an Order as it was at capture time."""

    id: str
    customer_name: str
    customer_id: str | None
    order_type: str
    status: str
    total: float
    items: tuple[OrderLineSnapshot, ...]
    delivery_address: str | None
    delivery_city: str | None
    courier_id: str | None
    courier_name: str | None
    version: int
    created_at: datetime
    updated_at: datetime | None

    @classmethod
    def from_order(cls, order: Order) -> "OrderSnapshot":
        location = order.delivery_location
        return cls(
            id=str(order.id),
            customer_name=order.customer_name,
            customer_id=str(order.customer_id) if order.customer_id else None,
            order_type=order.order_type,
            status=order.status,
            total=order.total,
            items=tuple(
                OrderLineSnapshot(
                    product_id=str(item.product_id),
                    name=item.name,
                    category=item.category,
                    unit_price=item.unit_price,
                    quantity=item.quantity,
                )
                for item in order.ordered_items()
            ),
            delivery_address=location.address if location else None,
            delivery_city=location.city if location else None,
            courier_id=str(order.courier_id) if order.courier_id else None,
            courier_name=order.courier_name,
            version=order.version,
            created_at=as_utc(order.created_at),
            updated_at=as_utc(order.updated_at),
        )

    def to_dict(self) -> dict:
        return {
            "order_id": self.id,
            "customer_name": self.customer_name,
            "customer_id": self.customer_id,
            "order_type": self.order_type,
            "status": self.status,
            "total": self.total,
            "items": [
                {
                    "product_id": line.product_id,
                    "name": line.name,
                    "category": line.category,
                    "unit_price": line.unit_price,
                    "quantity": line.quantity,
                }
                for line in self.items
            ],
            "delivery_location": (
                {"address": self.delivery_address, "city": self.delivery_city} if self.delivery_address else None
            ),
            "courier_id": self.courier_id,
            "courier_name": self.courier_name,
            "version": self.version,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


@dataclass(frozen=True)
class OrderSetSnapshot:
    """The complete order set after a committed change."""

    sequence: int
    orders: tuple[OrderSnapshot, ...]
    captured_at: datetime

    def find(self, order_id: str) -> OrderSnapshot | None:
        return next((o for o in self.orders if o.id == str(order_id)), None)


Subscriber = Callable[[OrderSetSnapshot], None]


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------
class OrderStore:
    def __init__(self, domain, lock_timeout: float | None = None):
        self.domain = domain
        self.writer_lock = WriterLock("order store", timeout=lock_timeout)
        self._subscribers: list[Subscriber] = []
        self._subscribers_lock = threading.Lock()
        self._sequence = 0

    def commit(self, command) -> tuple[str, OrderSetSnapshot]:
        """Process a mutating command atomically and publish the new order set.

        Returns the handler result (the order id) and the snapshot captured
        right after the change.
        """
        with self.domain.domain_context(), self.writer_lock.held():
            try:
                result = self.domain.process(command, asynchronous=False)
            except ObjectNotFoundError as exc:
                raise NotFound(f"Order not found: {getattr(command, 'order_id', '')}") from exc
            snapshot = self._capture()

        logger.debug("order_set_changed", sequence=snapshot.sequence, command=command.__class__.__name__)
        self._publish(snapshot)
        return result, snapshot

    # -------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------
    def get(self, order_id: str) -> OrderSnapshot:
        with self.domain.domain_context():
            try:
                order = self.domain.repository_for(Order).get(order_id)
            except ObjectNotFoundError as exc:
                raise NotFound(f"Order not found: {order_id}") from exc
            return OrderSnapshot.from_order(order)

    def all(self) -> list[OrderSnapshot]:
        with self.domain.domain_context():
            return self._ordered(self.domain.repository_for(Order).all_orders())

    def deliveries(self, status: str | None = None) -> list[OrderSnapshot]:
        with self.domain.domain_context():
            return self._ordered(self.domain.repository_for(Order).deliveries(status))

    def capture(self) -> OrderSetSnapshot:
        """Snapshot the current order set under the writer lock."""
        with self.domain.domain_context(), self.writer_lock.held():
            return self._capture()

    @staticmethod
    def _ordered(orders) -> list[OrderSnapshot]:
        snapshots = [OrderSnapshot.from_order(order) for order in orders]
        return sorted(snapshots, key=lambda s: (s.created_at, s.id))

    def _capture(self) -> OrderSetSnapshot:
        self._sequence += 1
        orders = self._ordered(self.domain.repository_for(Order).all_orders())
        return OrderSetSnapshot(
            sequence=self._sequence,
            orders=tuple(orders),
            captured_at=datetime.now(UTC),
        )

    # -------------------------------------------------------------------
    # Change feed
    # -------------------------------------------------------------------
    def subscribe(self, subscriber: Subscriber) -> Callable[[], None]:
        """Register a callback for order set changes; returns an unsubscribe function."""
        with self._subscribers_lock:
            self._subscribers.append(subscriber)

        def unsubscribe():
            with self._subscribers_lock:
                if subscriber in self._subscribers:
                    self._subscribers.remove(subscriber)

        return unsubscribe

    def _publish(self, snapshot: OrderSetSnapshot) -> None:
        with self._subscribers_lock:
            subscribers = list(self._subscribers)
        for subscriber in subscribers:
            try:
                subscriber(snapshot)
            except Exception:
                logger.exception("order_feed_subscriber_failed", sequence=snapshot.sequence)
