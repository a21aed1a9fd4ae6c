"""FulfillmentEngine — the command surface of the ordering context.

Each operation takes the calling Actor, builds the matching Protean command,
and commits it through the OrderStore. Results are immutable snapshots, so
callers never hold a live aggregate.
"""

import json
import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TypeVar

from ordering.order.courier import AssignCourier
from ordering.order.modification import UpdateItemQuantity
from ordering.order.order import OrderStatus
from ordering.order.placement import DuplicateOrder, PlaceOrder
from ordering.order.removal import DeleteOrder
from ordering.order.status import ChangeOrderStatus
from ordering.store import OrderSetSnapshot, OrderSnapshot, OrderStore
from shared.actors import Actor
from shared.errors import Conflict
from shared.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class OrderDraft:
    """What a caller asks for when placing an order. Prices are not part of it."""

    customer_name: str
    order_type: str
    items: list[dict] = field(default_factory=list)  # [{product_id, quantity}]
    delivery_location: dict | None = None  # {address, city}
    customer_id: str | None = None


def retry_on_conflict(operation: Callable[[], T], attempts: int = 3) -> T:
    """Run ``operation``, re-running it on retryable conflicts up to ``attempts`` times.

    Non-retryable conflicts (a lost courier claim) are raised immediately.
    """
    for attempt in range(1, attempts + 1):
        try:
            return operation()
        except Conflict as exc:
            if not exc.retryable or attempt == attempts:
                raise
            logger.info("retrying_after_conflict", attempt=attempt, reason=exc.reason.value)
    raise AssertionError("unreachable")


class FulfillmentEngine:
    def __init__(self, store: OrderStore):
        self.store = store

    def _commit(self, command) -> tuple[str, OrderSetSnapshot]:
        return self.store.commit(command)

    def _committed_order(self, command) -> OrderSnapshot:
        order_id, snapshot = self._commit(command)
        return snapshot.find(order_id)

    # -------------------------------------------------------------------
    # Commands
    # -------------------------------------------------------------------
    def create_order(self, actor: Actor, draft: OrderDraft) -> OrderSnapshot:
        with self.store.domain.domain_context():
            command = PlaceOrder(
                customer_name=draft.customer_name,
                customer_id=draft.customer_id,
                order_type=draft.order_type,
                items=json.dumps(draft.items),
                delivery_location=json.dumps(draft.delivery_location) if draft.delivery_location else None,
                actor_id=actor.id,
                actor_role=actor.role.value,
            )
        return self._committed_order(command)

    def assign_courier(self, actor: Actor, order_id: str, courier_id: str) -> OrderSnapshot:
        with self.store.domain.domain_context():
            command = AssignCourier(
                order_id=order_id,
                courier_id=courier_id,
                actor_id=actor.id,
                actor_role=actor.role.value,
            )
        return self._committed_order(command)

    def change_status(
        self,
        actor: Actor,
        order_id: str,
        to: OrderStatus | str,
        expected_version: int | None = None,
    ) -> OrderSnapshot:
        target = to.value if isinstance(to, OrderStatus) else to
        with self.store.domain.domain_context():
            command = ChangeOrderStatus(
                order_id=order_id,
                target_status=target,
                expected_version=expected_version,
                actor_id=actor.id,
                actor_role=actor.role.value,
            )
        return self._committed_order(command)

    def cancel_order(self, actor: Actor, order_id: str, expected_version: int | None = None) -> OrderSnapshot:
        return self.change_status(actor, order_id, OrderStatus.CANCELLED, expected_version=expected_version)

    def update_item_quantity(self, actor: Actor, order_id: str, product_id: str, quantity: int) -> OrderSnapshot:
        with self.store.domain.domain_context():
            command = UpdateItemQuantity(
                order_id=order_id,
                product_id=product_id,
                new_quantity=quantity,
                actor_id=actor.id,
                actor_role=actor.role.value,
            )
        return self._committed_order(command)

    def duplicate_order(self, actor: Actor, order_id: str) -> OrderSnapshot:
        with self.store.domain.domain_context():
            command = DuplicateOrder(order_id=order_id, actor_id=actor.id, actor_role=actor.role.value)
        return self._committed_order(command)

    def delete_order(self, actor: Actor, order_id: str) -> None:
        with self.store.domain.domain_context():
            command = DeleteOrder(order_id=order_id, actor_id=actor.id, actor_role=actor.role.value)
        self._commit(command)

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def get_order(self, order_id: str) -> OrderSnapshot:
        return self.store.get(order_id)

    def list_orders(self) -> list[OrderSnapshot]:
        return self.store.all()

    def deliveries(self, status: OrderStatus | str | None = None, search: str | None = None) -> list[OrderSnapshot]:
        """Delivery board: delivery orders filtered by status and free-text search.

        The search is a case-insensitive substring match on customer name,
        delivery address and city.
        """
        if isinstance(status, OrderStatus):
            status = status.value
        orders = self.store.deliveries(status)
        if not search:
            return orders

        needle = search.strip().lower()
        return [
            order
            for order in orders
            if any(
                needle in (value or "").lower()
                for value in (order.customer_name, order.delivery_address, order.delivery_city)
            )
        ]

    def subscribe(self, subscriber) -> Callable[[], None]:
        return self.store.subscribe(subscriber)


_engine_instance = None
_engine_lock = threading.Lock()


def get_fulfillment_engine() -> FulfillmentEngine:
    """Return the process-wide engine bound to the ordering domain (singleton)."""
    global _engine_instance
    if _engine_instance is None:
        with _engine_lock:
            if _engine_instance is None:
                from ordering.domain import ordering

                _engine_instance = FulfillmentEngine(OrderStore(ordering))
    return _engine_instance


def reset_fulfillment_engine():
    """Drop the engine singleton (useful for testing)."""
    global _engine_instance
    _engine_instance = None
