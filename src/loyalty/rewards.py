"""Awards loyalty points when orders complete.

``CompletedOrderRewarder`` subscribes to the order change feed. Every
snapshot is scanned for Completed orders that name a customer; the ledger's
per-order grant makes repeated and replayed snapshots harmless, and the local
``_awarded`` set only saves redundant ledger calls. It is trimmed to the
orders present in the latest snapshot.

A failed award is logged and left for the next snapshot; it never stops the
remaining orders from being credited.
"""

import threading

from loyalty.ledger import LoyaltyLedger
from shared.logging import get_logger

logger = get_logger(__name__)

COMPLETED = "Completed"


class CompletedOrderRewarder:
    def __init__(self, ledger: LoyaltyLedger):
        self.ledger = ledger
        self._awarded: set[str] = set()
        self._lock = threading.Lock()

    def __call__(self, snapshot) -> None:
        for order in snapshot.orders:
            if order.status != COMPLETED or not order.customer_id:
                continue
            with self._lock:
                if order.id in self._awarded:
                    continue
            try:
                points = self.ledger.award_for_order(order.customer_id, order.id, order.total)
            except Exception:
                logger.exception("completed_order_reward_failed", order_id=order.id, customer_id=order.customer_id)
                continue
            with self._lock:
                self._awarded.add(order.id)
            if points:
                logger.info("completed_order_rewarded", order_id=order.id, customer_id=order.customer_id, points=points)

        present = {order.id for order in snapshot.orders}
        with self._lock:
            self._awarded &= present
