"""AggregationEngine — keeps dashboard statistics in step with the order feed.

Every accepted snapshot triggers a full recomputation. Snapshots older than
the last one applied are dropped, so out-of-order and repeated deliveries
never move the published statistics backwards.
"""

import threading
from collections.abc import Callable

from dashboard.stats import AggregateStats, compute_stats
from shared.logging import get_logger

logger = get_logger(__name__)

StatsSubscriber = Callable[[AggregateStats], None]


class AggregationEngine:
    def __init__(self):
        self._lock = threading.RLock()
        self._stats = compute_stats((), sequence=0)
        self._subscribers: list[StatsSubscriber] = []

    def attach(self, store) -> Callable[[], None]:
        """Follow an order store's change feed, starting from its current contents."""
        unsubscribe = store.subscribe(self.on_snapshot)
        self.on_snapshot(store.capture())
        return unsubscribe

    def on_snapshot(self, snapshot) -> None:
        with self._lock:
            if snapshot.sequence < self._stats.sequence:
                logger.debug("stale_snapshot_ignored", sequence=snapshot.sequence, latest=self._stats.sequence)
                return
            self._stats = compute_stats(snapshot.orders, sequence=snapshot.sequence)
            for subscriber in list(self._subscribers):
                try:
                    subscriber(self._stats)
                except Exception:
                    logger.exception("stats_subscriber_failed", sequence=snapshot.sequence)

    def get_stats(self) -> AggregateStats:
        """The latest fully recomputed statistics."""
        return self._stats

    def subscribe(self, subscriber: StatsSubscriber) -> Callable[[], None]:
        with self._lock:
            self._subscribers.append(subscriber)

        def unsubscribe():
            with self._lock:
                if subscriber in self._subscribers:
                    self._subscribers.remove(subscriber)

        return unsubscribe


_engine_instance = None
_engine_lock = threading.Lock()


def get_aggregation_engine() -> AggregationEngine:
    global _engine_instance
    if _engine_instance is None:
        with _engine_lock:
            if _engine_instance is None:
                _engine_instance = AggregationEngine()
    return _engine_instance


def reset_aggregation_engine():
    global _engine_instance
    _engine_instance = None
