"""Writer locks with a bounded wait.

Each store serializes its writers on one ``WriterLock``. A caller that cannot
get the lock within the timeout fails with ``Unavailable`` instead of queueing
forever.
"""

import os
import threading
from contextlib import contextmanager

from shared.errors import Unavailable
from shared.logging import get_logger

logger = get_logger(__name__)

DEFAULT_LOCK_TIMEOUT = 5.0


def lock_timeout_from_env() -> float:
    return float(os.environ.get("BEANSTREAM_LOCK_TIMEOUT", DEFAULT_LOCK_TIMEOUT))


class WriterLock:
    def __init__(self, name: str, timeout: float | None = None):
        self.name = name
        self.timeout = lock_timeout_from_env() if timeout is None else timeout
        self._lock = threading.Lock()

    @contextmanager
    def held(self):
        if not self._lock.acquire(timeout=self.timeout):
            logger.warning("writer_lock_timeout", store=self.name, timeout=self.timeout)
            raise Unavailable(f"{self.name} is busy; gave up after {self.timeout}s")
        try:
            yield
        finally:
            self._lock.release()

    def locked(self) -> bool:
        return self._lock.locked()
