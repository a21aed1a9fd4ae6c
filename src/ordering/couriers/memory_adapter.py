"""In-memory courier directory for tests and local development."""

from threading import Lock

from ordering.couriers.port import CourierDirectoryPort

DEFAULT_COURIERS = [
    {"courier_id": "courier-ana", "name": "Ana Ribeiro"},
    {"courier_id": "courier-ben", "name": "Ben Okafor"},
]


class MemoryCourierDirectory(CourierDirectoryPort):
    def __init__(self, couriers: list[dict] | None = None):
        self._lock = Lock()
        self._couriers = {}
        for courier in DEFAULT_COURIERS if couriers is None else couriers:
            self.register(**courier)

    def register(self, courier_id: str, name: str) -> None:
        with self._lock:
            self._couriers[courier_id] = {"courier_id": courier_id, "name": name}

    def get_courier(self, courier_id: str) -> dict | None:
        with self._lock:
            courier = self._couriers.get(courier_id)
            return dict(courier) if courier else None

    def list_couriers(self) -> list[dict]:
        with self._lock:
            return [dict(c) for c in self._couriers.values()]
