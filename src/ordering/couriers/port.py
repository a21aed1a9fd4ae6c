"""Courier directory port — the identity layer's view of registered couriers."""

from abc import ABC, abstractmethod


class CourierDirectoryPort(ABC):
    @abstractmethod
    def get_courier(self, courier_id: str) -> dict | None:
        """Return ``{"courier_id", "name"}`` or None for an unknown courier."""
        ...

    @abstractmethod
    def list_couriers(self) -> list[dict]: ...
