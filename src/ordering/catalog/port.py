"""Catalog port — read-only view of the product catalog.

Catalog CRUD lives outside the fulfillment core; orders only need to look a
product up at the moment it is priced.
"""

from abc import ABC, abstractmethod


class CatalogPort(ABC):
    """Abstract interface for catalog adapters."""

    @abstractmethod
    def get_product(self, product_id: str) -> dict | None:
        """Look up a product.

        Returns:
            dict with keys: product_id, name, category, price; or None when
            the product is unknown.
        """
        ...

    @abstractmethod
    def list_products(self) -> list[dict]:
        """Return every product currently on the menu."""
        ...
