"""In-memory catalog adapter — a small seeded café menu.

Tests and local development register extra products with ``add_product``.
"""

from threading import Lock

from ordering.catalog.port import CatalogPort

DEFAULT_MENU = [
    {"product_id": "espresso", "name": "Espresso", "category": "Coffee", "price": 2.50},
    {"product_id": "cappuccino", "name": "Cappuccino", "category": "Coffee", "price": 3.75},
    {"product_id": "flat-white", "name": "Flat White", "category": "Coffee", "price": 3.90},
    {"product_id": "iced-latte", "name": "Iced Latte", "category": "Cold Drinks", "price": 4.25},
    {"product_id": "matcha-latte", "name": "Matcha Latte", "category": "Tea", "price": 4.50},
    {"product_id": "croissant", "name": "Butter Croissant", "category": "Bakery", "price": 2.95},
    {"product_id": "banana-bread", "name": "Banana Bread", "category": "Bakery", "price": 3.20},
]


class MemoryCatalog(CatalogPort):
    def __init__(self, products: list[dict] | None = None):
        self._lock = Lock()
        self._products = {}
        for product in DEFAULT_MENU if products is None else products:
            self.add_product(**product)

    def add_product(self, product_id: str, name: str, price: float, category: str = "Uncategorized") -> None:
        if price < 0:
            raise ValueError(f"Price must be non-negative, got {price}")
        with self._lock:
            self._products[product_id] = {
                "product_id": product_id,
                "name": name,
                "category": category,
                "price": float(price),
            }

    def remove_product(self, product_id: str) -> None:
        with self._lock:
            self._products.pop(product_id, None)

    def get_product(self, product_id: str) -> dict | None:
        with self._lock:
            product = self._products.get(product_id)
            return dict(product) if product else None

    def list_products(self) -> list[dict]:
        with self._lock:
            return [dict(p) for p in self._products.values()]
