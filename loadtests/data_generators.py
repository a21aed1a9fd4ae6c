"""Faker-based data generators for Locust load test scenarios.

Payloads match the field names of the API's Pydantic request schemas and
only reference products on the seeded in-memory menu, so every generated
order passes server-side pricing.
"""

import random
import uuid

from faker import Faker

fake = Faker()

MENU_PRODUCT_IDS = [
    "espresso",
    "cappuccino",
    "flat-white",
    "iced-latte",
    "matcha-latte",
    "croissant",
    "banana-bread",
]

COURIER_IDS = ["courier-ana", "courier-ben"]


def actor_headers(role: str, actor_id: str | None = None) -> dict:
    """Identity headers the API turns into an Actor."""
    return {
        "X-Actor-Id": actor_id or f"{role.lower()}-{uuid.uuid4().hex[:6]}",
        "X-Actor-Role": role,
    }


def customer_id() -> str:
    return f"cust-lt-{uuid.uuid4().hex[:8]}"


def order_items(num_items: int = 2) -> list[dict]:
    """Distinct menu products with small quantities."""
    products = random.sample(MENU_PRODUCT_IDS, k=min(num_items, len(MENU_PRODUCT_IDS)))
    return [{"product_id": product_id, "quantity": random.randint(1, 3)} for product_id in products]


def delivery_location() -> dict:
    return {"address": fake.street_address()[:255], "city": fake.city()[:100]}


def order_data(order_type: str = "Pickup", customer: str | None = None, num_items: int = 2) -> dict:
    """Generate a CreateOrderRequest payload."""
    payload = {
        "customer_name": fake.name()[:150],
        "customer_id": customer or customer_id(),
        "order_type": order_type,
        "items": order_items(num_items),
    }
    if order_type == "Delivery":
        payload["delivery_location"] = delivery_location()
    return payload


def points_data(low: int = 1, high: int = 50) -> dict:
    return {"points": random.randint(low, high)}


def program_data() -> dict:
    """Generate an UpdateProgramRequest payload with an ascending reward ladder."""
    first = random.randint(20, 60)
    return {
        "points_per_dollar": random.choice([1.0, 1.5, 2.0]),
        "rewards": [
            {"points_threshold": first, "reward_name": "Free pastry"},
            {"points_threshold": first * 2, "reward_name": "Free drink of choice"},
        ],
    }
