"""Per-user state tracking for Locust load test scenarios.

Each Locust user instance keeps its own state. State tracks ids and
versions returned by the API so follow-up requests can reference them.
"""

from dataclasses import dataclass, field


@dataclass
class OrderState:
    """Tracks a single order through its lifecycle."""

    order_id: str | None = None
    customer_id: str | None = None
    version: int = 1
    current_status: str = "Pending"


@dataclass
class DeliveryRaceState:
    """Tracks a delivery order that several couriers try to claim."""

    order_id: str | None = None
    winner: str | None = None
    conflicts: int = 0


@dataclass
class LoyaltyState:
    customer_id: str | None = None
    balance: int = 0
    redemptions: list[int] = field(default_factory=list)
