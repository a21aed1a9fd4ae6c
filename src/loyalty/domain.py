"""Loyalty bounded context — customer points and the rewards program.

Tracks each customer's points balance, awards points for completed orders
exactly once per order, and holds the single program configuration
(points per dollar and the reward ladder) that admins replace wholesale.
"""

from protean.domain import Domain

from shared.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

loyalty = Domain(name="loyalty")
