"""Ordering bounded context — café order lifecycle and courier dispatch.

Handles order placement, the Pending → Processing → Completed lifecycle,
role-gated status changes, and the first-claim-wins courier assignment for
delivery orders. Uses CQRS: orders are plain state, events are published for
downstream listeners.
"""

from protean.domain import Domain

from shared.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

ordering = Domain(name="ordering")
