"""Order placement — commands and handler.

Covers placing a new order at the counter and re-placing ("duplicating") an
existing one. Both paths price every line from the catalog.
"""

import json

from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from ordering.authorization import Intent, ensure_permitted
from ordering.domain import ordering
from ordering.order.order import Order, OrderType
from ordering.order.pricing import price_lines
from shared.actors import Actor, Role
from shared.logging import get_logger

logger = get_logger(__name__)


@ordering.command(part_of="Order")
class PlaceOrder:
    customer_name = String(required=True, max_length=150)
    customer_id = Identifier()
    order_type = String(required=True, choices=OrderType)
    items = Text(required=True)  # JSON: list of {product_id, quantity}
    delivery_location = Text()  # JSON: {address, city}
    actor_id = Identifier(required=True)
    actor_role = String(required=True, choices=Role)


@ordering.command(part_of="Order")
class DuplicateOrder:
    """Place a fresh Pending copy of an existing order at today's prices."""

    order_id = Identifier(required=True)
    actor_id = Identifier(required=True)
    actor_role = String(required=True, choices=Role)


@ordering.command_handler(part_of=Order)
class PlacementHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        actor = Actor.from_claim(command.actor_id, command.actor_role)
        ensure_permitted(actor, Intent.create_order())

        requested = json.loads(command.items) if isinstance(command.items, str) else command.items
        location = command.delivery_location
        if isinstance(location, str):
            location = json.loads(location) if location else None

        order = Order.place(
            customer_name=command.customer_name,
            customer_id=command.customer_id,
            order_type=command.order_type,
            lines=price_lines(requested),
            placed_by=actor.id,
            delivery_location=location,
        )
        current_domain.repository_for(Order).add(order)
        logger.info("order_placed", order_id=str(order.id), total=order.total, order_type=order.order_type)
        return str(order.id)

    @handle(DuplicateOrder)
    def duplicate_order(self, command):
        actor = Actor.from_claim(command.actor_id, command.actor_role)
        ensure_permitted(actor, Intent.create_order())

        repo = current_domain.repository_for(Order)
        source = repo.get(command.order_id)
        location = None
        if source.delivery_location is not None:
            location = {
                "address": source.delivery_location.address,
                "city": source.delivery_location.city,
            }

        order = Order.place(
            customer_name=source.customer_name,
            customer_id=source.customer_id,
            order_type=source.order_type,
            lines=price_lines(source.reorder_lines()),
            placed_by=actor.id,
            delivery_location=location,
        )
        repo.add(order)
        logger.info("order_duplicated", source_order_id=str(source.id), order_id=str(order.id))
        return str(order.id)
