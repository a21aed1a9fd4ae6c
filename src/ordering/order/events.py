"""Domain events for the Order aggregate.

Events are immutable facts raised by the aggregate and dispatched when the
unit of work commits. They are consumed in-process; nothing downstream is
allowed to change the order through them.
"""

from protean.fields import DateTime, Float, Identifier, Integer, String, Text

from ordering.domain import ordering


@ordering.event(part_of="Order")
class OrderPlaced:
    """A cashier or admin placed a new order; it starts out Pending."""

    __version__ = 1

    order_id = Identifier(required=True)
    customer_name = String(required=True, max_length=150)
    customer_id = Identifier()
    order_type = String(required=True, max_length=20)
    items = Text(required=True)  # JSON: list of priced lines
    total = Float(required=True)
    placed_by = Identifier(required=True)
    placed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class CourierAssigned:
    """A courier claimed a delivery order, moving it to Processing."""

    __version__ = 1

    order_id = Identifier(required=True)
    courier_id = Identifier(required=True)
    courier_name = String(required=True, max_length=150)
    assigned_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderStatusChanged:
    __version__ = 1

    order_id = Identifier(required=True)
    previous_status = String(required=True, max_length=20)
    new_status = String(required=True, max_length=20)
    changed_by = Identifier()
    changed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class ItemQuantityChanged:
    """A line quantity was edited while the order was still Pending."""

    __version__ = 1

    order_id = Identifier(required=True)
    product_id = Identifier(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)
    new_total = Float(required=True)
    changed_at = DateTime(required=True)
