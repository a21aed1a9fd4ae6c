"""Order aggregate (CQRS) — the core of the ordering domain.

An Order is a single café ticket: priced line items, a pickup or delivery
fulfillment type, and the courier who claimed it when it is a delivery.
Totals are always derived from the lines; they are never accepted from a
client.

State Machine:
    PENDING → PROCESSING → COMPLETED
    {PENDING, PROCESSING} → CANCELLED
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import (
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    String,
    ValueObject,
)

from ordering.domain import ordering
from ordering.order.events import (
    CourierAssigned,
    ItemQuantityChanged,
    OrderPlaced,
    OrderStatusChanged,
)
from shared.errors import Conflict, ConflictReason


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "Pending"
    PROCESSING = "Processing"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


class OrderType(Enum):
    PICKUP = "Pickup"
    DELIVERY = "Delivery"


_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.PROCESSING, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.COMPLETED, OrderStatus.CANCELLED},
    OrderStatus.COMPLETED: set(),  # terminal
    OrderStatus.CANCELLED: set(),  # terminal
}

TERMINAL_STATUSES = frozenset({OrderStatus.COMPLETED, OrderStatus.CANCELLED})

_DELETABLE_STATUSES = {OrderStatus.PENDING, OrderStatus.CANCELLED}


def line_total(items) -> float:
    """Sum of unit_price × quantity, rounded to cents."""
    return round(sum(item.unit_price * item.quantity for item in items), 2)


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@ordering.value_object(part_of="Order")
class DeliveryLocation:
    """Where a delivery order is dropped off."""

    address = String(required=True, max_length=255)
    city = String(required=True, max_length=100)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@ordering.entity(part_of="Order")
class OrderItem:
    """A priced line on the ticket. Prices come from the catalog at placement."""

    product_id = Identifier(required=True)
    name = String(required=True, max_length=150)
    category = String(max_length=100)
    unit_price = Float(required=True, min_value=0.0)
    quantity = Integer(required=True, min_value=1)
    line_sequence = Integer(required=True, min_value=0)


# ---------------------------------------------------------------------------
# Aggregate Root (CQRS)
# ---------------------------------------------------------------------------
@ordering.aggregate
class Order:
    customer_name = String(required=True, max_length=150)
    customer_id = Identifier()
    items = HasMany(OrderItem)
    total = Float(default=0.0, min_value=0.0)
    status = String(
        choices=OrderStatus,
        default=OrderStatus.PENDING.value,
    )
    order_type = String(required=True, choices=OrderType)
    delivery_location = ValueObject(DeliveryLocation)
    courier_id = Identifier()
    courier_name = String(max_length=150)
    version = Integer(default=1, min_value=1)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Invariants
    # -------------------------------------------------------------------
    @invariant.post
    def total_matches_line_items(self):
        if abs((self.total or 0.0) - line_total(self.items)) > 0.005:
            raise ValidationError({"total": ["Order total must equal the sum of its line items"]})

    @invariant.post
    def courier_only_on_delivery_orders(self):
        if self.courier_id and self.order_type != OrderType.DELIVERY.value:
            raise ValidationError({"courier_id": ["Only delivery orders can have a courier"]})

    @invariant.post
    def delivery_location_matches_order_type(self):
        is_delivery = self.order_type == OrderType.DELIVERY.value
        if is_delivery and self.delivery_location is None:
            raise ValidationError({"delivery_location": ["Delivery orders require a delivery location"]})
        if not is_delivery and self.delivery_location is not None:
            raise ValidationError({"delivery_location": ["Only delivery orders can have a delivery location"]})

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        customer_name: str,
        order_type: str,
        lines: list[dict],
        placed_by: str,
        customer_id: str | None = None,
        delivery_location: dict | None = None,
    ):
        """Create a Pending order from already-priced lines.

        Each line carries product_id, name, category, unit_price and quantity.
        """
        if not lines:
            raise ValidationError({"items": ["An order needs at least one item"]})

        now = datetime.now(UTC)
        order = cls(
            customer_name=customer_name,
            customer_id=customer_id,
            order_type=order_type,
            delivery_location=DeliveryLocation(**delivery_location) if delivery_location else None,
            status=OrderStatus.PENDING.value,
            total=0.0,
            version=1,
            created_at=now,
            updated_at=now,
        )
        with atomic_change(order):
            for sequence, line in enumerate(lines):
                order.add_items(OrderItem(line_sequence=sequence, **line))
            order.total = line_total(order.items)

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                customer_name=customer_name,
                customer_id=customer_id,
                order_type=order_type,
                items=json.dumps(lines),
                total=order.total,
                placed_by=placed_by,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------
    @property
    def is_terminal(self) -> bool:
        return OrderStatus(self.status) in TERMINAL_STATUSES

    @property
    def is_delivery(self) -> bool:
        return self.order_type == OrderType.DELIVERY.value

    def ordered_items(self) -> list:
        return sorted(self.items, key=lambda item: item.line_sequence)

    def reorder_lines(self) -> list[dict]:
        """Product/quantity pairs needed to place this order again."""
        return [{"product_id": str(item.product_id), "quantity": item.quantity} for item in self.ordered_items()]

    def assert_can_transition(self, target_status: OrderStatus) -> None:
        current = OrderStatus(self.status)
        if current == target_status:
            raise ValidationError({"status": [f"Order is already {current.value}"]})
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise ValidationError({"status": [f"Cannot transition from {current.value} to {target_status.value}"]})

    def _touch(self, now: datetime) -> None:
        self.version = (self.version or 1) + 1
        self.updated_at = now

    # -------------------------------------------------------------------
    # Courier assignment
    # -------------------------------------------------------------------
    def assign_courier(self, courier_id: str, courier_name: str) -> None:
        """Claim an unassigned delivery order for a courier.

        A Pending order starts processing with the claim. An order the counter
        already moved to Processing keeps its status and just gains the courier.
        """
        if not self.is_delivery:
            raise ValidationError({"order_type": ["Only delivery orders can be assigned a courier"]})
        if self.courier_id:
            raise Conflict(
                ConflictReason.ALREADY_ASSIGNED,
                f"Order {self.id} is already assigned to courier {self.courier_id}",
            )
        starts_processing = OrderStatus(self.status) != OrderStatus.PROCESSING
        if starts_processing:
            self.assert_can_transition(OrderStatus.PROCESSING)

        now = datetime.now(UTC)
        previous_status = self.status
        with atomic_change(self):
            self.courier_id = courier_id
            self.courier_name = courier_name
            self.status = OrderStatus.PROCESSING.value
            self._touch(now)

        self.raise_(
            CourierAssigned(
                order_id=str(self.id),
                courier_id=courier_id,
                courier_name=courier_name,
                assigned_at=now,
            )
        )
        if not starts_processing:
            return
        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                previous_status=previous_status,
                new_status=self.status,
                changed_by=courier_id,
                changed_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Status changes
    # -------------------------------------------------------------------
    def change_status(self, target_status: OrderStatus, changed_by: str | None = None) -> None:
        self.assert_can_transition(target_status)

        now = datetime.now(UTC)
        previous_status = self.status
        self.status = target_status.value
        self._touch(now)

        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                previous_status=previous_status,
                new_status=self.status,
                changed_by=changed_by,
                changed_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Modification (only while Pending)
    # -------------------------------------------------------------------
    def update_item_quantity(self, product_id: str, new_quantity: int) -> None:
        if OrderStatus(self.status) != OrderStatus.PENDING:
            raise ValidationError({"status": ["Item quantities can only be changed while the order is Pending"]})
        if new_quantity is None or new_quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        item = next((i for i in self.items if str(i.product_id) == str(product_id)), None)
        if item is None:
            raise ValidationError({"product_id": [f"Product {product_id} is not on this order"]})

        now = datetime.now(UTC)
        previous_quantity = item.quantity
        with atomic_change(self):
            item.quantity = new_quantity
            self.total = line_total(self.items)
            self._touch(now)

        self.raise_(
            ItemQuantityChanged(
                order_id=str(self.id),
                product_id=str(product_id),
                previous_quantity=previous_quantity,
                new_quantity=new_quantity,
                new_total=self.total,
                changed_at=now,
            )
        )

    def ensure_deletable(self) -> None:
        if OrderStatus(self.status) not in _DELETABLE_STATUSES:
            raise ValidationError({"status": [f"Cannot delete an order that is {self.status}"]})
