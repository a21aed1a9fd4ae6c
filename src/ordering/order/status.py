"""Order status changes — command and handler."""

from protean import handle
from protean.fields import Identifier, Integer, String
from protean.utils.globals import current_domain

from ordering.authorization import Intent, ensure_permitted
from ordering.domain import ordering
from ordering.order.order import Order, OrderStatus
from shared.actors import Actor, Role
from shared.errors import Conflict, ConflictReason


@ordering.command(part_of="Order")
class ChangeOrderStatus:
    """Move an order along its lifecycle.

    ``expected_version`` is optional; when given, the change only applies if
    the order has not been modified since the caller read it.
    """

    order_id = Identifier(required=True)
    target_status = String(required=True, choices=OrderStatus)
    expected_version = Integer(min_value=1)
    actor_id = Identifier(required=True)
    actor_role = String(required=True, choices=Role)


@ordering.command_handler(part_of=Order)
class StatusHandler:
    @handle(ChangeOrderStatus)
    def change_status(self, command):
        actor = Actor.from_claim(command.actor_id, command.actor_role)
        target = OrderStatus(command.target_status)

        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        if command.expected_version is not None and order.version != command.expected_version:
            raise Conflict(
                ConflictReason.STALE_VERSION,
                f"Order {order.id} is at version {order.version}, expected {command.expected_version}",
            )

        order.assert_can_transition(target)
        ensure_permitted(actor, Intent.change_status(target), order)

        order.change_status(target, changed_by=actor.id)
        repo.add(order)
        return str(order.id)
