"""Order removal — hard delete of Pending or Cancelled orders (Admin only)."""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from ordering.authorization import Intent, ensure_permitted
from ordering.domain import ordering
from ordering.order.order import Order
from shared.actors import Actor, Role
from shared.logging import get_logger

logger = get_logger(__name__)


@ordering.command(part_of="Order")
class DeleteOrder:
    order_id = Identifier(required=True)
    actor_id = Identifier(required=True)
    actor_role = String(required=True, choices=Role)


@ordering.command_handler(part_of=Order)
class RemovalHandler:
    @handle(DeleteOrder)
    def delete_order(self, command):
        actor = Actor.from_claim(command.actor_id, command.actor_role)
        intent = Intent.delete_order()
        ensure_permitted(actor, intent)

        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        ensure_permitted(actor, intent, order)
        order.ensure_deletable()

        repo._dao.delete(order)
        logger.info("order_deleted", order_id=str(order.id), deleted_by=actor.id)
        return str(order.id)
