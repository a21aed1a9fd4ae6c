"""Courier assignment — command and handler.

Assignment is first-claim-wins. The handler re-reads the order inside the
caller's unit of work and refuses to overwrite an existing courier; callers
serialize writers (see ``ordering.store``) so the read and the write form one
atomic step.
"""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from ordering.authorization import Intent, ensure_permitted
from ordering.couriers import get_courier_directory
from ordering.domain import ordering
from ordering.order.order import Order
from shared.actors import Actor, Role
from shared.errors import Conflict, ConflictReason
from shared.logging import get_logger

logger = get_logger(__name__)


@ordering.command(part_of="Order")
class AssignCourier:
    order_id = Identifier(required=True)
    courier_id = Identifier(required=True)
    actor_id = Identifier(required=True)
    actor_role = String(required=True, choices=Role)


@ordering.command_handler(part_of=Order)
class CourierAssignmentHandler:
    @handle(AssignCourier)
    def assign_courier(self, command):
        actor = Actor.from_claim(command.actor_id, command.actor_role)
        intent = Intent.assign_courier(command.courier_id)
        ensure_permitted(actor, intent)

        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        if order.courier_id:
            logger.info(
                "courier_claim_lost",
                order_id=str(order.id),
                courier_id=command.courier_id,
                assigned_to=order.courier_id,
            )
            raise Conflict(
                ConflictReason.ALREADY_ASSIGNED,
                f"Order {order.id} is already assigned to courier {order.courier_id}",
            )
        ensure_permitted(actor, intent, order)

        courier = get_courier_directory().get_courier(command.courier_id)
        if courier is None:
            raise ValidationError({"courier_id": [f"Unknown courier: {command.courier_id}"]})

        order.assign_courier(command.courier_id, courier["name"])
        repo.add(order)
        logger.info("courier_assigned", order_id=str(order.id), courier_id=command.courier_id)
        return str(order.id)
