"""Order modification — editing line quantities while an order is Pending."""

from protean import handle
from protean.fields import Identifier, Integer, String
from protean.utils.globals import current_domain

from ordering.authorization import Intent, ensure_permitted
from ordering.domain import ordering
from ordering.order.order import Order
from shared.actors import Actor, Role


@ordering.command(part_of="Order")
class UpdateItemQuantity:
    order_id = Identifier(required=True)
    product_id = Identifier(required=True)
    new_quantity = Integer(required=True)
    actor_id = Identifier(required=True)
    actor_role = String(required=True, choices=Role)


@ordering.command_handler(part_of=Order)
class ModificationHandler:
    @handle(UpdateItemQuantity)
    def update_item_quantity(self, command):
        actor = Actor.from_claim(command.actor_id, command.actor_role)
        intent = Intent.modify_order()
        ensure_permitted(actor, intent)

        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        ensure_permitted(actor, intent, order)

        order.update_item_quantity(command.product_id, command.new_quantity)
        repo.add(order)
        return str(order.id)
