"""Authorization policy for order commands.

A single table-driven, side-effect free decision: given who is asking, what
they want to do, and (optionally) the order's current state, is it allowed?

``order`` is optional so callers can ask the role-level question ("could this
actor ever do this?") before the order has been loaded. Order-dependent rules
only apply once an order is supplied.
"""

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from ordering.order.order import TERMINAL_STATUSES, OrderStatus, OrderType
from shared.actors import Actor, Role
from shared.errors import PermissionDenied


class Action(Enum):
    CREATE_ORDER = "CreateOrder"
    CHANGE_STATUS = "ChangeStatus"
    ASSIGN_COURIER = "AssignCourier"
    UNASSIGN_SELF = "UnassignSelf"
    MODIFY_ORDER = "ModifyOrder"
    DELETE_ORDER = "DeleteOrder"


@dataclass(frozen=True)
class Intent:
    action: Action
    target_status: OrderStatus | None = None
    courier_id: str | None = None

    @classmethod
    def create_order(cls) -> "Intent":
        return cls(Action.CREATE_ORDER)

    @classmethod
    def change_status(cls, to: OrderStatus) -> "Intent":
        return cls(Action.CHANGE_STATUS, target_status=to)

    @classmethod
    def assign_courier(cls, courier_id: str) -> "Intent":
        return cls(Action.ASSIGN_COURIER, courier_id=courier_id)

    @classmethod
    def unassign_self(cls) -> "Intent":
        return cls(Action.UNASSIGN_SELF)

    @classmethod
    def modify_order(cls) -> "Intent":
        return cls(Action.MODIFY_ORDER)

    @classmethod
    def delete_order(cls) -> "Intent":
        return cls(Action.DELETE_ORDER)

    def describe(self) -> str:
        if self.target_status is not None:
            return f"{self.action.value}({self.target_status.value})"
        if self.courier_id is not None:
            return f"{self.action.value}({self.courier_id})"
        return self.action.value


# Actions that move an order through its lifecycle; none apply to terminal orders.
_LIFECYCLE_ACTIONS = frozenset(
    {Action.CHANGE_STATUS, Action.ASSIGN_COURIER, Action.UNASSIGN_SELF, Action.MODIFY_ORDER}
)


# ---------------------------------------------------------------------------
# Courier rules
# ---------------------------------------------------------------------------
def _courier_may_assign(actor: Actor, intent: Intent, order) -> bool:
    if intent.courier_id != actor.id:
        return False
    if order is None:
        return True
    return order.order_type == OrderType.DELIVERY.value and not order.courier_id


# Status a courier may move *to*, keyed to the status the order must be in.
_COURIER_STATUS_STEPS = {
    OrderStatus.PROCESSING: OrderStatus.PENDING,
    OrderStatus.COMPLETED: OrderStatus.PROCESSING,
}


def _courier_may_change_status(actor: Actor, intent: Intent, order) -> bool:
    required_status = _COURIER_STATUS_STEPS.get(intent.target_status)
    if required_status is None:
        return False
    if order is None:
        return True
    return order.courier_id == actor.id and order.status == required_status.value


def _allow(actor: Actor, intent: Intent, order) -> bool:  # noqa: ARG001
    return True


Rule = Callable[[Actor, Intent, object], bool]

_POLICY: dict[Role, dict[Action, Rule]] = {
    Role.ADMIN: {action: _allow for action in Action},
    Role.CASHIER: {
        Action.CREATE_ORDER: _allow,
        Action.CHANGE_STATUS: _allow,
        Action.MODIFY_ORDER: _allow,
    },
    Role.COURIER: {
        Action.ASSIGN_COURIER: _courier_may_assign,
        Action.CHANGE_STATUS: _courier_may_change_status,
    },
}


def permit(actor: Actor, intent: Intent, order=None) -> bool:
    """Decide whether ``actor`` may carry out ``intent`` on ``order``."""
    if order is not None and intent.action in _LIFECYCLE_ACTIONS:
        if OrderStatus(order.status) in TERMINAL_STATUSES:
            return False

    rule = _POLICY.get(actor.role, {}).get(intent.action)
    if rule is None:
        return False
    return rule(actor, intent, order)


def ensure_permitted(actor: Actor, intent: Intent, order=None) -> None:
    """Raise PermissionDenied unless ``permit`` allows the intent."""
    if not permit(actor, intent, order):
        target = f" on order {order.id}" if order is not None else ""
        raise PermissionDenied(f"{actor.role.value} {actor.id} may not {intent.describe()}{target}")
