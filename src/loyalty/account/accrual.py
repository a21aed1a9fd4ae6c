"""Points accrual — commands and handler.

``AccruePoints`` is the raw primitive and is not idempotent. ``AwardOrderPoints``
is the order-driven path: it converts an order total into points with the
current program rate and records a PointsGrant so the same order is never
credited twice.
"""

from datetime import UTC, datetime
from decimal import ROUND_FLOOR, Decimal

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Float, Identifier, Integer
from protean.utils.globals import current_domain

from loyalty.account.account import LoyaltyAccount, PointsGrant
from loyalty.domain import loyalty
from loyalty.program.program import LoyaltyProgram
from shared.logging import get_logger

logger = get_logger(__name__)


def points_for_total(order_total: float, points_per_dollar: float) -> int:
    """floor(total × rate), computed in decimal so 4.35 × 100 stays 435."""
    points = (Decimal(str(order_total)) * Decimal(str(points_per_dollar))).to_integral_value(rounding=ROUND_FLOOR)
    return max(int(points), 0)


@loyalty.command(part_of="LoyaltyAccount")
class AccruePoints:
    customer_id = Identifier(required=True)
    points = Integer(required=True)


@loyalty.command(part_of="LoyaltyAccount")
class AwardOrderPoints:
    customer_id = Identifier(required=True)
    order_id = Identifier(required=True)
    order_total = Float(required=True, min_value=0.0)


def _load_or_open(repo, customer_id: str) -> LoyaltyAccount:
    try:
        return repo.get(customer_id)
    except ObjectNotFoundError:
        return LoyaltyAccount.open(customer_id)


def _already_granted(grants, order_id: str) -> bool:
    try:
        grants.get(order_id)
    except ObjectNotFoundError:
        return False
    return True


@loyalty.command_handler(part_of=LoyaltyAccount)
class AccrualHandler:
    @handle(AccruePoints)
    def accrue_points(self, command):
        repo = current_domain.repository_for(LoyaltyAccount)
        account = _load_or_open(repo, command.customer_id)
        account.accrue(command.points)
        repo.add(account)
        return str(account.customer_id)

    @handle(AwardOrderPoints)
    def award_order_points(self, command):
        grants = current_domain.repository_for(PointsGrant)
        if _already_granted(grants, command.order_id):
            logger.debug("order_points_already_awarded", order_id=command.order_id)
            return 0

        program = LoyaltyProgram.current()
        points = points_for_total(command.order_total, program.points_per_dollar)
        grants.add(
            PointsGrant(
                order_id=command.order_id,
                customer_id=command.customer_id,
                points=points,
                order_total=command.order_total,
                granted_at=datetime.now(UTC),
            )
        )

        if points > 0:
            repo = current_domain.repository_for(LoyaltyAccount)
            account = _load_or_open(repo, command.customer_id)
            account.accrue(points, order_id=command.order_id)
            repo.add(account)

        logger.info(
            "order_points_awarded",
            customer_id=command.customer_id,
            order_id=command.order_id,
            points=points,
        )
        return points
