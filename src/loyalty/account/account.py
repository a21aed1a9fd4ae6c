"""LoyaltyAccount and PointsGrant aggregates (CQRS).

A LoyaltyAccount is keyed by the customer id and holds a non-negative points
balance. A PointsGrant is keyed by order id; its existence means the order's
points have already been credited.
"""

from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, Identifier, Integer

from loyalty.account.events import PointsAccrued, PointsRedeemed
from loyalty.domain import loyalty
from shared.errors import InsufficientBalance


def require_positive_points(points) -> None:
    if isinstance(points, bool) or not isinstance(points, int) or points <= 0:
        raise ValidationError({"points": ["Points must be a positive whole number"]})


@loyalty.aggregate
class LoyaltyAccount:
    customer_id = Identifier(identifier=True)
    points = Integer(default=0, min_value=0)
    last_updated = DateTime()

    @classmethod
    def open(cls, customer_id: str):
        return cls(customer_id=customer_id, points=0, last_updated=datetime.now(UTC))

    def accrue(self, points: int, order_id: str | None = None) -> None:
        require_positive_points(points)

        now = datetime.now(UTC)
        self.points = self.points + points
        self.last_updated = now

        self.raise_(
            PointsAccrued(
                customer_id=str(self.customer_id),
                points=points,
                balance=self.points,
                order_id=order_id,
                accrued_at=now,
            )
        )

    def redeem(self, points: int) -> None:
        """Deduct points; a balance that would go negative is rejected, never clamped."""
        require_positive_points(points)
        if points > self.points:
            raise InsufficientBalance(str(self.customer_id), points, self.points)

        now = datetime.now(UTC)
        self.points = self.points - points
        self.last_updated = now

        self.raise_(
            PointsRedeemed(
                customer_id=str(self.customer_id),
                points=points,
                balance=self.points,
                redeemed_at=now,
            )
        )


@loyalty.aggregate
class PointsGrant:
    order_id = Identifier(identifier=True)
    customer_id = Identifier(required=True)
    points = Integer(required=True, min_value=0)
    order_total = Float(min_value=0.0)
    granted_at = DateTime()
