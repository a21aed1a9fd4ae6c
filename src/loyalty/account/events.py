"""Domain events for the LoyaltyAccount aggregate."""

from protean.fields import DateTime, Identifier, Integer

from loyalty.domain import loyalty


@loyalty.event(part_of="LoyaltyAccount")
class PointsAccrued:
    __version__ = 1

    customer_id = Identifier(required=True)
    points = Integer(required=True)
    balance = Integer(required=True)
    order_id = Identifier()  # set when the accrual came from a completed order
    accrued_at = DateTime(required=True)


@loyalty.event(part_of="LoyaltyAccount")
class PointsRedeemed:
    __version__ = 1

    customer_id = Identifier(required=True)
    points = Integer(required=True)
    balance = Integer(required=True)
    redeemed_at = DateTime(required=True)
