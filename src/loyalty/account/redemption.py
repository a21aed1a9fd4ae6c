"""Points redemption — command and handler."""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from loyalty.account.account import LoyaltyAccount, require_positive_points
from loyalty.domain import loyalty
from shared.errors import InsufficientBalance


@loyalty.command(part_of="LoyaltyAccount")
class RedeemPoints:
    customer_id = Identifier(required=True)
    points = Integer(required=True)


@loyalty.command_handler(part_of=LoyaltyAccount)
class RedemptionHandler:
    @handle(RedeemPoints)
    def redeem_points(self, command):
        require_positive_points(command.points)

        repo = current_domain.repository_for(LoyaltyAccount)
        try:
            account = repo.get(command.customer_id)
        except ObjectNotFoundError as exc:
            raise InsufficientBalance(command.customer_id, command.points, 0) from exc

        account.redeem(command.points)
        repo.add(account)
        return str(account.customer_id)
