"""LoyaltyLedger — the command and query surface of the loyalty context.

All balance changes are serialized on one writer lock so the
read-modify-write of accrual and redemption is atomic for every caller.
Results are returned as frozen snapshots.
"""

import json
import threading
from dataclasses import dataclass
from datetime import UTC, datetime

from protean.exceptions import ObjectNotFoundError

from loyalty.account.account import LoyaltyAccount
from loyalty.account.accrual import AccruePoints, AwardOrderPoints
from loyalty.account.redemption import RedeemPoints
from loyalty.program.configuration import UpdateLoyaltyProgram
from loyalty.program.program import LoyaltyProgram
from shared.actors import Actor
from shared.errors import InsufficientBalance, NotFound
from shared.locking import WriterLock
from shared.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class AccountSnapshot:
    customer_id: str
    points: int
    last_updated: datetime | None

    @classmethod
    def from_account(cls, account: LoyaltyAccount) -> "AccountSnapshot":
        last_updated = account.last_updated
        if last_updated is not None and last_updated.tzinfo is None:
            last_updated = last_updated.replace(tzinfo=UTC)
        return cls(customer_id=str(account.customer_id), points=account.points, last_updated=last_updated)


@dataclass(frozen=True)
class Reward:
    points_threshold: int
    reward_name: str


@dataclass(frozen=True)
class ProgramSnapshot:
    points_per_dollar: float
    rewards: tuple[Reward, ...]

    @classmethod
    def from_program(cls, program: LoyaltyProgram) -> "ProgramSnapshot":
        return cls(
            points_per_dollar=program.points_per_dollar,
            rewards=tuple(Reward(**reward) for reward in program.reward_list()),
        )


class LoyaltyLedger:
    def __init__(self, domain, lock_timeout: float | None = None):
        self.domain = domain
        self.writer_lock = WriterLock("loyalty ledger", timeout=lock_timeout)

    def _account(self, customer_id: str) -> AccountSnapshot:
        try:
            account = self.domain.repository_for(LoyaltyAccount).get(customer_id)
        except ObjectNotFoundError as exc:
            raise NotFound(f"No loyalty account for customer {customer_id}") from exc
        return AccountSnapshot.from_account(account)

    # -------------------------------------------------------------------
    # Commands
    # -------------------------------------------------------------------
    def accrue(self, customer_id: str, points: int) -> AccountSnapshot:
        """Add points, opening the account at zero if needed.

        Not idempotent: callers crediting orders should use ``award_for_order``.
        """
        with self.domain.domain_context():
            command = AccruePoints(customer_id=customer_id, points=points)
            with self.writer_lock.held():
                self.domain.process(command, asynchronous=False)
                return self._account(customer_id)

    def redeem(self, customer_id: str, points: int) -> bool:
        """Deduct points. Returns False when the balance (or account) cannot cover it."""
        with self.domain.domain_context():
            command = RedeemPoints(customer_id=customer_id, points=points)
            with self.writer_lock.held():
                try:
                    self.domain.process(command, asynchronous=False)
                except InsufficientBalance as exc:
                    logger.info(
                        "redemption_declined",
                        customer_id=customer_id,
                        requested=exc.requested,
                        available=exc.available,
                    )
                    return False
        return True

    def award_for_order(self, customer_id: str, order_id: str, order_total: float) -> int:
        """Credit points for an order at the current rate, at most once per order.

        Returns the points credited by this call (0 for a repeat).
        """
        with self.domain.domain_context():
            command = AwardOrderPoints(customer_id=customer_id, order_id=order_id, order_total=order_total)
            with self.writer_lock.held():
                return self.domain.process(command, asynchronous=False)

    def update_program(self, actor: Actor, points_per_dollar: float, rewards: list[dict]) -> ProgramSnapshot:
        with self.domain.domain_context():
            command = UpdateLoyaltyProgram(
                points_per_dollar=points_per_dollar,
                rewards=json.dumps(rewards),
                actor_id=actor.id,
                actor_role=actor.role.value,
            )
            with self.writer_lock.held():
                self.domain.process(command, asynchronous=False)
                return ProgramSnapshot.from_program(LoyaltyProgram.current())

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def get_account(self, customer_id: str) -> AccountSnapshot:
        with self.domain.domain_context():
            return self._account(customer_id)

    def get_account_balance(self, customer_id: str) -> int:
        return self.get_account(customer_id).points

    def get_program(self) -> ProgramSnapshot:
        with self.domain.domain_context():
            return ProgramSnapshot.from_program(LoyaltyProgram.current())

    def available_rewards(self, customer_id: str) -> list[Reward]:
        """Rewards on the ladder the customer's balance currently reaches."""
        balance = self.get_account_balance(customer_id)
        return [reward for reward in self.get_program().rewards if reward.points_threshold <= balance]


_ledger_instance = None
_ledger_lock = threading.Lock()


def get_loyalty_ledger() -> LoyaltyLedger:
    """Return the process-wide ledger bound to the loyalty domain (singleton)."""
    global _ledger_instance
    if _ledger_instance is None:
        with _ledger_lock:
            if _ledger_instance is None:
                from loyalty.domain import loyalty

                _ledger_instance = LoyaltyLedger(loyalty)
    return _ledger_instance


def reset_loyalty_ledger():
    """Drop the ledger singleton (useful for testing)."""
    global _ledger_instance
    _ledger_instance = None
