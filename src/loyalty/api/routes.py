"""FastAPI routes for the Loyalty domain — balances and the rewards program."""

from dataclasses import asdict

from fastapi import APIRouter, Depends

from loyalty.api.schemas import (
    AccountResponse,
    PointsRequest,
    ProgramResponse,
    RedeemResponse,
    RewardSchema,
    UpdateProgramRequest,
)
from loyalty.ledger import AccountSnapshot, ProgramSnapshot, get_loyalty_ledger
from shared.actors import Actor, Role
from shared.errors import PermissionDenied
from shared.web import current_actor

loyalty_router = APIRouter(prefix="/loyalty", tags=["loyalty"])

_BALANCE_ROLES = frozenset({Role.ADMIN, Role.CASHIER})


def counter_staff(actor: Actor = Depends(current_actor)) -> Actor:
    """Only the counter (Admin or Cashier) moves points in or out of an account."""
    if actor.role not in _BALANCE_ROLES:
        raise PermissionDenied(f"{actor.role.value} {actor.id} may not change loyalty balances")
    return actor


def _account_response(account: AccountSnapshot) -> AccountResponse:
    rewards = get_loyalty_ledger().available_rewards(account.customer_id)
    return AccountResponse(
        customer_id=account.customer_id,
        points=account.points,
        last_updated=account.last_updated.isoformat() if account.last_updated else None,
        available_rewards=[RewardSchema(**asdict(reward)) for reward in rewards],
    )


def _program_response(program: ProgramSnapshot) -> ProgramResponse:
    return ProgramResponse(
        points_per_dollar=program.points_per_dollar,
        rewards=[RewardSchema(**asdict(reward)) for reward in program.rewards],
    )


@loyalty_router.post("/accounts/{customer_id}/accrue", response_model=AccountResponse)
def accrue_points(
    customer_id: str,
    body: PointsRequest,
    actor: Actor = Depends(counter_staff),  # noqa: ARG001
) -> AccountResponse:
    return _account_response(get_loyalty_ledger().accrue(customer_id, body.points))


@loyalty_router.post("/accounts/{customer_id}/redeem", response_model=RedeemResponse)
def redeem_points(
    customer_id: str,
    body: PointsRequest,
    actor: Actor = Depends(counter_staff),  # noqa: ARG001
) -> RedeemResponse:
    redeemed = get_loyalty_ledger().redeem(customer_id, body.points)
    return RedeemResponse(redeemed=redeemed, points=body.points)


@loyalty_router.get("/accounts/{customer_id}", response_model=AccountResponse)
def get_account(customer_id: str) -> AccountResponse:
    return _account_response(get_loyalty_ledger().get_account(customer_id))


@loyalty_router.get("/program", response_model=ProgramResponse)
def get_program() -> ProgramResponse:
    return _program_response(get_loyalty_ledger().get_program())


@loyalty_router.put("/program", response_model=ProgramResponse)
def update_program(body: UpdateProgramRequest, actor: Actor = Depends(current_actor)) -> ProgramResponse:
    program = get_loyalty_ledger().update_program(
        actor,
        body.points_per_dollar,
        [reward.model_dump() for reward in body.rewards],
    )
    return _program_response(program)
