"""Pydantic request/response schemas for the Loyalty API."""

from pydantic import BaseModel, Field


class PointsRequest(BaseModel):
    points: int = Field(gt=0)


class RewardSchema(BaseModel):
    points_threshold: int = Field(ge=0)
    reward_name: str


class UpdateProgramRequest(BaseModel):
    points_per_dollar: float = Field(ge=0)
    rewards: list[RewardSchema] = []

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "points_per_dollar": 1.0,
                    "rewards": [
                        {"points_threshold": 50, "reward_name": "Free pastry"},
                        {"points_threshold": 120, "reward_name": "Free drink of choice"},
                    ],
                }
            ]
        }
    }


class AccountResponse(BaseModel):
    customer_id: str
    points: int
    last_updated: str | None = None
    available_rewards: list[RewardSchema] = []


class RedeemResponse(BaseModel):
    redeemed: bool
    points: int


class ProgramResponse(BaseModel):
    points_per_dollar: float
    rewards: list[RewardSchema]
