"""LoyaltyProgram aggregate — the single program configuration.

There is exactly one program, stored under ``PROGRAM_ID``. Until an admin
saves one, ``LoyaltyProgram.current()`` falls back to one point per dollar
and an empty reward ladder.
"""

import json
from datetime import UTC, datetime

from protean import atomic_change, invariant
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import DateTime, Float, Identifier, Text
from protean.utils.globals import current_domain

from loyalty.domain import loyalty
from loyalty.program.events import LoyaltyProgramUpdated

PROGRAM_ID = "default"
DEFAULT_POINTS_PER_DOLLAR = 1.0


@loyalty.aggregate
class LoyaltyProgram:
    program_id = Identifier(identifier=True)
    points_per_dollar = Float(required=True, min_value=0.0)
    rewards = Text(default="[]")  # JSON: ordered list of {points_threshold, reward_name}
    updated_by = Identifier()
    updated_at = DateTime()

    @invariant.post
    def rewards_are_well_formed(self):
        try:
            rewards = json.loads(self.rewards or "[]")
        except (TypeError, ValueError):
            raise ValidationError({"rewards": ["Rewards must be valid JSON"]}) from None

        if not isinstance(rewards, list):
            raise ValidationError({"rewards": ["Rewards must be a list"]})
        for position, reward in enumerate(rewards, start=1):
            threshold = reward.get("points_threshold") if isinstance(reward, dict) else None
            name = reward.get("reward_name") if isinstance(reward, dict) else None
            if isinstance(threshold, bool) or not isinstance(threshold, int) or threshold < 0:
                raise ValidationError({"rewards": [f"Reward {position}: points_threshold must be a whole number >= 0"]})
            if not isinstance(name, str) or not name.strip():
                raise ValidationError({"rewards": [f"Reward {position}: reward_name is required"]})

    @classmethod
    def default(cls):
        return cls(program_id=PROGRAM_ID, points_per_dollar=DEFAULT_POINTS_PER_DOLLAR, rewards="[]")

    @classmethod
    def current(cls):
        """The stored program, or the default one if none has been saved."""
        try:
            return current_domain.repository_for(cls).get(PROGRAM_ID)
        except ObjectNotFoundError:
            return cls.default()

    def reward_list(self) -> list[dict]:
        return json.loads(self.rewards or "[]")

    def replace(self, points_per_dollar: float, rewards: list[dict], updated_by: str) -> None:
        """Replace the rate and the whole reward ladder; nothing is merged."""
        if not isinstance(rewards, list):
            raise ValidationError({"rewards": ["Rewards must be a list"]})

        now = datetime.now(UTC)
        ladder = [
            {"points_threshold": reward.get("points_threshold"), "reward_name": reward.get("reward_name")}
            if isinstance(reward, dict)
            else reward
            for reward in rewards
        ]
        with atomic_change(self):
            self.points_per_dollar = points_per_dollar
            self.rewards = json.dumps(ladder)
            self.updated_by = updated_by
            self.updated_at = now

        self.raise_(
            LoyaltyProgramUpdated(
                program_id=str(self.program_id),
                points_per_dollar=self.points_per_dollar,
                rewards=self.rewards,
                updated_by=updated_by,
                updated_at=now,
            )
        )
