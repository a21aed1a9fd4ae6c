"""Loyalty program configuration — command and handler (Admin only)."""

import json

from protean import handle
from protean.fields import Float, Identifier, String, Text
from protean.utils.globals import current_domain

from loyalty.domain import loyalty
from loyalty.program.program import LoyaltyProgram
from shared.actors import Actor, Role
from shared.errors import PermissionDenied
from shared.logging import get_logger

logger = get_logger(__name__)


@loyalty.command(part_of="LoyaltyProgram")
class UpdateLoyaltyProgram:
    points_per_dollar = Float(required=True, min_value=0.0)
    rewards = Text(required=True)  # JSON: ordered list of {points_threshold, reward_name}
    actor_id = Identifier(required=True)
    actor_role = String(required=True, choices=Role)


@loyalty.command_handler(part_of=LoyaltyProgram)
class ProgramConfigurationHandler:
    @handle(UpdateLoyaltyProgram)
    def update_program(self, command):
        actor = Actor.from_claim(command.actor_id, command.actor_role)
        if not actor.is_admin:
            raise PermissionDenied(f"{actor.role.value} {actor.id} may not update the loyalty program")

        rewards = json.loads(command.rewards) if isinstance(command.rewards, str) else command.rewards
        program = LoyaltyProgram.current()
        program.replace(command.points_per_dollar, rewards, updated_by=actor.id)
        current_domain.repository_for(LoyaltyProgram).add(program)
        logger.info("loyalty_program_updated", points_per_dollar=program.points_per_dollar, rewards=len(rewards))
        return str(program.program_id)
