"""Domain events for the LoyaltyProgram aggregate."""

from protean.fields import DateTime, Float, Identifier, Text

from loyalty.domain import loyalty


@loyalty.event(part_of="LoyaltyProgram")
class LoyaltyProgramUpdated:
    """The program configuration was replaced as a whole."""

    __version__ = 1

    program_id = Identifier(required=True)
    points_per_dollar = Float(required=True)
    rewards = Text(required=True)  # JSON: ordered list of {points_threshold, reward_name}
    updated_by = Identifier(required=True)
    updated_at = DateTime(required=True)
