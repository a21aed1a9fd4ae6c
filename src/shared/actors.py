"""Authenticated actors issuing commands against the fulfillment core.

Identity is issued by an external collaborator; this module only models the
claim it hands over (an id and a role) and the role vocabulary.
"""

from dataclasses import dataclass
from enum import Enum


class Role(Enum):
    ADMIN = "Admin"
    CASHIER = "Cashier"
    COURIER = "Courier"


@dataclass(frozen=True)
class Actor:
    id: str
    role: Role

    @classmethod
    def from_claim(cls, actor_id: str, role: str) -> "Actor":
        """Build an Actor from the raw id/role strings of an identity claim."""
        return cls(id=actor_id, role=Role(role))

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN
