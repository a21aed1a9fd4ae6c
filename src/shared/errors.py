"""Error taxonomy shared by the ordering and loyalty contexts.

Field-level validation failures are reported with Protean's own
``ValidationError``. Everything else a command can fail with is a
``BeanStreamError`` subclass carrying a stable machine-readable ``code`` so
that callers (and the HTTP layer) can tell a retryable conflict apart from a
permanent rejection.
"""

from enum import Enum


class ConflictReason(Enum):
    ALREADY_ASSIGNED = "AlreadyAssigned"
    STALE_VERSION = "StaleVersion"


class BeanStreamError(Exception):
    """Base class for typed command failures."""

    code = "error"
    retryable = False

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message or self.code

    def to_dict(self) -> dict:
        return {"error": self.code, "message": self.message, "retryable": self.retryable}


class PermissionDenied(BeanStreamError):
    code = "permission_denied"


class NotFound(BeanStreamError):
    code = "not_found"


class Unavailable(BeanStreamError):
    """A store could not be locked within the configured timeout."""

    code = "unavailable"
    retryable = True


class InsufficientBalance(BeanStreamError):
    code = "insufficient_balance"

    def __init__(self, customer_id: str, requested: int, available: int):
        super().__init__(f"Customer {customer_id} has {available} points, {requested} requested")
        self.customer_id = customer_id
        self.requested = requested
        self.available = available


class Conflict(BeanStreamError):
    """Concurrent modification conflict.

    ``AlreadyAssigned`` is final (someone else won the claim); ``StaleVersion``
    means the caller read an older revision and may re-read and retry.
    """

    code = "conflict"

    def __init__(self, reason: ConflictReason, message: str = ""):
        super().__init__(message or reason.value)
        self.reason = reason

    @property
    def retryable(self) -> bool:
        return self.reason is ConflictReason.STALE_VERSION

    def to_dict(self) -> dict:
        payload = super().to_dict()
        payload["reason"] = self.reason.value
        return payload
