"""
Contest error taxonomy.

Every operation validates its preconditions before writing anything and
raises one of these on failure. The API layer renders them as
``{"detail": ..., "code": ...}`` with the attached status code.
"""
from __future__ import annotations


class ContestError(Exception):
    """Base class for all contest ledger failures."""
    code = "contest_error"
    status_code = 400
    default_message = "Contest operation failed"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self)


class ContestNotActive(ContestError):
    code = "contest_not_active"
    status_code = 409
    default_message = "Contest is not active"


class Unauthorized(ContestError):
    code = "unauthorized"
    status_code = 403
    default_message = "Caller is not allowed to perform this operation"


class InsufficientPayment(ContestError):
    code = "insufficient_payment"
    status_code = 402

    def __init__(self, payment_amount: int, entry_fee: int):
        self.payment_amount = payment_amount
        self.entry_fee = entry_fee
        super().__init__(f"Insufficient entry fee: paid {payment_amount}, need {entry_fee}")


class AlreadyRegistered(ContestError):
    code = "already_registered"
    status_code = 409

    def __init__(self, identity: str):
        self.identity = identity
        super().__init__(f"Participant {identity} already registered")


class NotRegistered(ContestError):
    code = "not_registered"
    status_code = 404

    def __init__(self, identity: str):
        self.identity = identity
        super().__init__(f"Participant {identity} not registered")


class AlreadyInitialized(ContestError):
    code = "already_initialized"
    status_code = 409

    def __init__(self, contest_id: str):
        self.contest_id = contest_id
        super().__init__(f"Contest {contest_id} already initialized")


class InvalidWinners(ContestError):
    code = "invalid_winners"
    status_code = 422
    default_message = "Invalid winner list"


class InvalidAmount(ContestError):
    code = "invalid_amount"
    status_code = 422
    default_message = "Amount must be a non-negative integer"
