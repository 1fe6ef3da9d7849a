"""Error taxonomy for ledger operations.

Every failure a caller can observe is a ``LedgerError`` carrying a stable
``kind`` string and an HTTP status used by the API error handler.
``VersionConflict`` is deliberately outside that hierarchy: stores raise it
and ``apply_to_account`` consumes it, it never reaches a caller.
"""

from __future__ import annotations


class LedgerError(Exception):
    """Base class for errors surfaced to callers."""

    kind = "ledger_error"
    status_code = 400
    default_message = "Ledger operation failed"
    # Seconds a client should wait before repeating the call, when retrying can help.
    retry_after: int | None = None

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict[str, str]:
        return {"detail": self.message, "error": self.kind}


class NotFound(LedgerError):
    kind = "not_found"
    status_code = 404
    default_message = "Account not found"


class InvalidAmount(LedgerError):
    kind = "invalid_amount"
    status_code = 400
    default_message = "Amount must be a positive integer"


class AlreadyCompleted(LedgerError):
    kind = "already_completed"
    status_code = 409
    default_message = "Task already completed"


class PrerequisiteNotMet(LedgerError):
    kind = "prerequisite_not_met"
    status_code = 409
    default_message = "Task prerequisite not completed"


class VerificationFailed(LedgerError):
    kind = "verification_failed"
    status_code = 400
    default_message = "Verification failed"


class QuotaExceeded(LedgerError):
    kind = "quota_exceeded"
    status_code = 429
    default_message = "Daily game limit reached"


class AlreadyReferred(LedgerError):
    kind = "already_referred"
    status_code = 409
    default_message = "Account already has a referrer"


class InvalidCode(LedgerError):
    kind = "invalid_code"
    status_code = 400
    default_message = "Invalid invite code"


class SelfReferral(LedgerError):
    kind = "self_referral"
    status_code = 400
    default_message = "Cannot use your own invite code"


class Conflict(LedgerError):
    kind = "conflict"
    status_code = 409
    default_message = "Concurrent update, please retry"
    retry_after = 1


class VersionConflict(Exception):
    """Optimistic-concurrency signal raised by ``AccountStore.save``."""

    def __init__(self, wallet_address: str, expected_version: int) -> None:
        self.wallet_address = wallet_address
        self.expected_version = expected_version
        super().__init__(f"Version conflict on {wallet_address} (expected v{expected_version})")
