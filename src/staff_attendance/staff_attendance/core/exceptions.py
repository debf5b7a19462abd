class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class GuardViolation(ValidationError):
    """A workflow precondition failed; nothing was persisted."""


class DuplicateActiveRecordError(GuardViolation):
    """The shift already has an active (non-cancelled, non-swapped) attendance record."""


class ShiftReleasedError(GuardViolation):
    """The staff member already cancelled or swapped away this shift."""


class RecoveryLimitError(GuardViolation):
    """The staff member already used every recovery credit for the month."""


class NotFoundError(DomainError):
    """Raised when a record, staff member or shift does not exist."""


class PersistenceError(DomainError):
    """Raised when the store is unavailable or rejects a write."""


class DispatchError(DomainError):
    """Raised by a notification channel that failed to deliver."""


class ConfigurationError(DomainError):
    """Raised when the attendance policy is incomplete or malformed."""
