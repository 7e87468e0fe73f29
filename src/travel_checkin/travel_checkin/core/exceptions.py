class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class PersistenceError(DomainError):
    """Raised when the backing store rejects a read, write or delete."""


class MutationInFlightError(DomainError):
    """Raised when a segment already has a mutation pending."""

    def __init__(self, segment_id: str):
        super().__init__(f"A change for segment {segment_id} is still being saved")
        self.segment_id = segment_id


class ReconciliationInputError(DomainError):
    """Describes a record that could not be folded into any person.

    Never raised by the reconciler; instances are collected and reported
    alongside the result.
    """

    def __init__(self, segment_id, reason: str):
        super().__init__(f"segment {segment_id!r} skipped: {reason}")
        self.segment_id = segment_id
        self.reason = reason
