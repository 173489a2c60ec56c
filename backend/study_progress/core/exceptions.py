"""Exceptions raised by the progress engine.

- ProgressError: Base exception for all progress-related errors
- ValidationError: Rejected input (activity type, activity payload, period)
- PersistenceError: The document store could not load or save a record
- NotFoundError: A specific record or topic was requested but is absent
"""


class ProgressError(Exception):
    """Base exception for all progress-related errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional error context.
    """

    def __init__(self, message: str, details: dict | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - Details: {self.details}"
        return self.message


class ValidationError(ProgressError):
    """Input was invalid. Raised before any record is loaded or mutated."""


class PersistenceError(ProgressError):
    """Load or save against the document store failed.

    Attributes:
        conflict: True when the failure was a lost optimistic-concurrency race.
    """

    def __init__(
        self,
        message: str,
        conflict: bool = False,
        details: dict | None = None
    ):
        self.conflict = conflict
        super().__init__(message, details)


class NotFoundError(ProgressError):
    """A specific record or topic was expected but does not exist."""
