class DomainError(Exception):
    """Base exception for scheduling rule violations."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(DomainError):
    """Raised when input is malformed or violates a domain rule."""


class NotFoundError(DomainError):
    """Raised when a referenced record does not exist (or is not visible to the caller)."""


class ConflictError(DomainError):
    """Raised when an operation clashes with the current state of a record.

    ``code`` lets clients tell conflicts apart without parsing the message,
    e.g. ``schedule_already_published`` should not be retried.
    """

    def __init__(self, message: str, code: str):
        super().__init__(message)
        self.code = code


class PersistenceError(DomainError):
    """Raised when the database rejects or fails a write or read."""


class NotificationDispatchError(DomainError):
    """Raised by a notifier when a message could not be handed to the relay."""
