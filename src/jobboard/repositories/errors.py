"""Errors raised by the persistence layer."""


class StoreError(Exception):
    """Base class for persistent store failures."""


class StoreReadError(StoreError):
    """Raised when a read from the store fails."""

    def __init__(self, message: str = "read failed") -> None:
        super().__init__(message)


class StoreWriteError(StoreError):
    """Raised when a write to the store fails."""

    def __init__(self, message: str = "write failed") -> None:
        super().__init__(message)


class UniqueViolationError(StoreWriteError):
    """Raised when a write collides with a unique constraint."""
