from __future__ import annotations


class BackendError(RuntimeError):
    """Raised when the hosted backend rejects or fails a query."""

    def __init__(self, operation: str, message: str) -> None:
        super().__init__(f"{operation} failed: {message}")
        self.operation = operation
        self.message = message


class ReminderDispatchError(RuntimeError):
    """Raised when a reminder batch cannot be completed."""
