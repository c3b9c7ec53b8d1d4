"""
Custom exceptions for the application.
"""

from typing import Any, Optional


class TaskHubError(Exception):
    """Base exception for taskhub."""

    def __init__(self, message: str, details: Optional[Any] = None):
        self.message = message
        self.details = details
        super().__init__(message)


class NotFoundError(TaskHubError):
    """Resource not found."""

    pass


class ValidationError(TaskHubError):
    """Validation error."""

    pass


class InvalidRuleError(ValidationError):
    """Recurrence rule rejected at normalization."""

    pass


class PersistenceError(TaskHubError):
    """Persistence store failed; the surrounding transaction was rolled back."""

    pass
