"""Abstract interfaces for infrastructure components."""

from taskhub.interfaces.recurrence_repository import (
    IRecurrencePersistence,
    IRecurrenceRepository,
    IRecurrenceUnitOfWork,
)
from taskhub.interfaces.task_repository import ITaskRepository

__all__ = [
    "IRecurrencePersistence",
    "IRecurrenceRepository",
    "IRecurrenceUnitOfWork",
    "ITaskRepository",
]
