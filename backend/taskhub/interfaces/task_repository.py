"""
Task repository interface.

Defines contract for task persistence operations.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from taskhub.models.task import Task, TaskCreate


class ITaskRepository(ABC):
    """Abstract interface for task persistence."""

    @abstractmethod
    async def create(self, data: TaskCreate) -> Task:
        """Create a new task."""
        pass

    @abstractmethod
    async def get(self, task_id: int) -> Optional[Task]:
        """Get a task by ID."""
        pass

    @abstractmethod
    async def list_by_recurrence(self, recurrence_id: int) -> list[Task]:
        """List tasks generated from a recurrence, ordered by due date."""
        pass
