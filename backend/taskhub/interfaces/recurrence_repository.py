"""
Recurrence repository interfaces.

`IRecurrencePersistence` is the transactional collaborator used by the
recurrence lifecycle: every operation performed on the unit of work yielded
by `transaction()` commits together or not at all.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import AsyncContextManager, Optional, Sequence

from taskhub.models.recurrence import RecurrenceRecord, RecurrenceRecordUpdate, RecurrenceRule
from taskhub.models.task import GeneratedInstance, Task


class IRecurrenceUnitOfWork(ABC):
    """Operations available inside one recurrence transaction."""

    @abstractmethod
    async def insert_recurrence_record(
        self, workspace_id: int, rule: RecurrenceRule
    ) -> RecurrenceRecord:
        """Insert a recurrence record for the rule."""
        pass

    @abstractmethod
    async def get_recurrence_record(self, recurrence_id: int) -> Optional[RecurrenceRecord]:
        """Get a recurrence record by ID."""
        pass

    @abstractmethod
    async def insert_task_instances(
        self, instances: Sequence[GeneratedInstance], recurrence_id: int
    ) -> list[Task]:
        """Insert generated instances tagged with the recurrence ID, in order.

        Instances already stamped with a different recurrence are rejected.
        """
        pass

    @abstractmethod
    async def find_tasks_by_recurrence_id(self, recurrence_id: int) -> list[Task]:
        """Find every task tagged with the recurrence ID."""
        pass

    @abstractmethod
    async def delete_tasks(self, task_ids: Sequence[int]) -> int:
        """Delete tasks by ID. Missing IDs are ignored. Returns rows deleted."""
        pass

    @abstractmethod
    async def detach_tasks(self, recurrence_id: int) -> int:
        """Clear the recurrence reference on remaining tasks. Returns rows updated."""
        pass

    @abstractmethod
    async def delete_recurrence_record(self, recurrence_id: int) -> bool:
        """Delete a recurrence record. Returns False if it did not exist."""
        pass


class IRecurrencePersistence(ABC):
    """Opens transactional units of work."""

    @abstractmethod
    def transaction(self) -> AsyncContextManager[IRecurrenceUnitOfWork]:
        """Open a transaction; commits on normal exit, rolls back on error."""
        pass


class IRecurrenceRepository(ABC):
    """Read and bookkeeping access to recurrence records."""

    @abstractmethod
    async def get(self, recurrence_id: int) -> Optional[RecurrenceRecord]:
        """Get a recurrence record by ID."""
        pass

    @abstractmethod
    async def list_for_workspace(
        self, workspace_id: int, include_inactive: bool = False
    ) -> list[RecurrenceRecord]:
        """List recurrence records of a workspace, newest first."""
        pass

    @abstractmethod
    async def update(
        self, recurrence_id: int, update: RecurrenceRecordUpdate
    ) -> RecurrenceRecord:
        """Update bookkeeping fields. Raises NotFoundError if missing."""
        pass
