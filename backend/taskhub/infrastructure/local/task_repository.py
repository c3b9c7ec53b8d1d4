"""
SQLite implementation of task repository.
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy import select

from taskhub.infrastructure.local.database import TaskORM, get_session_factory
from taskhub.interfaces.task_repository import ITaskRepository
from taskhub.models.task import Task, TaskCreate


def task_orm_to_model(orm: TaskORM) -> Task:
    """Convert ORM object to Pydantic model."""
    return Task.model_validate(orm, from_attributes=True)


class SqliteTaskRepository(ITaskRepository):
    """SQLite implementation of task repository."""

    def __init__(self, session_factory=None):
        self._session_factory = session_factory or get_session_factory()

    async def create(self, data: TaskCreate) -> Task:
        """Create a new task."""
        async with self._session_factory() as session:
            orm = TaskORM(**data.model_dump(mode="python"))
            orm.status = data.status.value
            session.add(orm)
            await session.commit()
            await session.refresh(orm)
            return task_orm_to_model(orm)

    async def get(self, task_id: int) -> Optional[Task]:
        """Get a task by ID."""
        async with self._session_factory() as session:
            result = await session.execute(select(TaskORM).where(TaskORM.id == task_id))
            orm = result.scalar_one_or_none()
            return task_orm_to_model(orm) if orm else None

    async def list_by_recurrence(self, recurrence_id: int) -> list[Task]:
        """List tasks generated from a recurrence, ordered by due date."""
        async with self._session_factory() as session:
            result = await session.execute(
                select(TaskORM)
                .where(TaskORM.task_recurrence_id == recurrence_id)
                .order_by(TaskORM.due_date.asc(), TaskORM.id.asc())
            )
            return [task_orm_to_model(orm) for orm in result.scalars().all()]
