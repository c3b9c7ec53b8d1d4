"""
SQLite implementation of recurrence persistence.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional, Sequence

from sqlalchemy import and_, delete, select
from sqlalchemy import update as update_stmt
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from taskhub.core.exceptions import NotFoundError, PersistenceError
from taskhub.infrastructure.local.database import (
    TaskORM,
    TaskRecurrenceORM,
    get_session_factory,
)
from taskhub.infrastructure.local.task_repository import task_orm_to_model
from taskhub.interfaces.recurrence_repository import (
    IRecurrencePersistence,
    IRecurrenceRepository,
    IRecurrenceUnitOfWork,
)
from taskhub.models.recurrence import (
    AfterCountEnd,
    OnDateEnd,
    RecurrenceRecord,
    RecurrenceRecordUpdate,
    RecurrenceRule,
)
from taskhub.models.task import GeneratedInstance, Task
from taskhub.utils.datetime_utils import now_utc


def _orm_to_model(orm: TaskRecurrenceORM) -> RecurrenceRecord:
    """Convert ORM object to Pydantic model."""
    return RecurrenceRecord(
        id=orm.id,
        workspace_id=orm.workspace_id,
        rule=RecurrenceRule.model_validate(orm.recurrence_pattern),
        is_active=bool(orm.is_active),
        created_at=orm.created_at,
        updated_at=orm.updated_at,
    )


def _rule_to_orm(workspace_id: int, rule: RecurrenceRule) -> TaskRecurrenceORM:
    end = rule.end_condition
    now = now_utc()
    return TaskRecurrenceORM(
        workspace_id=workspace_id,
        recurrence_type=rule.type.value,
        recurrence_pattern=rule.model_dump(mode="json"),
        interval=rule.interval,
        days_of_week=list(rule.weekly_days) if rule.weekly_days else None,
        end_type=rule.end_type.value,
        end_count=end.count if isinstance(end, AfterCountEnd) else None,
        end_date=end.end_date if isinstance(end, OnDateEnd) else None,
        is_active=True,
        created_at=now,
        updated_at=now,
    )


class SqliteRecurrenceUnitOfWork(IRecurrenceUnitOfWork):
    """Recurrence operations bound to a single session.

    Nothing is committed here; `SqliteRecurrencePersistence.transaction`
    commits once when the unit of work completes.
    """

    def __init__(self, session: AsyncSession):
        self._session = session

    async def insert_recurrence_record(
        self, workspace_id: int, rule: RecurrenceRule
    ) -> RecurrenceRecord:
        orm = _rule_to_orm(workspace_id, rule)
        self._session.add(orm)
        await self._session.flush()
        return _orm_to_model(orm)

    async def get_recurrence_record(self, recurrence_id: int) -> Optional[RecurrenceRecord]:
        result = await self._session.execute(
            select(TaskRecurrenceORM).where(TaskRecurrenceORM.id == recurrence_id)
        )
        orm = result.scalar_one_or_none()
        return _orm_to_model(orm) if orm else None

    async def insert_task_instances(
        self, instances: Sequence[GeneratedInstance], recurrence_id: int
    ) -> list[Task]:
        now = now_utc()
        orms = []
        for instance in instances:
            if instance.recurrence_id not in (None, recurrence_id):
                raise ValueError(
                    f"Instance belongs to recurrence {instance.recurrence_id}, "
                    f"not {recurrence_id}"
                )
            data = instance.model_dump(exclude={"recurrence_id"})
            data["status"] = instance.status.value
            orms.append(
                TaskORM(
                    **data,
                    task_recurrence_id=recurrence_id,
                    is_recurring_instance=True,
                    created_at=now,
                    updated_at=now,
                )
            )
        self._session.add_all(orms)
        await self._session.flush()
        return [task_orm_to_model(orm) for orm in orms]

    async def find_tasks_by_recurrence_id(self, recurrence_id: int) -> list[Task]:
        result = await self._session.execute(
            select(TaskORM)
            .where(TaskORM.task_recurrence_id == recurrence_id)
            .order_by(TaskORM.due_date.asc(), TaskORM.id.asc())
        )
        return [task_orm_to_model(orm) for orm in result.scalars().all()]

    async def delete_tasks(self, task_ids: Sequence[int]) -> int:
        if not task_ids:
            return 0
        result = await self._session.execute(
            delete(TaskORM).where(TaskORM.id.in_(list(task_ids)))
        )
        return result.rowcount or 0

    async def detach_tasks(self, recurrence_id: int) -> int:
        result = await self._session.execute(
            update_stmt(TaskORM)
            .where(TaskORM.task_recurrence_id == recurrence_id)
            .values(task_recurrence_id=None, updated_at=now_utc())
        )
        return result.rowcount or 0

    async def delete_recurrence_record(self, recurrence_id: int) -> bool:
        result = await self._session.execute(
            delete(TaskRecurrenceORM).where(TaskRecurrenceORM.id == recurrence_id)
        )
        return bool(result.rowcount)


class SqliteRecurrencePersistence(IRecurrencePersistence):
    """Transactional recurrence persistence over one session per transaction."""

    def __init__(self, session_factory=None):
        self._session_factory = session_factory or get_session_factory()

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[SqliteRecurrenceUnitOfWork]:
        async with self._session_factory() as session:
            try:
                yield SqliteRecurrenceUnitOfWork(session)
                await session.commit()
            except SQLAlchemyError as exc:
                await session.rollback()
                raise PersistenceError(
                    "Recurrence transaction failed", details=str(exc)
                ) from exc
            except Exception:
                await session.rollback()
                raise


class SqliteRecurrenceRepository(IRecurrenceRepository):
    """SQLite implementation of recurrence record reads and bookkeeping."""

    def __init__(self, session_factory=None):
        self._session_factory = session_factory or get_session_factory()

    async def get(self, recurrence_id: int) -> Optional[RecurrenceRecord]:
        """Get a recurrence record by ID."""
        async with self._session_factory() as session:
            result = await session.execute(
                select(TaskRecurrenceORM).where(TaskRecurrenceORM.id == recurrence_id)
            )
            orm = result.scalar_one_or_none()
            return _orm_to_model(orm) if orm else None

    async def list_for_workspace(
        self, workspace_id: int, include_inactive: bool = False
    ) -> list[RecurrenceRecord]:
        """List recurrence records of a workspace, newest first."""
        async with self._session_factory() as session:
            conditions = [TaskRecurrenceORM.workspace_id == workspace_id]
            if not include_inactive:
                conditions.append(TaskRecurrenceORM.is_active.is_(True))
            result = await session.execute(
                select(TaskRecurrenceORM)
                .where(and_(*conditions))
                .order_by(TaskRecurrenceORM.created_at.desc(), TaskRecurrenceORM.id.desc())
            )
            return [_orm_to_model(orm) for orm in result.scalars().all()]

    async def update(
        self, recurrence_id: int, update: RecurrenceRecordUpdate
    ) -> RecurrenceRecord:
        """Update bookkeeping fields."""
        async with self._session_factory() as session:
            result = await session.execute(
                select(TaskRecurrenceORM).where(TaskRecurrenceORM.id == recurrence_id)
            )
            orm = result.scalar_one_or_none()
            if not orm:
                raise NotFoundError(f"TaskRecurrence {recurrence_id} not found")

            update_data = update.model_dump(exclude_unset=True)
            for field, value in update_data.items():
                if value is None:
                    continue
                setattr(orm, field, value)

            orm.updated_at = now_utc()
            await session.commit()
            await session.refresh(orm)
            return _orm_to_model(orm)
