"""
Recurrence lifecycle service.

Creates a recurrence together with all of its generated task instances,
and deletes a recurrence while keeping its past instances as history.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from taskhub.core.config import get_settings
from taskhub.core.logger import setup_logger
from taskhub.interfaces.recurrence_repository import IRecurrencePersistence
from taskhub.models.recurrence import (
    RecurrenceDeleteResult,
    RecurrenceRecord,
    RecurrenceRule,
    RecurringTaskCreateResult,
)
from taskhub.models.task import Task, TaskTemplate
from taskhub.services.recurrence_generator import exceeds_cap, generate

logger = setup_logger(__name__)


@dataclass(frozen=True)
class SeriesPartition:
    """Instances of a series split around a reference date."""

    past: list[Task]
    current_and_future: list[Task]


def partition_series(tasks: list[Task], today: date) -> SeriesPartition:
    """Split instances into past (due before today) and the rest.

    A task without a due date never counts as past.
    """
    past: list[Task] = []
    upcoming: list[Task] = []
    for task in tasks:
        if task.due_date is not None and task.due_date < today:
            past.append(task)
        else:
            upcoming.append(task)
    return SeriesPartition(past=past, current_and_future=upcoming)


class RecurrenceService:
    """Service owning create/delete semantics of recurrences."""

    def __init__(
        self,
        persistence: IRecurrencePersistence,
        max_instances: Optional[int] = None,
    ):
        self.persistence = persistence
        if max_instances is None:
            max_instances = get_settings().RECURRENCE_MAX_INSTANCES
        self.max_instances = max_instances

    async def create_series(
        self,
        template: TaskTemplate,
        start_date: date,
        rule: RecurrenceRule,
    ) -> RecurringTaskCreateResult:
        """Persist a recurrence and every instance generated from it, atomically.

        Errors from the persistence layer propagate unchanged; the
        transaction guarantees nothing is left half-materialized.
        """
        async with self.persistence.transaction() as uow:
            record = await uow.insert_recurrence_record(template.workspace_id, rule)
            instances = generate(
                template, start_date, rule, self.max_instances, recurrence_id=record.id
            )
            tasks = await uow.insert_task_instances(instances, record.id)

        capped = exceeds_cap(start_date, rule, self.max_instances)
        if capped:
            logger.warning(
                f"Recurrence {record.id} capped at {self.max_instances} instances "
                f"before reaching its end condition"
            )
        logger.info(
            f"Created recurrence {record.id} ({rule.type.value}, every {rule.interval}) "
            f"with {len(tasks)} tasks from {start_date.isoformat()}"
        )
        return RecurringTaskCreateResult(
            created_count=len(tasks),
            tasks=tasks,
            recurrence=record,
            capped=capped,
        )

    async def delete_series(self, recurrence_id: int, today: date) -> RecurrenceDeleteResult:
        """Delete a recurrence and its instances due today or later.

        Past instances stay as ordinary tasks, detached from the series.
        Deleting an unknown recurrence is a no-op reporting zero counts.
        """
        async with self.persistence.transaction() as uow:
            record: Optional[RecurrenceRecord] = await uow.get_recurrence_record(recurrence_id)
            if record is None:
                logger.info(f"Recurrence {recurrence_id} not found; nothing to delete")
                return RecurrenceDeleteResult()

            tasks = await uow.find_tasks_by_recurrence_id(recurrence_id)
            partition = partition_series(tasks, today)
            await uow.delete_tasks([task.id for task in partition.current_and_future])
            await uow.detach_tasks(recurrence_id)
            await uow.delete_recurrence_record(recurrence_id)

        logger.info(
            f"Deleted recurrence {recurrence_id}: {len(partition.current_and_future)} of "
            f"{len(tasks)} tasks removed, {len(partition.past)} past tasks kept"
        )
        return RecurrenceDeleteResult(
            deleted_future_count=len(partition.current_and_future),
            total_series_size=len(tasks),
        )
