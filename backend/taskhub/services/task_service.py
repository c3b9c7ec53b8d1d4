"""
Task creation service.

Routes a task form either to a single task or to a recurring series.
"""

from __future__ import annotations

from typing import Union

from taskhub.core.logger import setup_logger
from taskhub.interfaces.task_repository import ITaskRepository
from taskhub.models.recurrence import RecurringTaskCreateResult
from taskhub.models.task import Task, TaskCreate, TaskCreateRequest
from taskhub.services.recurrence_rules import normalize_rule
from taskhub.services.recurrence_service import RecurrenceService

logger = setup_logger(__name__)


class TaskCreationService:
    """Creates tasks from client forms."""

    def __init__(self, task_repo: ITaskRepository, recurrence_service: RecurrenceService):
        self.task_repo = task_repo
        self.recurrence_service = recurrence_service

    async def create_task(
        self, workspace_id: int, request: TaskCreateRequest
    ) -> Union[Task, RecurringTaskCreateResult]:
        """Create a single task, or a recurring series when recurrence is enabled.

        A form without a due date always yields a single task, since the
        due date anchors the series. Rule validation happens before any
        write.
        """
        rule = normalize_rule(
            request.model_dump(by_alias=True),
            request.has_recurrence and request.due_date is not None,
        )
        template = request.to_template(workspace_id)

        if rule is None:
            if request.has_recurrence:
                logger.info("Recurrence requested without a due date; creating a single task")
            return await self.task_repo.create(
                TaskCreate(**template.model_dump(), due_date=request.due_date)
            )

        return await self.recurrence_service.create_series(template, request.due_date, rule)
