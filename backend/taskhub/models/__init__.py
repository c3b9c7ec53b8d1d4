"""Pydantic models (schemas) for the application."""

from taskhub.models.enums import RecurrenceEndType, RecurrenceType, TaskStatus
from taskhub.models.recurrence import (
    AfterCountEnd,
    EndCondition,
    NeverEnd,
    OnDateEnd,
    RecurrenceDeleteResult,
    RecurrenceRecord,
    RecurrenceRecordUpdate,
    RecurrenceRule,
    RecurringTaskCreateResult,
)
from taskhub.models.task import (
    GeneratedInstance,
    Task,
    TaskCreate,
    TaskCreateRequest,
    TaskTemplate,
)

__all__ = [
    "TaskStatus",
    "RecurrenceType",
    "RecurrenceEndType",
    "NeverEnd",
    "AfterCountEnd",
    "OnDateEnd",
    "EndCondition",
    "RecurrenceRule",
    "RecurrenceRecord",
    "RecurrenceRecordUpdate",
    "RecurringTaskCreateResult",
    "RecurrenceDeleteResult",
    "TaskTemplate",
    "GeneratedInstance",
    "TaskCreate",
    "Task",
    "TaskCreateRequest",
]
