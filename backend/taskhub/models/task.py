"""
Task model definitions.

Tasks belong to a workspace and may be instances of a recurring series.
"""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from taskhub.models.enums import TaskStatus


class TaskTemplate(BaseModel):
    """Field set copied onto every task of a series. Carries no due date."""

    workspace_id: int = Field(..., ge=1)
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    project_id: Optional[int] = None
    category_id: Optional[int] = None
    assigned_member_id: Optional[int] = None
    priority: int = Field(0, ge=0, le=3, description="0=low ... 3=urgent")
    status: TaskStatus = TaskStatus.TODO
    time_slot: Optional[str] = Field(None, max_length=20, description='e.g. "6:00-9:00"')


class GeneratedInstance(TaskTemplate):
    """One dated occurrence produced by the instance generator."""

    due_date: date
    recurrence_id: Optional[int] = None


class TaskCreate(TaskTemplate):
    """Create a single task."""

    due_date: Optional[date] = None
    task_recurrence_id: Optional[int] = None
    is_recurring_instance: bool = False


class Task(TaskCreate):
    """Persisted task."""

    id: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class TaskCreateRequest(BaseModel):
    """Task creation form as submitted by clients.

    Accepts the camelCase field names used by the web form as well as
    snake_case. ``workspace_id`` is normally taken from the URL.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    project_id: Optional[int] = None
    category_id: Optional[int] = None
    assigned_member_id: Optional[int] = None
    priority: int = Field(0, ge=0, le=3)
    status: TaskStatus = TaskStatus.TODO
    time_slot: Optional[str] = Field(None, max_length=20)
    workspace_id: Optional[int] = None
    due_date: Optional[date] = None

    has_recurrence: bool = False
    recurrence_type: Optional[str] = None
    recurrence_interval: Optional[int] = None
    recurrence_end_type: Optional[str] = None
    recurrence_end_count: Optional[int] = None
    recurrence_end_date: Optional[date] = None
    weekly_days: Optional[list[int]] = None

    def to_template(self, workspace_id: int) -> TaskTemplate:
        """Build the task template for the given workspace."""
        return TaskTemplate(
            workspace_id=workspace_id,
            title=self.title,
            description=self.description,
            project_id=self.project_id,
            category_id=self.category_id,
            assigned_member_id=self.assigned_member_id,
            priority=self.priority,
            status=self.status,
            time_slot=self.time_slot,
        )
