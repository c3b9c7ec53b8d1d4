"""
Task recurrence API endpoints.
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, HTTPException, Query, status

from taskhub.api.deps import RecurrenceRepo, RecurrenceSvc, TaskRepo
from taskhub.core.exceptions import NotFoundError, PersistenceError
from taskhub.models.recurrence import (
    RecurrenceDeleteResult,
    RecurrenceRecord,
    RecurrenceRecordUpdate,
)
from taskhub.models.task import Task
from taskhub.utils.datetime_utils import today_utc

router = APIRouter()


@router.get("/workspaces/{workspace_id}/task-recurrences", response_model=list[RecurrenceRecord])
async def list_task_recurrences(
    workspace_id: int,
    repo: RecurrenceRepo,
    include_inactive: bool = Query(False, description="Include inactive recurrences"),
) -> list[RecurrenceRecord]:
    """List recurrences of a workspace."""
    return await repo.list_for_workspace(workspace_id, include_inactive=include_inactive)


@router.get("/task-recurrences/{recurrence_id}", response_model=RecurrenceRecord)
async def get_task_recurrence(
    recurrence_id: int,
    repo: RecurrenceRepo,
) -> RecurrenceRecord:
    """Get a recurrence by ID."""
    result = await repo.get(recurrence_id)
    if not result:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"TaskRecurrence {recurrence_id} not found",
        )
    return result


@router.get("/task-recurrences/{recurrence_id}/tasks", response_model=list[Task])
async def list_task_recurrence_tasks(
    recurrence_id: int,
    task_repo: TaskRepo,
) -> list[Task]:
    """List the tasks of a recurrence, ordered by due date."""
    return await task_repo.list_by_recurrence(recurrence_id)


@router.patch("/task-recurrences/{recurrence_id}", response_model=RecurrenceRecord)
async def update_task_recurrence(
    recurrence_id: int,
    update: RecurrenceRecordUpdate,
    repo: RecurrenceRepo,
) -> RecurrenceRecord:
    """Update recurrence bookkeeping. Generated tasks are not touched."""
    try:
        return await repo.update(recurrence_id, update)
    except NotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc


@router.delete("/task-recurrences/{recurrence_id}", response_model=RecurrenceDeleteResult)
async def delete_task_recurrence(
    recurrence_id: int,
    service: RecurrenceSvc,
    today: Optional[date] = Query(None, description="Reference date; defaults to today (UTC)"),
) -> RecurrenceDeleteResult:
    """Delete a recurrence and its current and future tasks; past tasks are kept."""
    try:
        return await service.delete_series(recurrence_id, today or today_utc())
    except PersistenceError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete task recurrence",
        ) from exc
