"""
Task API endpoints.
"""

from typing import Union

from fastapi import APIRouter, HTTPException, Path, status

from taskhub.api.deps import TaskCreationSvc
from taskhub.core.exceptions import PersistenceError, ValidationError
from taskhub.models.recurrence import RecurringTaskCreateResult
from taskhub.models.task import Task, TaskCreateRequest

router = APIRouter()


@router.post(
    "/workspaces/{workspace_id}/tasks",
    response_model=Union[RecurringTaskCreateResult, Task],
    status_code=status.HTTP_201_CREATED,
)
async def create_task(
    payload: TaskCreateRequest,
    service: TaskCreationSvc,
    workspace_id: int = Path(..., ge=1),
):
    """Create a task, or a whole recurring series when recurrence is enabled."""
    try:
        return await service.create_task(workspace_id, payload)
    except ValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"message": exc.message, "details": exc.details},
        ) from exc
    except PersistenceError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create task",
        ) from exc
