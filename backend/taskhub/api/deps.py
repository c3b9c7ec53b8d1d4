"""
Dependency injection for API endpoints.

This module provides FastAPI dependencies that inject the correct
infrastructure implementations based on environment configuration.
"""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from taskhub.core.config import get_settings
from taskhub.interfaces.recurrence_repository import (
    IRecurrencePersistence,
    IRecurrenceRepository,
)
from taskhub.interfaces.task_repository import ITaskRepository
from taskhub.services.recurrence_service import RecurrenceService
from taskhub.services.task_service import TaskCreationService


# ===========================================
# Repository Dependencies
# ===========================================


@lru_cache()
def get_session_factory():
    """Get the shared async session factory."""
    from taskhub.infrastructure.local.database import get_session_factory as _factory

    return _factory()


@lru_cache()
def get_task_repository() -> ITaskRepository:
    """Get task repository instance."""
    from taskhub.infrastructure.local.task_repository import SqliteTaskRepository

    return SqliteTaskRepository(session_factory=get_session_factory())


@lru_cache()
def get_recurrence_repository() -> IRecurrenceRepository:
    """Get recurrence repository instance."""
    from taskhub.infrastructure.local.recurrence_repository import SqliteRecurrenceRepository

    return SqliteRecurrenceRepository(session_factory=get_session_factory())


@lru_cache()
def get_recurrence_persistence() -> IRecurrencePersistence:
    """Get transactional recurrence persistence instance."""
    from taskhub.infrastructure.local.recurrence_repository import SqliteRecurrencePersistence

    return SqliteRecurrencePersistence(session_factory=get_session_factory())


# ===========================================
# Service Dependencies
# ===========================================


def get_recurrence_service(
    persistence: Annotated[IRecurrencePersistence, Depends(get_recurrence_persistence)],
) -> RecurrenceService:
    """Get recurrence lifecycle service."""
    return RecurrenceService(
        persistence=persistence,
        max_instances=get_settings().RECURRENCE_MAX_INSTANCES,
    )


def get_task_creation_service(
    task_repo: Annotated[ITaskRepository, Depends(get_task_repository)],
    recurrence_service: Annotated[RecurrenceService, Depends(get_recurrence_service)],
) -> TaskCreationService:
    """Get task creation service."""
    return TaskCreationService(task_repo=task_repo, recurrence_service=recurrence_service)


# Type aliases for cleaner dependency injection
TaskRepo = Annotated[ITaskRepository, Depends(get_task_repository)]
RecurrenceRepo = Annotated[IRecurrenceRepository, Depends(get_recurrence_repository)]
RecurrenceSvc = Annotated[RecurrenceService, Depends(get_recurrence_service)]
TaskCreationSvc = Annotated[TaskCreationService, Depends(get_task_creation_service)]
