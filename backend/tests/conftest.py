"""
Shared test fixtures.

Repositories run against a fresh in-memory SQLite database per test.
"""

from datetime import date

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from taskhub.infrastructure.local.database import Base
from taskhub.infrastructure.local.recurrence_repository import (
    SqliteRecurrencePersistence,
    SqliteRecurrenceRepository,
)
from taskhub.infrastructure.local.task_repository import SqliteTaskRepository
from taskhub.models.enums import TaskStatus
from taskhub.models.task import TaskTemplate


@pytest.fixture
async def session_factory():
    """Create in-memory database with all tables."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session_factory = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    yield async_session_factory

    await engine.dispose()


@pytest.fixture
def test_workspace_id() -> int:
    return 1


@pytest.fixture
def task_repo(session_factory):
    return SqliteTaskRepository(session_factory=session_factory)


@pytest.fixture
def recurrence_repo(session_factory):
    return SqliteRecurrenceRepository(session_factory=session_factory)


@pytest.fixture
def recurrence_persistence(session_factory):
    return SqliteRecurrencePersistence(session_factory=session_factory)


@pytest.fixture
def template(test_workspace_id) -> TaskTemplate:
    return TaskTemplate(
        workspace_id=test_workspace_id,
        title="Water the plants",
        description="Both balconies",
        project_id=7,
        category_id=3,
        assigned_member_id=11,
        priority=2,
        status=TaskStatus.TODO,
        time_slot="6:00-9:00",
    )


@pytest.fixture
def monday() -> date:
    return date(2025, 3, 10)
