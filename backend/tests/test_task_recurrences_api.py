"""
Integration tests for task and task recurrence API endpoints.

Requests go through the FastAPI app with repositories bound to an
in-memory SQLite database.
"""

import httpx
import pytest

from main import create_app
from taskhub.api import deps


@pytest.fixture
async def client(task_repo, recurrence_repo, recurrence_persistence):
    app = create_app()
    app.dependency_overrides[deps.get_task_repository] = lambda: task_repo
    app.dependency_overrides[deps.get_recurrence_repository] = lambda: recurrence_repo
    app.dependency_overrides[deps.get_recurrence_persistence] = lambda: recurrence_persistence

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as http:
        yield http


def _recurring_payload(**overrides) -> dict:
    payload = {
        "title": "Team sync",
        "priority": 2,
        "status": "todo",
        "dueDate": "2025-03-08",
        "hasRecurrence": True,
        "recurrenceType": "daily",
        "recurrenceInterval": 1,
        "recurrenceEndType": "after_count",
        "recurrenceEndCount": 5,
    }
    payload.update(overrides)
    return payload


@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


@pytest.mark.asyncio
async def test_create_single_task(client):
    """Test a form without recurrence creates exactly one task."""
    response = await client.post(
        "/api/workspaces/3/tasks",
        json={"title": "One-off", "dueDate": "2025-03-10"},
    )

    assert response.status_code == 201
    body = response.json()
    assert body["title"] == "One-off"
    assert body["workspace_id"] == 3
    assert body["due_date"] == "2025-03-10"
    assert body["task_recurrence_id"] is None


@pytest.mark.asyncio
async def test_create_recurring_task(client):
    """Test a recurring form creates the series and its record."""
    response = await client.post("/api/workspaces/3/tasks", json=_recurring_payload())

    assert response.status_code == 201
    body = response.json()
    assert body["createdCount"] == 5
    assert body["capped"] is False
    assert [task["due_date"] for task in body["tasks"]] == [
        "2025-03-08",
        "2025-03-09",
        "2025-03-10",
        "2025-03-11",
        "2025-03-12",
    ]
    assert body["recurrence"]["workspaceId"] == 3
    assert body["recurrence"]["isActive"] is True
    assert body["recurrence"]["rule"]["end_condition"] == {"kind": "after_count", "count": 5}


@pytest.mark.asyncio
async def test_create_recurring_task_capped(client):
    """Test a never-ending series is reported as capped."""
    response = await client.post(
        "/api/workspaces/3/tasks",
        json=_recurring_payload(recurrenceEndType="never", recurrenceEndCount=None),
    )

    assert response.status_code == 201
    body = response.json()
    assert body["createdCount"] == 50
    assert body["capped"] is True


@pytest.mark.asyncio
async def test_create_recurring_task_invalid_rule(client):
    """Test invalid rules are rejected without writing anything."""
    response = await client.post(
        "/api/workspaces/3/tasks",
        json=_recurring_payload(recurrenceType="weekly", weeklyDays=[1, 8]),
    )

    assert response.status_code == 422

    listed = await client.get("/api/workspaces/3/task-recurrences")
    assert listed.json() == []


@pytest.mark.asyncio
async def test_list_get_and_update_recurrence(client):
    """Test reading and deactivating a recurrence."""
    created = (await client.post("/api/workspaces/3/tasks", json=_recurring_payload())).json()
    recurrence_id = created["recurrence"]["id"]

    listed = await client.get("/api/workspaces/3/task-recurrences")
    assert [item["id"] for item in listed.json()] == [recurrence_id]

    fetched = await client.get(f"/api/task-recurrences/{recurrence_id}")
    assert fetched.status_code == 200
    assert fetched.json()["rule"]["type"] == "daily"

    tasks = await client.get(f"/api/task-recurrences/{recurrence_id}/tasks")
    assert len(tasks.json()) == 5

    updated = await client.patch(
        f"/api/task-recurrences/{recurrence_id}", json={"isActive": False}
    )
    assert updated.status_code == 200
    assert updated.json()["isActive"] is False

    listed = await client.get("/api/workspaces/3/task-recurrences")
    assert listed.json() == []
    listed = await client.get(
        "/api/workspaces/3/task-recurrences", params={"include_inactive": True}
    )
    assert len(listed.json()) == 1


@pytest.mark.asyncio
async def test_get_missing_recurrence(client):
    response = await client.get("/api/task-recurrences/999")
    assert response.status_code == 404

    response = await client.patch("/api/task-recurrences/999", json={"isActive": False})
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_delete_recurrence_keeps_past_tasks(client, task_repo):
    """Test deletion removes today and later, keeps earlier tasks."""
    created = (await client.post("/api/workspaces/3/tasks", json=_recurring_payload())).json()
    recurrence_id = created["recurrence"]["id"]

    response = await client.delete(
        f"/api/task-recurrences/{recurrence_id}", params={"today": "2025-03-10"}
    )

    assert response.status_code == 200
    body = response.json()
    assert body["deletedFutureCount"] == 3
    assert body["totalSeriesSize"] == 5
    assert "3 future tasks" in body["message"]

    kept = [await task_repo.get(task["id"]) for task in created["tasks"]]
    assert [str(task.due_date) for task in kept if task is not None] == ["2025-03-08", "2025-03-09"]

    missing = await client.get(f"/api/task-recurrences/{recurrence_id}")
    assert missing.status_code == 404

    again = await client.delete(
        f"/api/task-recurrences/{recurrence_id}", params={"today": "2025-03-10"}
    )
    assert again.status_code == 200
    assert again.json()["deletedFutureCount"] == 0
    assert again.json()["totalSeriesSize"] == 0


@pytest.mark.asyncio
async def test_create_recurring_task_stops_at_last_representable_year(client):
    """Test a long yearly interval ends the series instead of failing."""
    response = await client.post(
        "/api/workspaces/3/tasks",
        json=_recurring_payload(
            recurrenceType="yearly",
            recurrenceInterval=500,
            recurrenceEndType="never",
            recurrenceEndCount=None,
        ),
    )

    assert response.status_code == 201
    body = response.json()
    assert body["createdCount"] == 16
    assert body["capped"] is False
    assert body["tasks"][-1]["due_date"] == "9525-03-08"


@pytest.mark.asyncio
async def test_create_recurring_task_interval_too_large(client):
    response = await client.post(
        "/api/workspaces/3/tasks",
        json=_recurring_payload(recurrenceInterval=10_000_000),
    )

    assert response.status_code == 422
    assert response.json()["detail"]["details"] == {"recurrenceInterval": 10_000_000}
