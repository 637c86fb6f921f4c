"""
Unit tests for the task and health routers with the service layer mocked.
"""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from taskify.config import DatabaseSettings, Settings
from taskify.models import Task
from taskify.server import dependencies
from taskify.server.dependencies import get_query_gateway, get_task_service
from taskify.server.main import create_app
from taskify.shared.exceptions import NotFoundError, StoreError, ValidationError


def make_task(task_id=1, title="Buy milk", finished=False) -> Task:
    return Task(
        id=task_id,
        title=title,
        finished=finished,
        updated_at=datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc),
    )


@pytest.fixture
def mock_service():
    return AsyncMock()


@pytest.fixture
def mock_gateway():
    gateway = MagicMock()
    gateway.execute = AsyncMock()
    gateway.start = AsyncMock()
    gateway.close = AsyncMock()
    return gateway


@pytest.fixture
def client(mock_service, mock_gateway):
    settings = Settings(database=DatabaseSettings(url="sqlite+aiosqlite://"))
    app = create_app(settings, gateway=mock_gateway)
    app.dependency_overrides[get_task_service] = lambda: mock_service
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client


class TestListTasks:
    def test_returns_tasks_as_json(self, client, mock_service):
        mock_service.list_tasks.return_value = [make_task(2, "b"), make_task(1, "a")]

        response = client.get("/api/tasks")

        assert response.status_code == 200
        body = response.json()
        assert [task["id"] for task in body] == [2, 1]
        assert set(body[0]) == {"id", "title", "finished", "updated_at"}
        assert body[0]["updated_at"].startswith("2024-05-01T12:30:00")

    def test_store_error_is_generic_500(self, client, mock_service):
        mock_service.list_tasks.side_effect = StoreError("password authentication failed")

        with patch("taskify.server.routers.tasks.log") as mock_log:
            response = client.get("/api/tasks")

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to fetch tasks"}
        mock_log.error.assert_called_once()
        assert "password authentication failed" in mock_log.error.call_args.args


class TestCreateTask:
    def test_created(self, client, mock_service):
        mock_service.create_task.return_value = make_task(7, "Buy milk")

        response = client.post("/api/tasks", json={"title": "Buy milk"})

        assert response.status_code == 201
        assert response.json()["id"] == 7
        mock_service.create_task.assert_awaited_once_with("Buy milk")

    def test_missing_body_reaches_validation(self, client, mock_service):
        mock_service.create_task.side_effect = ValidationError(
            "Task title must be at least 3 characters"
        )

        response = client.post("/api/tasks")

        assert response.status_code == 400
        assert response.json() == {"error": "Task title must be at least 3 characters"}
        mock_service.create_task.assert_awaited_once_with(None)

    def test_non_string_title_is_400(self, client, mock_service):
        response = client.post("/api/tasks", json={"title": 12345})

        assert response.status_code == 400
        assert "title" in response.json()["error"]
        mock_service.create_task.assert_not_awaited()

    def test_store_error_is_generic_500(self, client, mock_service):
        mock_service.create_task.side_effect = StoreError("constraint failed")

        response = client.post("/api/tasks", json={"title": "Buy milk"})

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to create task"}


class TestUpdateTask:
    def test_partial_update(self, client, mock_service):
        mock_service.update_task.return_value = make_task(3, finished=True)

        response = client.put("/api/tasks/3", json={"finished": True})

        assert response.status_code == 200
        assert response.json()["finished"] is True
        mock_service.update_task.assert_awaited_once_with("3", title=None, finished=True)

    def test_null_fields_are_treated_as_omitted(self, client, mock_service):
        mock_service.update_task.return_value = make_task(3)

        response = client.put("/api/tasks/3", json={"title": None, "finished": None})

        assert response.status_code == 200
        mock_service.update_task.assert_awaited_once_with("3", title=None, finished=None)

    def test_string_finished_is_400(self, client, mock_service):
        response = client.put("/api/tasks/3", json={"finished": "true"})

        assert response.status_code == 400
        assert "finished" in response.json()["error"]
        mock_service.update_task.assert_not_awaited()

    def test_not_found(self, client, mock_service):
        mock_service.update_task.side_effect = NotFoundError("Task", 3)

        response = client.put("/api/tasks/3", json={"finished": True})

        assert response.status_code == 404
        assert response.json() == {"error": "Task not found"}

    def test_store_error_is_generic_500(self, client, mock_service):
        mock_service.update_task.side_effect = StoreError("deadlock detected")

        response = client.put("/api/tasks/3", json={"finished": True})

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to update task"}


class TestDeleteTask:
    def test_deleted(self, client, mock_service):
        response = client.delete("/api/tasks/3")

        assert response.status_code == 200
        assert response.json() == {"message": "Task deleted successfully"}
        mock_service.delete_task.assert_awaited_once_with("3")

    def test_not_found(self, client, mock_service):
        mock_service.delete_task.side_effect = NotFoundError("Task", 3)

        response = client.delete("/api/tasks/3")

        assert response.status_code == 404

    def test_store_error_is_generic_500(self, client, mock_service):
        mock_service.delete_task.side_effect = StoreError("server closed the connection")

        response = client.delete("/api/tasks/3")

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to delete task"}


class TestHealth:
    def test_ok(self, client, mock_gateway):
        response = client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "OK"
        assert body["message"] == "Database connected successfully!"
        assert datetime.fromisoformat(body["timestamp"])
        mock_gateway.execute.assert_awaited_with("SELECT 1")

    def test_failure_includes_details(self, client, mock_gateway):
        mock_gateway.execute.side_effect = StoreError("could not connect to server")

        response = client.get("/health")

        assert response.status_code == 500
        assert response.json() == {
            "error": "Database connection failed",
            "details": "could not connect to server",
        }


class TestLifespan:
    def test_gateway_is_registered_and_closed(self, mock_gateway):
        settings = Settings(database=DatabaseSettings(url="sqlite+aiosqlite://"))
        app = create_app(settings, gateway=mock_gateway)

        with TestClient(app):
            assert get_query_gateway() is mock_gateway
            mock_gateway.start.assert_awaited_once()

        mock_gateway.close.assert_awaited_once()
        assert dependencies.query_gateway is None

    def test_requests_before_startup_get_503(self, mock_gateway):
        settings = Settings(database=DatabaseSettings(url="sqlite+aiosqlite://"))
        app = create_app(settings, gateway=mock_gateway)
        dependencies.clear_query_gateway()

        # No context manager: the lifespan never runs.
        response = TestClient(app).get("/health")

        assert response.status_code == 503
        assert response.json() == {"error": "Database not yet initialized."}

    def test_cors_headers(self, client):
        response = client.options(
            "/api/tasks",
            headers={
                "Origin": "http://localhost:3000",
                "Access-Control-Request-Method": "POST",
            },
        )

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] in ("*", "http://localhost:3000")
