"""
Integration tests for the task REST API over a real SQLite database.
"""

import pytest


def create(client, title):
    response = client.post("/api/tasks", json={"title": title})
    assert response.status_code == 201, response.text
    return response.json()


def list_tasks(client):
    response = client.get("/api/tasks")
    assert response.status_code == 200
    return response.json()


class TestCreateAndList:
    """Create followed by List."""

    def test_empty_list(self, client):
        assert list_tasks(client) == []

    @pytest.mark.parametrize("title", ["abc", "Buy milk", "  padded title  ", "ünïcødé ✅"])
    def test_created_task_appears_once_trimmed(self, client, title):
        before = list_tasks(client)

        task = create(client, title)
        after = list_tasks(client)

        assert len(after) == len(before) + 1
        matches = [row for row in after if row["id"] == task["id"]]
        assert len(matches) == 1
        assert matches[0]["title"] == title.strip()
        assert matches[0]["finished"] is False
        assert matches[0]["updated_at"]

    def test_long_title_is_kept_whole(self, client):
        title = "x" * 1000

        task = create(client, title)

        assert task["title"] == title

    @pytest.mark.parametrize(
        "body",
        [{}, {"title": ""}, {"title": "ab"}, {"title": "  a  "}, {"title": None}],
    )
    def test_invalid_title_adds_nothing(self, client, body):
        create(client, "existing")
        before = list_tasks(client)

        response = client.post("/api/tasks", json=body)

        assert response.status_code == 400
        assert response.json() == {"error": "Task title must be at least 3 characters"}
        assert list_tasks(client) == before

    def test_list_is_newest_first(self, client):
        ids = [create(client, f"task {n}")["id"] for n in range(3)]

        assert [task["id"] for task in list_tasks(client)] == sorted(ids, reverse=True)


class TestUpdate:
    """Partial update semantics."""

    def test_finished_only_leaves_title_identical(self, client):
        task = create(client, "  Exact   title  ")

        response = client.put(f"/api/tasks/{task['id']}", json={"finished": True})

        assert response.status_code == 200
        assert response.json()["finished"] is True
        assert response.json()["title"] == task["title"]

    def test_title_only_leaves_finished(self, client):
        task = create(client, "Original")
        client.put(f"/api/tasks/{task['id']}", json={"finished": True})

        response = client.put(f"/api/tasks/{task['id']}", json={"title": "Renamed"})

        assert response.status_code == 200
        assert response.json()["title"] == "Renamed"
        assert response.json()["finished"] is True

    def test_empty_body_returns_current_row(self, client):
        task = create(client, "Untouched")

        response = client.put(f"/api/tasks/{task['id']}", json={})

        assert response.status_code == 200
        assert response.json()["title"] == "Untouched"
        assert response.json()["finished"] is False

    def test_missing_id_is_404_and_table_unchanged(self, client):
        create(client, "Only task")
        before = list_tasks(client)

        response = client.put("/api/tasks/999999", json={"finished": True})

        assert response.status_code == 404
        assert response.json() == {"error": "Task not found"}
        assert list_tasks(client) == before

    def test_id_beyond_integer_range_is_404(self, client):
        create(client, "Only task")
        before = list_tasks(client)

        response = client.put(
            "/api/tasks/99999999999999999999999", json={"finished": True}
        )

        assert response.status_code == 404
        assert response.json() == {"error": "Task not found"}
        assert list_tasks(client) == before

    def test_non_integer_id_is_400(self, client):
        response = client.put("/api/tasks/abc", json={"finished": True})

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid task id"}

    def test_short_title_is_400(self, client):
        task = create(client, "Long enough")

        response = client.put(f"/api/tasks/{task['id']}", json={"title": "no"})

        assert response.status_code == 400
        assert list_tasks(client)[0]["title"] == "Long enough"

    def test_non_boolean_finished_is_400(self, client):
        task = create(client, "Strict flag")

        response = client.put(f"/api/tasks/{task['id']}", json={"finished": "yes"})

        assert response.status_code == 400
        assert list_tasks(client)[0]["finished"] is False

    def test_malformed_json_is_400(self, client):
        task = create(client, "Malformed")

        response = client.put(
            f"/api/tasks/{task['id']}",
            content=b'{"finished": tru',
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400


class TestDelete:
    """Delete semantics."""

    def test_delete_removes_exactly_that_row(self, client):
        keep = create(client, "keep")
        drop = create(client, "drop")

        response = client.delete(f"/api/tasks/{drop['id']}")

        assert response.status_code == 200
        assert response.json() == {"message": "Task deleted successfully"}
        assert [task["id"] for task in list_tasks(client)] == [keep["id"]]

    def test_second_delete_is_404(self, client):
        task = create(client, "twice")

        first = client.delete(f"/api/tasks/{task['id']}")
        second = client.delete(f"/api/tasks/{task['id']}")

        assert first.status_code == 200
        assert second.status_code == 404
        assert second.json() == {"error": "Task not found"}

    def test_id_beyond_integer_range_is_404(self, client):
        task = create(client, "Survivor")

        response = client.delete("/api/tasks/99999999999999999999999")

        assert response.status_code == 404
        assert response.json() == {"error": "Task not found"}
        assert [row["id"] for row in list_tasks(client)] == [task["id"]]

    def test_non_integer_id_is_400(self, client):
        response = client.delete("/api/tasks/1.5")

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid task id"}


class TestEndToEnd:
    """The full create, list, toggle, delete scenario."""

    def test_buy_milk_scenario(self, client):
        created = client.post("/api/tasks", json={"title": "Buy milk"})
        assert created.status_code == 201
        assert created.json()["finished"] is False
        task_id = created.json()["id"]

        listed = list_tasks(client)
        assert listed[0]["id"] == task_id

        updated = client.put(f"/api/tasks/{task_id}", json={"finished": True})
        assert updated.status_code == 200
        assert updated.json()["finished"] is True
        assert updated.json()["title"] == "Buy milk"

        deleted = client.delete(f"/api/tasks/{task_id}")
        assert deleted.status_code == 200

        assert all(task["id"] != task_id for task in list_tasks(client))

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "OK"
