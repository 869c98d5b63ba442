"""
Unit tests for the recurring task endpoints.

Covers schedule CRUD, previews and task generation including the end date
and count stop conditions.
"""

from datetime import datetime, timedelta, timezone

from httpx import AsyncClient

RECURRING = "/api/v1/recurring-tasks"
PAST_START = "2024-01-01T09:00:00Z"


async def _template(client: AsyncClient, name: str = "Water plants") -> dict:
    response = await client.post("/api/v1/templates", json={"name": name, "priority": "LOW"})
    assert response.status_code == 201, response.text
    return response.json()["template"]


async def _schedule(client: AsyncClient, template_id: str, **fields) -> dict:
    payload = {"template_id": template_id, "frequency": "DAILY", "start_date": PAST_START, **fields}
    response = await client.post(RECURRING, json=payload)
    assert response.status_code == 201, response.text
    return response.json()["recurring_task"]


class TestRecurringTaskCrud:
    """Test schedule create, read, update and delete."""

    async def test_create_defaults_next_due_to_start(self, auth_client: AsyncClient):
        template = await _template(auth_client)
        schedule = await _schedule(auth_client, template["id"], frequency="WEEKLY", days_of_week=[5, 1, 1])

        assert schedule["next_due_date"].startswith("2024-01-01T09:00:00")
        assert schedule["frequency"] == "WEEKLY"
        assert schedule["interval"] == 1
        assert schedule["days_of_week"] == [1, 5]
        assert schedule["template"]["name"] == "Water plants"

    async def test_create_without_start_uses_now(self, auth_client: AsyncClient):
        template = await _template(auth_client)
        response = await auth_client.post(RECURRING, json={"template_id": template["id"]})

        start = datetime.fromisoformat(response.json()["recurring_task"]["start_date"])
        now = datetime.now(timezone.utc).replace(tzinfo=None)
        assert abs(now - start) < timedelta(minutes=1)

    async def test_one_schedule_per_template(self, auth_client: AsyncClient):
        template = await _template(auth_client)
        await _schedule(auth_client, template["id"])

        response = await auth_client.post(RECURRING, json={"template_id": template["id"]})
        assert response.status_code == 409
        assert response.json()["detail"] == "A recurring task already exists for this template"

    async def test_unknown_template(self, auth_client: AsyncClient):
        response = await auth_client.post(RECURRING, json={"template_id": "missing"})

        assert response.status_code == 404
        assert response.json()["detail"] == "Template not found"

    async def test_invalid_weekday_is_rejected(self, auth_client: AsyncClient):
        template = await _template(auth_client)
        response = await auth_client.post(RECURRING, json={"template_id": template["id"], "days_of_week": [7]})
        assert response.status_code == 422

    async def test_list_with_preview(self, auth_client: AsyncClient):
        template = await _template(auth_client)
        await _schedule(auth_client, template["id"])

        plain = (await auth_client.get(RECURRING)).json()["recurring_tasks"]
        previewed = (await auth_client.get(RECURRING, params={"preview": "true"})).json()["recurring_tasks"]
        assert plain[0]["preview_occurrences"] is None
        assert [d[:10] for d in previewed[0]["preview_occurrences"]] == [
            "2024-01-02",
            "2024-01-03",
            "2024-01-04",
            "2024-01-05",
            "2024-01-06",
        ]

    async def test_update_pattern(self, auth_client: AsyncClient):
        template = await _template(auth_client)
        schedule = await _schedule(auth_client, template["id"])

        response = await auth_client.patch(
            f"{RECURRING}/{schedule['id']}", json={"frequency": "MONTHLY", "day_of_month": 15, "interval": 2}
        )
        body = response.json()["recurring_task"]
        assert body["frequency"] == "MONTHLY"
        assert body["day_of_month"] == 15
        assert body["interval"] == 2

    async def test_other_user_cannot_see_schedule(self, auth_client: AsyncClient, login_as):
        template = await _template(auth_client)
        schedule = await _schedule(auth_client, template["id"])
        bob = await login_as("bob@example.com")

        response = await auth_client.get(f"{RECURRING}/{schedule['id']}", headers=bob)
        assert response.status_code == 404
        assert response.json()["detail"] == "Recurring task not found"

    async def test_delete_keeps_generated_tasks(self, auth_client: AsyncClient):
        template = await _template(auth_client)
        schedule = await _schedule(auth_client, template["id"])
        generated = (await auth_client.post(f"{RECURRING}/generate")).json()["generated_tasks"]

        response = await auth_client.delete(f"{RECURRING}/{schedule['id']}")
        assert response.json()["message"] == "Recurring task deleted successfully"

        task = (await auth_client.get(f"/api/v1/tasks/{generated[0]['id']}")).json()["task"]
        assert task["recurring_task_id"] is None

    async def test_deleting_template_deletes_schedule(self, auth_client: AsyncClient):
        template = await _template(auth_client)
        schedule = await _schedule(auth_client, template["id"])

        await auth_client.delete(f"/api/v1/templates/{template['id']}")
        assert (await auth_client.get(f"{RECURRING}/{schedule['id']}")).status_code == 404


class TestPreview:
    """Test POST /api/v1/recurring-tasks/preview."""

    async def test_preview_weekly(self, auth_client: AsyncClient):
        response = await auth_client.post(
            f"{RECURRING}/preview",
            json={"start_date": PAST_START, "frequency": "WEEKLY", "days_of_week": [1, 3], "count": 3},
        )

        assert response.status_code == 200
        assert [d[:10] for d in response.json()["occurrences"]] == ["2024-01-03", "2024-01-08", "2024-01-10"]

    async def test_preview_respects_end_date(self, auth_client: AsyncClient):
        response = await auth_client.post(
            f"{RECURRING}/preview",
            json={"start_date": PAST_START, "end_date": "2024-01-03T12:00:00Z", "count": 10},
        )
        assert len(response.json()["occurrences"]) == 2

    async def test_preview_requires_login(self, client: AsyncClient):
        response = await client.post(f"{RECURRING}/preview", json={"start_date": PAST_START})
        assert response.status_code == 401

    async def test_preview_past_calendar_end_is_rejected(self, auth_client: AsyncClient):
        response = await auth_client.post(f"{RECURRING}/preview", json={"start_date": "9999-12-30T09:00:00Z"})

        assert response.status_code == 400
        assert "out of range" in response.json()["detail"]

    async def test_schedule_without_a_next_occurrence_is_rejected(self, auth_client: AsyncClient):
        template = await _template(auth_client)
        response = await auth_client.post(
            RECURRING, json={"template_id": template["id"], "start_date": "9999-12-31T09:00:00Z"}
        )

        assert response.status_code == 400
        assert "out of range" in response.json()["detail"]

    async def test_list_preview_stops_at_calendar_end(self, auth_client: AsyncClient):
        template = await _template(auth_client)
        await _schedule(auth_client, template["id"], start_date="9999-12-29T09:00:00Z")

        response = await auth_client.get(RECURRING, params={"preview": "true"})
        assert response.status_code == 200
        previews = response.json()["recurring_tasks"][0]["preview_occurrences"]
        assert [d[:10] for d in previews] == ["9999-12-30", "9999-12-31"]


class TestGenerate:
    """Test POST /api/v1/recurring-tasks/generate."""

    async def test_generates_due_schedule_and_advances(self, auth_client: AsyncClient):
        template = await _template(auth_client)
        schedule = await _schedule(auth_client, template["id"])

        response = await auth_client.post(f"{RECURRING}/generate")
        body = response.json()
        assert body["count"] == 1
        assert body["message"] == "Generated 1 tasks"
        task = body["generated_tasks"][0]
        assert task["title"] == "Water plants"
        assert task["priority"] == "LOW"
        assert task["due_date"].startswith("2024-01-01T09:00:00")
        assert task["recurring_task_id"] == schedule["id"]

        detail = (await auth_client.get(f"{RECURRING}/{schedule['id']}")).json()["recurring_task"]
        assert detail["next_due_date"].startswith("2024-01-02T09:00:00")
        assert detail["last_generated_date"] is not None
        assert [t["id"] for t in detail["recent_tasks"]] == [task["id"]]

        history = (await auth_client.get(f"/api/v1/tasks/{task['id']}/history")).json()["history"]
        assert history[0]["change_type"] == "CREATED"
        assert history[0]["change_data"]["source"] == "recurring"
        assert history[0]["change_data"]["recurring_task_id"] == schedule["id"]

    async def test_future_schedule_is_not_due(self, auth_client: AsyncClient):
        template = await _template(auth_client)
        await _schedule(auth_client, template["id"], start_date="2999-01-01T00:00:00Z")

        response = await auth_client.post(f"{RECURRING}/generate")
        assert response.json() == {"generated_tasks": [], "count": 0, "message": "No tasks were generated"}

    async def test_explicit_ids_generate_even_when_not_due(self, auth_client: AsyncClient):
        template = await _template(auth_client)
        schedule = await _schedule(auth_client, template["id"], start_date="2999-01-01T00:00:00Z")

        response = await auth_client.post(f"{RECURRING}/generate", json={"task_ids": [schedule["id"]]})
        assert response.json()["count"] == 1

    async def test_count_limit_stops_generation(self, auth_client: AsyncClient):
        template = await _template(auth_client)
        await _schedule(auth_client, template["id"], count=1)

        assert (await auth_client.post(f"{RECURRING}/generate")).json()["count"] == 1
        assert (await auth_client.post(f"{RECURRING}/generate")).json()["count"] == 0

    async def test_end_date_stops_generation(self, auth_client: AsyncClient):
        template = await _template(auth_client)
        await _schedule(auth_client, template["id"], end_date="2024-01-01T12:00:00Z")

        assert (await auth_client.post(f"{RECURRING}/generate")).json()["count"] == 1
        assert (await auth_client.post(f"{RECURRING}/generate")).json()["count"] == 0

    async def test_generates_for_each_due_schedule(self, auth_client: AsyncClient):
        for name in ("Water plants", "Feed cat"):
            template = await _template(auth_client, name)
            await _schedule(auth_client, template["id"])

        body = (await auth_client.post(f"{RECURRING}/generate")).json()
        assert sorted(t["title"] for t in body["generated_tasks"]) == ["Feed cat", "Water plants"]

    async def test_other_users_schedules_are_ignored(self, auth_client: AsyncClient, login_as):
        template = await _template(auth_client)
        schedule = await _schedule(auth_client, template["id"])
        bob = await login_as("bob@example.com")

        response = await auth_client.post(f"{RECURRING}/generate", json={"task_ids": [schedule["id"]]}, headers=bob)
        assert response.json()["count"] == 0

    async def test_failing_schedule_does_not_block_the_others(self, auth_client: AsyncClient):
        last_day = await _schedule(
            auth_client, (await _template(auth_client, "Year end"))["id"], start_date="9999-12-30T09:00:00Z"
        )
        first = await auth_client.post(f"{RECURRING}/generate", json={"task_ids": [last_day["id"]]})
        assert first.json()["count"] == 1

        regular = await _schedule(auth_client, (await _template(auth_client, "Feed cat"))["id"])
        response = await auth_client.post(
            f"{RECURRING}/generate", json={"task_ids": [last_day["id"], regular["id"]]}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["count"] == 1
        assert body["generated_tasks"][0]["title"] == "Feed cat"

        stuck = (await auth_client.get(f"{RECURRING}/{last_day['id']}")).json()["recurring_task"]
        assert stuck["next_due_date"].startswith("9999-12-31T09:00:00")
