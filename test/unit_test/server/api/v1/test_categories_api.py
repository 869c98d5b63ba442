"""Unit tests for the category endpoints."""

from httpx import AsyncClient

CATEGORIES = "/api/v1/categories"


class TestCategories:
    """Test category CRUD and name uniqueness."""

    async def test_new_user_has_default_categories(self, auth_client: AsyncClient):
        response = await auth_client.get(CATEGORIES)

        assert response.status_code == 200
        names = [c["name"] for c in response.json()["categories"]]
        assert names == sorted(names)
        assert len(names) == 5

    async def test_create_category(self, auth_client: AsyncClient):
        response = await auth_client.post(CATEGORIES, json={"name": "  Hobbies "})

        assert response.status_code == 201
        category = response.json()["category"]
        assert category["name"] == "Hobbies"
        assert category["color"] == "#3b82f6"
        assert category["task_count"] == 0

    async def test_duplicate_name_is_case_insensitive(self, auth_client: AsyncClient):
        response = await auth_client.post(CATEGORIES, json={"name": "work"})

        assert response.status_code == 409
        assert response.json()["detail"] == "A category with this name already exists"

    async def test_same_name_for_different_users(self, auth_client: AsyncClient, login_as):
        await auth_client.post(CATEGORIES, json={"name": "Garden"})
        bob = await login_as("bob@example.com")

        response = await auth_client.post(CATEGORIES, json={"name": "Garden"}, headers=bob)
        assert response.status_code == 201

    async def test_name_too_long(self, auth_client: AsyncClient):
        response = await auth_client.post(CATEGORIES, json={"name": "x" * 31})
        assert response.status_code == 422

    async def test_get_counts_tasks(self, auth_client: AsyncClient):
        category = (await auth_client.post(CATEGORIES, json={"name": "Garden"})).json()["category"]
        await auth_client.post("/api/v1/tasks", json={"title": "Mow", "category_ids": [category["id"]]})
        await auth_client.post("/api/v1/tasks", json={"title": "Weed", "category_ids": [category["id"]]})

        response = await auth_client.get(f"{CATEGORIES}/{category['id']}")
        assert response.json()["category"]["task_count"] == 2

    async def test_get_other_users_category_is_not_found(self, auth_client: AsyncClient, login_as):
        category = (await auth_client.post(CATEGORIES, json={"name": "Garden"})).json()["category"]
        bob = await login_as("bob@example.com")

        response = await auth_client.get(f"{CATEGORIES}/{category['id']}", headers=bob)
        assert response.status_code == 404

    async def test_update_name_and_color(self, auth_client: AsyncClient):
        category = (await auth_client.post(CATEGORIES, json={"name": "Garden"})).json()["category"]

        response = await auth_client.put(f"{CATEGORIES}/{category['id']}", json={"name": "Yard", "color": "#000000"})
        assert response.status_code == 200
        assert response.json()["category"]["name"] == "Yard"
        assert response.json()["category"]["color"] == "#000000"

        response = await auth_client.patch(f"{CATEGORIES}/{category['id']}", json={"color": "#ffffff"})
        assert response.json()["category"]["name"] == "Yard"
        assert response.json()["category"]["color"] == "#ffffff"

    async def test_rename_to_existing_name_conflicts(self, auth_client: AsyncClient):
        category = (await auth_client.post(CATEGORIES, json={"name": "Garden"})).json()["category"]

        response = await auth_client.patch(f"{CATEGORIES}/{category['id']}", json={"name": "WORK"})
        assert response.status_code == 409

    async def test_rename_to_own_name_in_other_case(self, auth_client: AsyncClient):
        category = (await auth_client.post(CATEGORIES, json={"name": "Garden"})).json()["category"]

        response = await auth_client.patch(f"{CATEGORIES}/{category['id']}", json={"name": "GARDEN"})
        assert response.status_code == 200

    async def test_delete_detaches_from_tasks(self, auth_client: AsyncClient):
        category = (await auth_client.post(CATEGORIES, json={"name": "Garden"})).json()["category"]
        task = (await auth_client.post("/api/v1/tasks", json={"title": "Mow", "category_ids": [category["id"]]})).json()[
            "task"
        ]

        response = await auth_client.delete(f"{CATEGORIES}/{category['id']}")
        assert response.status_code == 200
        assert response.json()["message"] == "Category deleted successfully"

        task = (await auth_client.get(f"/api/v1/tasks/{task['id']}")).json()["task"]
        assert task["categories"] == []
        assert (await auth_client.get(f"{CATEGORIES}/{category['id']}")).status_code == 404
