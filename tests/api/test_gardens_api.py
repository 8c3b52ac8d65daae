"""API tests for garden CRUD and ownership."""

import pytest

from conftest import bearer


@pytest.fixture
def owner(register):
    token, user = register(email="owner@example.com", name="Owner")
    return bearer(token), user


@pytest.fixture
def stranger(register):
    token, user = register(email="stranger@example.com", name="Stranger")
    return bearer(token), user


def create_garden(client, headers, **fields):
    response = client.post("/api/gardens", json={"name": "Back Yard", **fields}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["garden"]


class TestCreateGarden:
    def test_defaults_type_and_size(self, client, owner):
        headers, user = owner

        response = client.post("/api/gardens", json={"name": "Back Yard"}, headers=headers)

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Garden created successfully"
        garden = body["garden"]
        assert garden["type"] == "outdoor"
        assert garden["size"] == "medium"
        assert garden["user_id"] == user["id"]
        assert garden["created_at"] and garden["updated_at"]

    def test_keeps_supplied_fields(self, client, owner):
        headers, _ = owner

        garden = create_garden(
            client, headers, location="North plot", type="greenhouse", size="large", description="Glass"
        )

        assert (garden["location"], garden["type"], garden["size"], garden["description"]) == (
            "North plot", "greenhouse", "large", "Glass",
        )

    @pytest.mark.parametrize("body", [{}, {"name": ""}, {"location": "Somewhere"}])
    def test_name_is_required(self, client, owner, data_client, body):
        headers, _ = owner

        response = client.post("/api/gardens", json=body, headers=headers)

        assert response.status_code == 400
        assert response.json()["error"] == "Garden name is required"
        assert data_client.rows("gardens") == []

    def test_requires_authentication(self, client):
        response = client.post("/api/gardens", json={"name": "Back Yard"})

        assert response.status_code == 401


class TestReadGardens:
    def test_lists_only_own_gardens_newest_first(self, client, owner, stranger):
        headers, _ = owner
        create_garden(client, headers, name="First")
        create_garden(client, headers, name="Second")
        create_garden(client, stranger[0], name="Not mine")

        response = client.get("/api/gardens", headers=headers)

        assert response.status_code == 200
        body = response.json()
        assert body["count"] == 2
        assert [g["name"] for g in body["gardens"]] == ["Second", "First"]

    def test_empty_list(self, client, owner):
        response = client.get("/api/gardens", headers=owner[0])

        assert response.json() == {"success": True, "count": 0, "gardens": []}

    def test_get_own_garden(self, client, owner):
        headers, _ = owner
        garden = create_garden(client, headers)

        response = client.get(f"/api/gardens/{garden['id']}", headers=headers)

        assert response.status_code == 200
        assert response.json()["garden"]["id"] == garden["id"]

    def test_foreign_garden_looks_missing(self, client, owner, stranger):
        garden = create_garden(client, owner[0])

        foreign = client.get(f"/api/gardens/{garden['id']}", headers=stranger[0])
        missing = client.get("/api/gardens/does-not-exist", headers=stranger[0])

        assert foreign.status_code == missing.status_code == 404
        assert foreign.json()["error"] == missing.json()["error"] == "Garden not found"

    def test_store_failure(self, client, owner, data_client):
        data_client.fail("gardens", "select")

        response = client.get("/api/gardens", headers=owner[0])

        assert response.status_code == 500
        assert response.json() == {"success": False, "error": "Failed to fetch gardens", "code": "DATABASE_ERROR"}


class TestUpdateGarden:
    def test_partial_update(self, client, owner):
        headers, _ = owner
        garden = create_garden(client, headers, location="North plot", type="raised-bed")

        response = client.put(f"/api/gardens/{garden['id']}", json={"size": "small"}, headers=headers)

        assert response.status_code == 200
        updated = response.json()["garden"]
        assert updated["size"] == "small"
        assert updated["name"] == "Back Yard"
        assert updated["location"] == "North plot"
        assert updated["type"] == "raised-bed"

    def test_empty_name_keeps_stored_value(self, client, owner):
        headers, _ = owner
        garden = create_garden(client, headers)

        response = client.put(
            f"/api/gardens/{garden['id']}", json={"name": "", "description": "Sunny"}, headers=headers
        )

        updated = response.json()["garden"]
        assert updated["name"] == "Back Yard"
        assert updated["description"] == "Sunny"

    def test_null_clears_optional_field(self, client, owner):
        headers, _ = owner
        garden = create_garden(client, headers, location="North plot")

        response = client.put(f"/api/gardens/{garden['id']}", json={"location": None}, headers=headers)

        assert response.json()["garden"]["location"] is None

    def test_foreign_garden_is_not_modified(self, client, owner, stranger, data_client):
        garden = create_garden(client, owner[0])

        response = client.put(f"/api/gardens/{garden['id']}", json={"name": "Mine now"}, headers=stranger[0])

        assert response.status_code == 404
        assert response.json()["error"] == "Garden not found or access denied"
        assert data_client.rows("gardens", id=garden["id"])[0]["name"] == "Back Yard"


class TestDeleteGarden:
    def test_delete_removes_garden_and_its_crops(self, client, owner, data_client):
        headers, _ = owner
        garden = create_garden(client, headers)
        other = create_garden(client, headers, name="Balcony")
        for name in ("Tomato", "Basil"):
            client.post("/api/crops", json={"name": name, "garden_id": garden["id"]}, headers=headers)
        client.post("/api/crops", json={"name": "Mint", "garden_id": other["id"]}, headers=headers)

        response = client.delete(f"/api/gardens/{garden['id']}", headers=headers)

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Garden deleted successfully"}
        assert data_client.rows("gardens", id=garden["id"]) == []
        assert data_client.rows("crops", garden_id=garden["id"]) == []
        assert [c["name"] for c in data_client.rows("crops")] == ["Mint"]

    def test_foreign_garden_is_not_deleted(self, client, owner, stranger, data_client):
        garden = create_garden(client, owner[0])

        response = client.delete(f"/api/gardens/{garden['id']}", headers=stranger[0])

        assert response.status_code == 404
        assert len(data_client.rows("gardens", id=garden["id"])) == 1

    def test_store_failure(self, client, owner, data_client):
        headers, _ = owner
        garden = create_garden(client, headers)
        data_client.fail("crops", "delete")

        response = client.delete(f"/api/gardens/{garden['id']}", headers=headers)

        assert response.status_code == 500
        assert response.json()["error"] == "Failed to delete garden"
