"""API tests for crop CRUD, garden scoping and partial updates."""

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


@pytest.fixture
def garden(client, owner):
    response = client.post(
        "/api/gardens", json={"name": "Back Yard", "location": "North plot"}, headers=owner[0]
    )
    return response.json()["garden"]


def plant(client, headers, garden_id, **fields):
    response = client.post("/api/crops", json={"name": "Tomato", "garden_id": garden_id, **fields}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["crop"]


class TestCreateCrop:
    def test_applies_defaults(self, client, owner, garden):
        headers, user = owner

        response = client.post("/api/crops", json={"name": "Tomato", "garden_id": garden["id"]}, headers=headers)

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Crop created successfully"
        crop = body["crop"]
        assert crop["user_id"] == user["id"]
        assert crop["garden_id"] == garden["id"]
        assert crop["category"] == "vegetable"
        assert crop["status"] == "seedling"
        assert crop["progress"] == 0
        assert crop["quantity"] == 1
        assert crop["is_shared"] is False

    def test_keeps_supplied_values(self, client, owner, garden):
        crop = plant(
            client,
            owner[0],
            garden["id"],
            category="herb",
            variety="Genovese",
            planting_date="2025-04-01",
            expected_harvest="2025-07-15",
            status="growing",
            progress=40,
            is_shared=True,
            quantity=2.5,
            quantity_unit="kg",
        )

        assert crop["category"] == "herb"
        assert crop["planting_date"] == "2025-04-01"
        assert crop["expected_harvest"] == "2025-07-15"
        assert crop["progress"] == 40
        assert crop["is_shared"] is True
        assert crop["quantity"] == 2.5
        assert crop["quantity_unit"] == "kg"

    def test_empty_dates_are_stored_as_null(self, client, owner, garden, data_client):
        crop = plant(client, owner[0], garden["id"], name="Kale", planting_date="", expected_harvest="")

        stored = data_client.rows("crops", id=crop["id"])[0]
        assert stored["planting_date"] is None
        assert stored["expected_harvest"] is None

    def test_datetimes_keep_only_their_date(self, client, owner, garden):
        crop = plant(
            client,
            owner[0],
            garden["id"],
            planting_date="2025-04-01T10:30:00.000Z",
            expected_harvest="2025-07-15T00:00:00",
        )

        assert crop["planting_date"] == "2025-04-01"
        assert crop["expected_harvest"] == "2025-07-15"

    def test_unparseable_date(self, client, owner, garden):
        response = client.post(
            "/api/crops",
            json={"name": "Tomato", "garden_id": garden["id"], "planting_date": "next spring"},
            headers=owner[0],
        )

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

    @pytest.mark.parametrize(
        "body",
        [{"name": "Tomato"}, {"garden_id": "g-1"}, {"name": "", "garden_id": "g-1"}],
    )
    def test_name_and_garden_are_required(self, client, owner, data_client, body):
        response = client.post("/api/crops", json=body, headers=owner[0])

        assert response.status_code == 400
        assert response.json()["error"] == "Crop name and garden ID are required"
        assert data_client.rows("crops") == []

    def test_foreign_garden_is_rejected(self, client, garden, stranger, data_client):
        response = client.post(
            "/api/crops", json={"name": "Tomato", "garden_id": garden["id"]}, headers=stranger[0]
        )

        assert response.status_code == 404
        assert response.json()["error"] == "Garden not found or access denied"
        assert data_client.rows("crops") == []

    def test_progress_out_of_range(self, client, owner, garden):
        response = client.post(
            "/api/crops", json={"name": "Tomato", "garden_id": garden["id"], "progress": 150}, headers=owner[0]
        )

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"


class TestReadCrops:
    def test_list_is_scoped_to_user(self, client, owner, stranger, garden):
        plant(client, owner[0], garden["id"], name="Tomato")
        plant(client, owner[0], garden["id"], name="Basil")
        other_garden = client.post("/api/gardens", json={"name": "Theirs"}, headers=stranger[0]).json()["garden"]
        plant(client, stranger[0], other_garden["id"], name="Kale")

        response = client.get("/api/crops", headers=owner[0])

        body = response.json()
        assert body["count"] == 2
        assert [c["name"] for c in body["crops"]] == ["Basil", "Tomato"]

    def test_get_crop_embeds_garden(self, client, owner, garden):
        crop = plant(client, owner[0], garden["id"])

        response = client.get(f"/api/crops/{crop['id']}", headers=owner[0])

        assert response.status_code == 200
        assert response.json()["crop"]["gardens"] == {"name": "Back Yard", "location": "North plot"}

    def test_foreign_crop_looks_missing(self, client, owner, stranger, garden):
        crop = plant(client, owner[0], garden["id"])

        response = client.get(f"/api/crops/{crop['id']}", headers=stranger[0])

        assert response.status_code == 404
        assert response.json()["error"] == "Crop not found"

    def test_list_by_garden(self, client, owner, garden):
        other = client.post("/api/gardens", json={"name": "Balcony"}, headers=owner[0]).json()["garden"]
        plant(client, owner[0], garden["id"], name="Tomato")
        plant(client, owner[0], other["id"], name="Mint")

        response = client.get(f"/api/crops/garden/{garden['id']}", headers=owner[0])

        assert response.status_code == 200
        body = response.json()
        assert body["count"] == 1
        assert body["crops"][0]["name"] == "Tomato"

    def test_list_by_foreign_garden(self, client, stranger, garden):
        response = client.get(f"/api/crops/garden/{garden['id']}", headers=stranger[0])

        assert response.status_code == 404
        assert response.json()["error"] == "Garden not found or access denied"


class TestUpdateCrop:
    def test_progress_only_update_leaves_other_fields(self, client, owner, garden, data_client):
        crop = plant(client, owner[0], garden["id"], status="growing", notes="Water daily", progress=10)

        response = client.put(f"/api/crops/{crop['id']}", json={"progress": 55}, headers=owner[0])

        assert response.status_code == 200
        assert response.json()["message"] == "Crop updated successfully"
        stored = data_client.rows("crops", id=crop["id"])[0]
        assert stored["progress"] == 55
        assert stored["status"] == "growing"
        assert stored["notes"] == "Water daily"
        assert stored["name"] == "Tomato"

    def test_empty_name_and_status_keep_stored_values(self, client, owner, garden):
        crop = plant(client, owner[0], garden["id"], status="growing")

        response = client.put(
            f"/api/crops/{crop['id']}", json={"name": "", "status": "", "is_shared": True}, headers=owner[0]
        )

        updated = response.json()["crop"]
        assert updated["name"] == "Tomato"
        assert updated["status"] == "growing"
        assert updated["is_shared"] is True

    @pytest.mark.parametrize("progress", [101, -1, None])
    def test_invalid_progress(self, client, owner, garden, data_client, progress):
        crop = plant(client, owner[0], garden["id"], progress=20)

        response = client.put(f"/api/crops/{crop['id']}", json={"progress": progress}, headers=owner[0])

        assert response.status_code == 400
        assert data_client.rows("crops", id=crop["id"])[0]["progress"] == 20

    def test_empty_date_clears_and_datetime_is_truncated(self, client, owner, garden, data_client):
        crop = plant(client, owner[0], garden["id"], planting_date="2025-04-01", expected_harvest="2025-07-15")

        response = client.put(
            f"/api/crops/{crop['id']}",
            json={"planting_date": "", "expected_harvest": "2025-08-01T09:00:00+02:00"},
            headers=owner[0],
        )

        assert response.status_code == 200
        stored = data_client.rows("crops", id=crop["id"])[0]
        assert stored["planting_date"] is None
        assert stored["expected_harvest"] == "2025-08-01"

    def test_garden_cannot_be_moved(self, client, owner, garden, data_client):
        crop = plant(client, owner[0], garden["id"])

        client.put(f"/api/crops/{crop['id']}", json={"garden_id": "elsewhere"}, headers=owner[0])

        assert data_client.rows("crops", id=crop["id"])[0]["garden_id"] == garden["id"]

    def test_foreign_crop_is_not_modified(self, client, owner, stranger, garden, data_client):
        crop = plant(client, owner[0], garden["id"])

        response = client.put(f"/api/crops/{crop['id']}", json={"name": "Stolen"}, headers=stranger[0])

        assert response.status_code == 404
        assert response.json()["error"] == "Crop not found or access denied"
        assert data_client.rows("crops", id=crop["id"])[0]["name"] == "Tomato"


class TestDeleteCrop:
    def test_delete(self, client, owner, garden, data_client):
        crop = plant(client, owner[0], garden["id"])

        response = client.delete(f"/api/crops/{crop['id']}", headers=owner[0])

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Crop deleted successfully"}
        assert data_client.rows("crops") == []

    def test_foreign_crop_is_not_deleted(self, client, owner, stranger, garden, data_client):
        crop = plant(client, owner[0], garden["id"])

        response = client.delete(f"/api/crops/{crop['id']}", headers=stranger[0])

        assert response.status_code == 404
        assert response.json()["error"] == "Crop not found or access denied"
        assert len(data_client.rows("crops")) == 1
