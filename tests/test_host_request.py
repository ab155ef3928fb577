from fastapi.testclient import TestClient

from bookit.main import app

client = TestClient(app)


def submit(host_request_data, headers):
    response = client.post("/host/requests", json=host_request_data, headers=headers)
    assert response.status_code == 201
    return response.json()["id"]


def test_submit_host_request(db, host_request_data, owner_headers):
    """Test host submission creates a pending request with seats for its capacity"""
    response = client.post("/host/requests", json=host_request_data, headers=owner_headers)

    assert response.status_code == 201
    data = response.json()
    assert "hostreq-" in data["id"]
    assert data["message"] == "Host registration submitted successfully"

    stored = db.host_request(data["id"])
    assert stored["status"] == "pending"
    assert stored["submitted_by_email"] == "owner@example.com"
    assert [seat["id"] for seat in stored["seats"]] == [1, 2, 3]
    assert stored["version"] == 1


def test_submit_host_request_requires_token(host_request_data):
    response = client.post("/host/requests", json=host_request_data)

    assert response.status_code == 401
    assert response.json()["error"] == "No token provided"


def test_submit_host_request_with_invalid_token(host_request_data):
    response = client.post(
        "/host/requests", json=host_request_data, headers={"Authorization": "Bearer not-a-token"}
    )

    assert response.status_code == 401


def test_submit_host_request_missing_fields(owner_headers):
    """Test missing required fields are a 400"""
    response = client.post("/host/requests", json={"venue_name": "Only a name"}, headers=owner_headers)

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid request"


def test_my_requests_lists_only_own_requests(host_request_data, owner_headers, make_headers):
    submit(host_request_data, owner_headers)
    submit(host_request_data, make_headers("other@example.com"))

    response = client.get("/host/my-requests?status=all", headers=owner_headers)

    assert response.status_code == 200
    data = response.json()
    assert len(data) == 1
    assert data[0]["submitted_by_email"] == "owner@example.com"

    # Only approved requests are listed by default
    response = client.get("/host/my-requests", headers=owner_headers)
    assert response.json() == []


def test_get_other_owners_request_is_not_found(host_request_data, owner_headers, make_headers):
    host_request_id = submit(host_request_data, owner_headers)

    response = client.get(f"/host/my-requests/{host_request_id}", headers=make_headers("other@example.com"))

    assert response.status_code == 404
    assert "not found" in response.json()["error"]


def test_update_host_request_fields_and_seats(db, host_request_data, owner_headers):
    """Test owner edits of scalar fields, seat labels and prices"""
    host_request_id = submit(host_request_data, owner_headers)

    update = {
        "description": "Renovated studio",
        "capacity": 4,
        "seats": [
            {"id": 1, "label": "Window", "price": 120},
            {"id": 2, "label": "Corner"},
        ],
    }
    response = client.put(f"/host/my-requests/{host_request_id}", json=update, headers=owner_headers)

    assert response.status_code == 200
    venue = response.json()["venue"]
    assert venue["description"] == "Renovated studio"
    assert [seat["id"] for seat in venue["seats"]] == [1, 2, 3, 4]
    assert venue["seats"][0]["label"] == "Window"
    assert venue["seats"][0]["price"] == 120
    assert venue["seats"][1]["label"] == "Corner"
    assert venue["seats"][1]["price"] == 0

    assert db.host_request(host_request_id)["capacity"] == 4


def test_update_assigns_ids_to_owner_bookings(host_request_data, owner_headers):
    host_request_id = submit(host_request_data, owner_headers)

    update = {
        "seats": [
            {"id": 1, "label": "A", "bookings": [{"date": "2025-06-01", "start_time": "22:30", "hours": 2}]},
        ]
    }
    response = client.put(f"/host/my-requests/{host_request_id}", json=update, headers=owner_headers)

    assert response.status_code == 200
    booking = response.json()["venue"]["seats"][0]["bookings"][0]
    assert booking["booking_id"].startswith("booking-")
    assert booking["created_by"] == "owner"
    assert booking["created_by_email"] == "owner@example.com"
    assert booking["end_time"] == "00:30"


def test_update_rejects_invalid_owner_booking(host_request_data, owner_headers):
    host_request_id = submit(host_request_data, owner_headers)

    update = {"seats": [{"id": 1, "bookings": [{"date": "June 1", "start_time": "10:00", "hours": 0}]}]}
    response = client.put(f"/host/my-requests/{host_request_id}", json=update, headers=owner_headers)

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid request"


def test_update_stale_version_is_rejected(db, host_request_data, owner_headers):
    """Test a write racing with another write fails instead of overwriting it"""
    host_request_id = submit(host_request_data, owner_headers)

    original_put = db.put_item

    def racing_put(item, expected_version=None):
        # Another writer commits between our read and our write
        stored = db.items[(item["pk"], item["sk"])]
        stored["version"] += 1
        db.put_item = original_put
        return original_put(item, expected_version)

    db.put_item = racing_put
    response = client.put(
        f"/host/my-requests/{host_request_id}", json={"description": "Lost update"}, headers=owner_headers
    )

    assert response.status_code == 409
    assert "modified concurrently" in response.json()["error"]
    assert db.host_request(host_request_id)["description"] == "A quiet test studio"


def test_delete_host_request(db, host_request_data, owner_headers):
    host_request_id = submit(host_request_data, owner_headers)

    response = client.delete(f"/host/my-requests/{host_request_id}", headers=owner_headers)

    assert response.status_code == 200
    assert response.json()["message"] == "Venue deleted successfully"
    assert db.host_request(host_request_id) is None

    response = client.delete(f"/host/my-requests/{host_request_id}", headers=owner_headers)
    assert response.status_code == 404
