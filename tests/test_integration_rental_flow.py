"""
End-to-end rental lifecycle through the HTTP routes: a customer books a car,
an admin moves it through its statuses, and the car's availability follows.
"""
import pytest

from conftest import ADMIN_EMAIL, ADMIN_PASSWORD

BOOKING = {
    "start_date": "2024-01-01",
    "end_date": "2024-01-04",
    "pickup_location": "Kigali Airport",
    "dropoff_location": "Kigali Airport",
    "additional_requests": "GPS",
}


def _switch(client, email, password="secret1"):
    client.post("/api/auth/logout")
    r = client.post("/api/auth/login", json={"email": email, "password": password})
    assert r.status_code == 200


@pytest.fixture
def car(make_car):
    return make_car(price_per_day=100)


@pytest.fixture
def booked(client, customer, car, login_as):
    login_as("alice@example.com")
    r = client.post("/api/rentals", json=dict(BOOKING, car_id=car["car_id"]))
    assert r.status_code == 201, r.get_json()
    return r.get_json()["data"]


def test_create_rental_over_http(client, booked, car):
    assert booked["total_price"] == 300
    assert booked["status"] == "pending"
    assert booked["car"]["available"] is False

    r = client.get(f"/api/cars/{car['car_id']}")
    assert r.get_json()["data"]["available"] is False


def test_availability_endpoint_after_booking(client, booked, car):
    r = client.post("/api/rentals/check-availability", json={
        "car_id": car["car_id"], "start_date": "2024-01-02", "end_date": "2024-01-03",
    })
    body = r.get_json()
    assert r.status_code == 200
    assert body["success"] is True
    assert body["available"] is False
    assert body["message"]


def test_second_booking_is_rejected(client, booked, car):
    r = client.post("/api/rentals", json=dict(BOOKING, car_id=car["car_id"]))
    assert r.status_code == 400
    assert r.get_json() == {"success": False, "message": "Car is not available for rental"}


def test_my_rentals_and_get(client, booked):
    r = client.get("/api/rentals/my-rentals")
    body = r.get_json()
    assert body["count"] == 1
    assert body["data"][0]["rental_id"] == booked["rental_id"]

    r = client.get(f"/api/rentals/{booked['rental_id']}")
    assert r.status_code == 200
    assert r.get_json()["data"]["user"]["email"] == "alice@example.com"


def test_other_customer_cannot_read_or_cancel(client, booked, other_customer):
    _switch(client, "bob@example.com")
    assert client.get(f"/api/rentals/{booked['rental_id']}").status_code == 401
    r = client.put(f"/api/rentals/{booked['rental_id']}/cancel")
    assert r.status_code == 401
    assert r.get_json()["message"] == "Not authorized to cancel this rental"
    assert client.get("/api/rentals/my-rentals").get_json()["count"] == 0


def test_owner_cancels_and_car_is_freed(client, booked, car):
    r = client.put(f"/api/rentals/{booked['rental_id']}/cancel")
    assert r.status_code == 200
    assert r.get_json()["data"]["status"] == "cancelled"
    assert r.get_json()["data"]["car"]["available"] is True


def test_admin_lifecycle(client, booked, car):
    _switch(client, ADMIN_EMAIL, ADMIN_PASSWORD)
    rid = booked["rental_id"]

    r = client.get("/api/rentals")
    assert r.get_json()["count"] == 1
    assert r.get_json()["data"][0]["user"]["name"] == "Alice"

    r = client.put(f"/api/rentals/{rid}/status", json={"status": "bogus"})
    assert r.status_code == 400
    assert r.get_json()["message"] == "Invalid status value"

    r = client.put(f"/api/rentals/{rid}/payment", json={"payment_status": "paid"})
    assert r.status_code == 200
    assert r.get_json()["data"]["payment_status"] == "paid"

    assert client.put(f"/api/rentals/{rid}/status", json={"status": "active"}).status_code == 200

    r = client.put(f"/api/rentals/{rid}/cancel")
    assert r.status_code == 400
    assert r.get_json()["message"] == "Cannot cancel rental with status: active"

    r = client.put(f"/api/rentals/{rid}/status", json={"status": "completed"})
    assert r.status_code == 200
    assert r.get_json()["data"]["car"]["available"] is True


def test_booking_validation_errors(client, customer, car, login_as):
    login_as("alice@example.com")
    r = client.post("/api/rentals", json=dict(BOOKING, car_id=car["car_id"], end_date="2023-12-31"))
    assert r.status_code == 400
    assert r.get_json()["message"] == "End date must be after start date"

    r = client.post("/api/rentals", json={"car_id": car["car_id"]})
    assert r.status_code == 400

    r = client.post("/api/rentals", json=dict(BOOKING, car_id="5d6c1d5e-8a3b-4e55-9f8b-0c8e8b1f9a11"))
    assert r.status_code == 404
    assert r.get_json()["message"] == "Car not found"


def test_booking_with_non_text_fields_is_rejected(client, customer, car, login_as):
    login_as("alice@example.com")
    r = client.post("/api/rentals", json=dict(BOOKING, car_id=car["car_id"], pickup_location=5))
    assert r.status_code == 400
    assert r.get_json()["message"] == "pickup_location must be text"

    r = client.post("/api/rentals", json=dict(BOOKING, car_id=car["car_id"], additional_requests=7))
    assert r.status_code == 400
    assert r.get_json()["success"] is False
