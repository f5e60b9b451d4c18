"""Error envelope and status mapping at the HTTP boundary."""
from conftest import ADMIN_EMAIL, ADMIN_PASSWORD


def test_unknown_route_uses_envelope(client):
    r = client.get("/api/nope")
    assert r.status_code == 404
    assert r.get_json()["success"] is False


def test_malformed_id_maps_to_404(client):
    r = client.get("/api/cars/not-an-id")
    assert r.status_code == 404
    assert r.get_json() == {"success": False, "message": "Resource not found with id of not-an-id"}


def test_missing_car_maps_to_404(client):
    r = client.get("/api/cars/5d6c1d5e-8a3b-4e55-9f8b-0c8e8b1f9a11")
    assert r.status_code == 404
    assert r.get_json()["message"] == "Car not found"


def test_schema_validation_maps_to_400_with_list(admin_client):
    r = admin_client.post("/api/cars", json={"make": "Kia"})
    body = r.get_json()
    assert r.status_code == 400
    assert body["success"] is False
    assert "Please provide car model" in body["message"]


def test_non_object_body_is_rejected(admin_client):
    r = admin_client.post("/api/cars", json=["make", "Kia"])
    assert r.status_code == 400


def test_check_availability_missing_fields(client):
    r = client.post("/api/rentals/check-availability", json={"car_id": "x"})
    assert r.status_code == 400
    assert r.get_json()["success"] is False


def test_unexpected_error_is_opaque_500(client, monkeypatch):
    from app.services.car_service import CarService

    def explode(*args, **kwargs):
        raise RuntimeError("database on fire")

    monkeypatch.setattr(CarService, "all_cars", staticmethod(explode))
    r = client.get("/api/cars")
    assert r.status_code == 500
    assert r.get_json() == {"success": False, "message": "Server error"}


def test_admin_car_crud_over_http(admin_client):
    r = admin_client.post("/api/cars", json={
        "make": "Kia", "model": "Rio", "year": 2021, "price_per_day": 35, "category": "compact",
    })
    assert r.status_code == 201
    car_id = r.get_json()["data"]["car_id"]

    r = admin_client.put(f"/api/cars/{car_id}", json={"price_per_day": 40})
    assert r.get_json()["data"]["price_per_day"] == 40.0

    r = admin_client.get("/api/cars/search?category=compact&max_price=40")
    assert r.get_json()["count"] == 1

    r = admin_client.delete(f"/api/cars/{car_id}")
    assert r.status_code == 200
    assert r.get_json() == {"success": True, "data": {}}


def test_profile_and_admin_user_routes(client, customer, login_as, store):
    login_as("alice@example.com")
    r = client.put("/api/users/profile", json={"address": "Huye", "new_password": "changed1"})
    assert r.status_code == 200
    assert r.get_json()["data"]["address"] == "Huye"

    client.post("/api/auth/logout")
    login_as(ADMIN_EMAIL, ADMIN_PASSWORD)

    uid = customer["user_id"]
    assert client.get(f"/api/users/{uid}").get_json()["data"]["address"] == "Huye"
    r = client.put(f"/api/users/{uid}", json={"role": "admin"})
    assert r.get_json()["data"]["role"] == "admin"
    r = client.delete(f"/api/users/{uid}")
    assert r.get_json() == {"success": True, "message": "User removed"}
    assert uid not in store.users
