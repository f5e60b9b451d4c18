import sys, pathlib

ROOT = pathlib.Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

import pytest

from app import create_app
from app.config import TestConfig
from app.models.store import Store
from app.models.user import public_user
from app.services.car_service import CarService
from app.services.user_service import UserService

ADMIN_EMAIL = TestConfig.ADMIN_EMAIL
ADMIN_PASSWORD = TestConfig.ADMIN_PASSWORD
CUSTOMER_PASSWORD = "secret1"


@pytest.fixture
def app(tmp_path, monkeypatch):
    """
    Fresh app per test, bound to its own data file. The Store singleton is
    reset so no state leaks between tests.
    """
    monkeypatch.setattr(Store, "_inst", None)

    class Cfg(TestConfig):
        DATA_PATH = str(tmp_path / "data.pkl")

    yield create_app(Cfg)


@pytest.fixture
def store(app):
    return Store.instance()


@pytest.fixture
def client(app):
    with app.test_client() as c:
        yield c


@pytest.fixture
def make_car(store):
    def _make(**overrides):
        payload = {
            "make": "Toyota",
            "model": "Corolla",
            "year": 2022,
            "category": "sedan",
            "price_per_day": 100,
        }
        payload.update(overrides)
        return CarService.create_car(payload, store=store)

    return _make


@pytest.fixture
def make_customer(store):
    def _make(name="Alice", email="alice@example.com", password=CUSTOMER_PASSWORD):
        return UserService.register({"name": name, "email": email, "password": password}, store=store)

    return _make


@pytest.fixture
def customer(make_customer):
    return make_customer()


@pytest.fixture
def other_customer(make_customer):
    return make_customer(name="Bob", email="bob@example.com")


@pytest.fixture
def admin(store):
    return public_user(store.find_user_by_email(ADMIN_EMAIL))


def login(client, email, password):
    return client.post("/api/auth/login", json={"email": email, "password": password})


@pytest.fixture
def login_as(client):
    def _login(email, password=CUSTOMER_PASSWORD):
        r = login(client, email, password)
        assert r.status_code == 200, r.get_json()
        return client

    return _login


@pytest.fixture
def admin_client(login_as):
    return login_as(ADMIN_EMAIL, ADMIN_PASSWORD)
