from decimal import Decimal

import httpx
import pytest
from fastapi.testclient import TestClient

from cityat.api.dependencies import get_backend_client
from cityat.core.backend_client import BackendClient
from cityat.main import create_app
from cityat.schemas.auth import AuthSession, User
from cityat.schemas.catalog import Product
from cityat.schemas.location import City, Location
from cityat.state.store import AppStore


BACKEND_URL = "http://backend.test/api/v1"

CITY_COORDINATES = {
    "delhi": ("New Delhi", "Delhi", 28.6139, 77.2090),
    "mumbai": ("Mumbai", "Maharashtra", 19.0760, 72.8777),
    "bangalore": ("Bangalore", "Karnataka", 12.9716, 77.5946),
    "chennai": ("Chennai", "Tamil Nadu", 13.0827, 80.2707),
    "kolkata": ("Kolkata", "West Bengal", 22.5726, 88.3639),
    "hyderabad": ("Hyderabad", "Telangana", 17.3850, 78.4867),
    "pune": ("Pune", "Maharashtra", 18.5204, 73.8567),
}


class FakeBackend:
    """Canned backend responses served through httpx.MockTransport."""

    def __init__(self):
        self.routes = {}
        self.requests = []

    def add(self, method, path, data=None, status_code=200):
        if status_code < 400:
            payload = {"success": True, "data": data}
        else:
            payload = {"success": False, "error": data}
        self.routes[(method, path)] = (status_code, payload)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path[len("/api/v1"):]
        status_code, payload = self.routes.get(
            (request.method, path), (404, {"success": False, "error": "Not found"})
        )
        return httpx.Response(status_code, json=payload)

    def calls(self, method, path):
        return [r for r in self.requests if r.method == method and r.url.path == f"/api/v1{path}"]


def make_product(product_id="p1", store_id="store-x", price="50", discount_price=None, **extra):
    return Product(
        id=product_id,
        store_id=store_id,
        name=extra.pop("name", f"Product {product_id}"),
        price=Decimal(price),
        discount_price=Decimal(discount_price) if discount_price else None,
        **extra,
    )


def make_city(key):
    name, state, latitude, longitude = CITY_COORDINATES[key]
    return City(
        id=key,
        name=name,
        state=state,
        coordinates=Location(latitude=latitude, longitude=longitude),
    )


def city_payload(key):
    return make_city(key).model_dump(mode="json", by_alias=True)


@pytest.fixture
def fake_backend():
    return FakeBackend()


@pytest.fixture
def backend_client(fake_backend):
    return BackendClient(base_url=BACKEND_URL, transport=httpx.MockTransport(fake_backend.handler))


@pytest.fixture
def store():
    return AppStore()


@pytest.fixture
def signed_in_store(store):
    store.auth.login_success(AuthSession(
        user=User(id="u1", name="Asha", email="asha@example.com"),
        token="access-token",
        refresh_token="refresh-token",
    ))
    return store


@pytest.fixture
def client(backend_client):
    app = create_app()
    app.dependency_overrides[get_backend_client] = lambda: backend_client
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def signed_in_client(client, fake_backend):
    fake_backend.add("POST", "/auth/google", {
        "user": {"id": "u1", "name": "Asha", "email": "asha@example.com"},
        "token": "access-token",
        "refreshToken": "refresh-token",
    })
    response = client.post("/api/auth/google", json={"accessToken": "g-access", "idToken": "g-id"})
    assert response.status_code == 200
    return client
