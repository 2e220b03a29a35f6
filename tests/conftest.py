import asyncio

import pytest
from fastapi.testclient import TestClient

from main import create_app
from sweet_shop.core.config import Settings
from sweet_shop.models.sweet import Sweet
from sweet_shop.services.catalog import CatalogService
from sweet_shop.services.inventory import InventoryService
from sweet_shop.services.locks import KeyedLock
from sweet_shop.services.management import ManagementService
from sweet_shop.stores.sweets import InMemorySweetStore

ADMIN_EMAIL = "admin@sweetshop.com"
ADMIN_PASSWORD = "Admin@1234"
USER_PASSWORD = "Sweet@1234"


class RecordingSweetStore(InMemorySweetStore):
    """In-memory store that counts calls and yields to the loop on every read."""

    def __init__(self):
        super().__init__()
        self.calls = {"get": 0, "save": 0, "delete": 0}

    async def get(self, sweet_id):
        self.calls["get"] += 1
        await asyncio.sleep(0)
        return await super().get(sweet_id)

    async def save(self, sweet):
        self.calls["save"] += 1
        return await super().save(sweet)

    async def delete(self, sweet):
        self.calls["delete"] += 1
        return await super().delete(sweet)

    def reset_calls(self):
        for key in self.calls:
            self.calls[key] = 0


@pytest.fixture
def store():
    return RecordingSweetStore()


@pytest.fixture
def locks():
    return KeyedLock()


@pytest.fixture
def inventory(store, locks):
    return InventoryService(store, locks)


@pytest.fixture
def management(store, locks):
    return ManagementService(store, locks)


@pytest.fixture
def catalog(store):
    return CatalogService(store)


@pytest.fixture
def make_sweet(store):
    async def _make(name="Chocolate Bar", category="Chocolate", price=2.50, quantity=100):
        sweet = await store.save(Sweet(name=name, category=category, price=price, quantity=quantity))
        store.reset_calls()
        return sweet
    return _make


# ---- HTTP ----
@pytest.fixture
def settings():
    return Settings(
        store_backend="memory",
        secret_key="test-secret",
        admin_username=ADMIN_EMAIL,
        admin_password=ADMIN_PASSWORD,
        _env_file=None,
    )


@pytest.fixture
def client(settings):
    with TestClient(create_app(settings)) as c:
        yield c


def login(client, username, password):
    res = client.post("/api/auth/login", json={"username": username, "password": password})
    assert res.status_code == 200, res.text
    return {"Authorization": f"Bearer {res.json()['data']['jwt']}"}


@pytest.fixture
def admin_headers(client):
    return login(client, ADMIN_EMAIL, ADMIN_PASSWORD)


@pytest.fixture
def user_headers(client):
    res = client.post("/api/auth/register", json={"username": "buyer@sweetshop.com", "password": USER_PASSWORD})
    assert res.status_code == 201, res.text
    return login(client, "buyer@sweetshop.com", USER_PASSWORD)


@pytest.fixture
def sweet_id(client, admin_headers):
    body = {"name": "Chocolate Bar", "category": "Chocolate", "price": 2.5, "quantity": 100}
    res = client.post("/api/sweets", json=body, headers=admin_headers)
    assert res.status_code == 201, res.text
    return res.json()["data"]["id"]
