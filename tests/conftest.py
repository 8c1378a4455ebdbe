"""
Shared pytest fixtures: an application bound to an in-memory SQLite database,
a TestClient, session tokens for staff and manager users and small factories
that create the records most tests start from.
"""
import os

os.environ.setdefault("LOG_DIR", "")

import pytest
from fastapi.testclient import TestClient
from jose import jwt

from flockwise.config import Settings
from flockwise.main import create_app

TEST_SECRET = "test-session-secret"


def make_token(role, sub="1", email="staff@farm.test", secret=TEST_SECRET):
    return jwt.encode({"sub": sub, "email": email, "role": role}, secret, algorithm="HS256")


@pytest.fixture
def settings():
    return Settings(database_url="sqlite://", session_secret=TEST_SECRET, log_dir=None)


@pytest.fixture
def client(settings):
    """TestClient with the lifespan running, so the engine and tables exist."""
    with TestClient(create_app(settings)) as test_client:
        yield test_client


@pytest.fixture
def staff_headers():
    return {"Authorization": f"Bearer {make_token('Staff')}"}


@pytest.fixture
def manager_headers():
    return {"Authorization": f"Bearer {make_token('Farm Manager', sub='2', email='manager@farm.test')}"}


# =============================================================================
# FACTORIES
# =============================================================================

@pytest.fixture
def create_supplier(client, staff_headers):
    counter = {"n": 0}

    def _create(**overrides):
        counter["n"] += 1
        payload = {"name": f"Supplier {counter['n']}", "phone": "0700000000"}
        payload.update(overrides)
        response = client.post("/suppliers/", json=payload, headers=staff_headers)
        assert response.status_code == 201, response.text
        return response.json()

    return _create


@pytest.fixture
def create_feed_item(client, staff_headers, create_supplier):
    def _create(**overrides):
        payload = {
            "feed_type": "Broiler Starter",
            "supplier_id": create_supplier()["id"],
            "current_stock_bags": "0",
            "reorder_level": "50",
            "unit_cost_per_bag": "900",
        }
        payload.update(overrides)
        response = client.post("/feed/inventory/", json=payload, headers=staff_headers)
        assert response.status_code == 201, response.text
        return response.json()

    return _create


@pytest.fixture
def create_batch(client, staff_headers):
    counter = {"n": 0}

    def _create(**overrides):
        counter["n"] += 1
        payload = {
            "batch_name": f"BATCH-{counter['n']:03d}",
            "doc_arrival_date": "2025-01-01",
            "quantity_ordered": 1000,
            "quantity_received": 1000,
        }
        payload.update(overrides)
        response = client.post("/batches/", json=payload, headers=staff_headers)
        assert response.status_code == 201, response.text
        return response.json()

    return _create


@pytest.fixture
def create_flock(client, staff_headers):
    counter = {"n": 0}

    def _create(**overrides):
        counter["n"] += 1
        payload = {
            "flock_name": f"Layer House {counter['n']}",
            "arrival_date": "2024-06-01",
            "opening_stock": 500,
        }
        payload.update(overrides)
        response = client.post("/flocks/", json=payload, headers=staff_headers)
        assert response.status_code == 201, response.text
        return response.json()

    return _create


@pytest.fixture
def create_inventory_item(client, staff_headers):
    counter = {"n": 0}

    def _create(**overrides):
        counter["n"] += 1
        payload = {
            "item_name": f"Item {counter['n']}",
            "unit": "units",
            "current_stock": "0",
            "unit_cost": "10",
        }
        payload.update(overrides)
        response = client.post("/inventory/items/", json=payload, headers=staff_headers)
        assert response.status_code == 201, response.text
        return response.json()

    return _create
