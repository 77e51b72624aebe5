"""
Shared fixtures.

Every API test runs twice, once per storage backend, against a throwaway
SQLite database that is recreated for each test.
"""

import asyncio
import os
import tempfile

os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///" + os.path.join(
    tempfile.gettempdir(), f"ehs_test_{os.getpid()}.db"
)
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
from fastapi.testclient import TestClient

from app.core.config import settings
from app.db.reset import reset_db
from app.main import app

API = settings.API_V1_STR
ADMIN_EMAIL = settings.ADMIN_EMAIL
ADMIN_PASSWORD = settings.ADMIN_PASSWORD
SEEDED_PLUMBER = "ravi.plumber@example.com"
DEMO_PASSWORD = "password123"


# =============================================================================
# Client Fixtures
# =============================================================================

@pytest.fixture(params=["document", "kv"])
def backend(request, monkeypatch):
    """Storage backend under test."""
    monkeypatch.setattr(settings, "STORAGE_BACKEND", request.param)
    return request.param


@pytest.fixture
def client(backend):
    """Test client over a freshly created and seeded database."""
    asyncio.run(reset_db())
    with TestClient(app) as test_client:
        yield test_client


# =============================================================================
# Helpers
# =============================================================================

def register(client, email, password="secret123", role="user", **fields):
    payload = {
        "email": email,
        "password": password,
        "name": fields.pop("name", email.split("@")[0].title()),
        "role": role,
        **fields,
    }
    return client.post(f"{API}/auth/register", json=payload)


def login(client, email, password="secret123"):
    """Log in and return auth headers."""
    response = client.post(f"{API}/auth/login/json", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def admin_headers(client):
    return login(client, ADMIN_EMAIL, ADMIN_PASSWORD)


@pytest.fixture
def customer_headers(client):
    response = register(client, "priya@example.com", phone="9000000001", address="Banjara Hills")
    assert response.status_code == 200, response.text
    return login(client, "priya@example.com")


@pytest.fixture
def worker(client):
    """A freshly registered plumber: (worker id, auth headers)."""
    response = register(
        client,
        "kiran.plumber@example.com",
        role="worker",
        occupation="plumber",
        hourly_rate=650,
        advance_payment=250,
        phone="9000000002",
    )
    assert response.status_code == 200, response.text
    headers = login(client, "kiran.plumber@example.com")
    return response.json()["user"]["id"], headers


@pytest.fixture
def booking(client, customer_headers, worker):
    """A pending request from the customer to the worker."""
    worker_id, _ = worker
    response = client.post(
        f"{API}/requests/",
        json={
            "worker_id": worker_id,
            "service_type": "plumber",
            "description": "Kitchen sink leaking",
            "location": "Banjara Hills, Hyderabad",
            "scheduled_time": "2026-11-02T10:00",
            "payment_method": "upi",
        },
        headers=customer_headers,
    )
    assert response.status_code == 200, response.text
    return response.json()
