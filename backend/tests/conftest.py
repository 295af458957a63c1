"""
Shared fixtures: a fresh application (and therefore fresh in-memory stores)
per test, with a cheap bcrypt cost so the suite stays fast.
"""

from __future__ import annotations

from typing import Any, Dict

import pytest
from fastapi.testclient import TestClient

from app.core.config import Settings
from app.core.security import CredentialHasher, TokenService
from app.main import create_app

TEST_SECRET = "test-secret-not-for-production"
PASSWORD = "s3cret-pass"


@pytest.fixture
def test_settings() -> Settings:
    return Settings(JWT_SECRET=TEST_SECRET, BCRYPT_ROUNDS=4, LOG_LEVEL="WARNING")


@pytest.fixture
def hasher() -> CredentialHasher:
    return CredentialHasher(rounds=4)


@pytest.fixture
def tokens() -> TokenService:
    return TokenService(TEST_SECRET)


@pytest.fixture
def client(test_settings):
    app = create_app(test_settings)
    with TestClient(app) as c:
        yield c


# ============================================================================
# API helpers
# ============================================================================

def register(client: TestClient, email: str, role: str | None = None, name: str = "Test User") -> Dict[str, Any]:
    body: Dict[str, Any] = {"name": name, "email": email, "password": PASSWORD}
    if role:
        body["role"] = role
    response = client.post("/auth/register", json=body)
    assert response.status_code == 201, response.text
    return response.json()


def login(client: TestClient, email: str, password: str = PASSWORD) -> str:
    response = client.post("/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return response.json()["token"]


def bearer(token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(client) -> Dict[str, str]:
    register(client, "admin@example.com", role="admin", name="Admin")
    return bearer(login(client, "admin@example.com"))


@pytest.fixture
def user_headers(client) -> Dict[str, str]:
    register(client, "user@example.com", name="Regular User")
    return bearer(login(client, "user@example.com"))


def create_product(client: TestClient, headers: Dict[str, str], **fields: Any) -> Dict[str, Any]:
    body = {"name": "Widget", "price": 10.0}
    body.update(fields)
    response = client.post("/products", json=body, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()
