"""
Shared pytest fixtures.

The app module builds a default application at import time, so the
environment is pointed at a throwaway SQLite file BEFORE anything from
projects_api is imported. Each test then gets its own app and database.
"""

import os
import tempfile

_TEST_DIR = tempfile.mkdtemp(prefix="projects_api_test_")
os.environ["ENV"] = "dev"
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TEST_DIR, 'import.db')}"
os.environ["SECRET_KEY"] = "test-secret-key-for-testing-only"

import pytest
from fastapi.testclient import TestClient

from projects_api.main import create_app
from projects_api.models import UserRole
from projects_api.security import Argon2PasswordHasher

# Cheap argon2 parameters keep the suite fast
FAST_HASHER = Argon2PasswordHasher(time_cost=1, memory_cost=1024)

DEFAULT_PASSWORD = "password123"


@pytest.fixture
def app(tmp_path):
    return create_app(database_url=f"sqlite:///{tmp_path / 'test.db'}", hasher=FAST_HASHER)


@pytest.fixture
def client(app):
    return TestClient(app)


def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def register(client, email: str, name: str = "Test User", password: str = DEFAULT_PASSWORD) -> dict:
    """Register through the API and return the response data (user + token)."""
    response = client.post("/auth/register", json={"name": name, "email": email, "password": password})
    assert response.status_code == 201, response.text
    return response.json()["data"]


@pytest.fixture
def user_a(client):
    return register(client, "user1@example.com", name="User One")


@pytest.fixture
def user_b(client):
    return register(client, "user2@example.com", name="User Two")


@pytest.fixture
def admin(app, client):
    """An admin can only be created out of band; insert one, then log in."""
    service = app.state.auth_service
    service.users.create(
        name="Admin User",
        email="admin@example.com",
        password_hash=service.hasher.hash(DEFAULT_PASSWORD),
        role=UserRole.admin,
    )
    response = client.post("/auth/login", json={"email": "admin@example.com", "password": DEFAULT_PASSWORD})
    assert response.status_code == 200, response.text
    return response.json()["data"]


def create_project(client, token: str, **body) -> dict:
    body.setdefault("title", "My First Project")
    response = client.post("/projects", json=body, headers=auth_headers(token))
    assert response.status_code == 201, response.text
    return response.json()["data"]
