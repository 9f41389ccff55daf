"""
TaskNest API - Test Configuration

Shared fixtures. Every test gets its own data directory with fresh users and
tasks documents wired in through dependency overrides.
"""

import json
import os

# The service refuses to start without a signing secret
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-with-at-least-32-characters")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
from fastapi.testclient import TestClient

from tasknest.main import app
from tasknest.config import settings
from tasknest.storage import JsonDocument, get_users_document, get_tasks_document
from tasknest.auth.tokens import TokenCodec


@pytest.fixture
def users_document(tmp_path) -> JsonDocument:
    """Fresh users document in a per-test directory."""
    document = JsonDocument(tmp_path / "users.json")
    document.ensure_exists()
    return document


@pytest.fixture
def tasks_document(tmp_path) -> JsonDocument:
    """Fresh tasks document in a per-test directory."""
    document = JsonDocument(tmp_path / "tasks.json")
    document.ensure_exists()
    return document


@pytest.fixture
def seed_tasks(tasks_document):
    """Write task records straight into the tasks document."""

    def _seed(*records: dict) -> None:
        tasks_document.path.write_text(json.dumps(list(records)), encoding="utf-8")

    return _seed


@pytest.fixture
def token_codec() -> TokenCodec:
    """Codec configured exactly like the application's."""
    return TokenCodec(
        secret=settings.JWT_SECRET_KEY,
        algorithm=settings.JWT_ALGORITHM,
        expire_minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES,
    )


@pytest.fixture
def client(users_document, tasks_document):
    """Create test client bound to the per-test documents."""
    app.dependency_overrides[get_users_document] = lambda: users_document
    app.dependency_overrides[get_tasks_document] = lambda: tasks_document

    yield TestClient(app)
    # Clean up override after test
    app.dependency_overrides.clear()


@pytest.fixture
def registered_user(client):
    """Register a test user and return credentials."""
    credentials = {"username": "testuser", "password": "testpassword123"}
    response = client.post("/auth/register", json=credentials)
    assert response.status_code == 201
    return credentials


@pytest.fixture
def auth_token(client, registered_user):
    """Get an auth token for the registered user."""
    response = client.post("/auth/login", json=registered_user)
    return response.json()["token"]


@pytest.fixture
def auth_headers(auth_token):
    """Create Authorization headers for authenticated requests."""
    return {"Authorization": f"Bearer {auth_token}"}


@pytest.fixture
def second_user_credentials():
    """Credentials for a second test user."""
    return {"username": "seconduser", "password": "secondpassword123"}


@pytest.fixture
def second_user_token(client, second_user_credentials):
    """Register a second user and get their auth token."""
    client.post("/auth/register", json=second_user_credentials)
    response = client.post("/auth/login", json=second_user_credentials)
    return response.json()["token"]


@pytest.fixture
def second_auth_headers(second_user_token):
    """Authorization headers for the second user."""
    return {"Authorization": f"Bearer {second_user_token}"}
