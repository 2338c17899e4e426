"""
Pytest configuration and shared fixtures.

Every test gets its own SQLite file under ``tmp_path`` and its own
``Settings`` instance, so nothing depends on the process environment.
"""

import pytest
from fastapi.testclient import TestClient

from bookshelf_api.app.core.config import Settings
from bookshelf_api.app.core.db import Database
from bookshelf_api.app.main import create_app


TEST_SECRET = "test-secret"


@pytest.fixture
def settings(tmp_path):
    """Settings pointing at a fresh database file."""
    return Settings(
        jwt_secret=TEST_SECRET,
        database_url=str(tmp_path / "bookshelf_test.db"),
        environment="development",
        log_level="WARNING",
    )


@pytest.fixture
def db(settings):
    """Database with the schema applied, for direct service tests."""
    database = Database(settings.database_url)
    database.init_db()
    return database


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    """Test client; entering the context runs the lifespan (schema setup)."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def register_user(client):
    """Register a user through the API and return the response."""

    def _register(username="bilbo", email="bilbo@shire.me", password="precious"):
        return client.post(
            "/auth/register",
            json={"username": username, "email": email, "password": password},
        )

    return _register


@pytest.fixture
def auth_headers(client, register_user):
    """Authorization header for a freshly registered user."""
    assert register_user().status_code == 201
    response = client.post("/auth/login", json={"email": "bilbo@shire.me", "password": "precious"})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['token']}"}


@pytest.fixture
def create_genre(client, auth_headers):
    def _create(name="Fantasy"):
        response = client.post("/genres", json={"name": name}, headers=auth_headers)
        assert response.status_code == 201, response.text
        return response.json()

    return _create


@pytest.fixture
def create_book(client, auth_headers):
    def _create(**fields):
        response = client.post("/books", json=fields, headers=auth_headers)
        assert response.status_code == 201, response.text
        return response.json()

    return _create
