"""
Tests for application start-up, health check and error rendering.
"""

import logging

import pytest
from fastapi.testclient import TestClient

from bookshelf_api.app.core.config import Settings
from bookshelf_api.app.core.exceptions import ConfigError
from bookshelf_api.app.core.logging_config import setup_logging
from bookshelf_api.app.main import create_app
from bookshelf_api.app.services.book_service import BookService


def test_missing_secret_fails_at_startup(tmp_path):
    settings = Settings(jwt_secret="", database_url=str(tmp_path / "x.db"))
    with pytest.raises(ConfigError):
        settings.validate()
    with pytest.raises(ConfigError):
        create_app(settings)


def test_secret_is_read_from_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("JWT_SECRET", "from-env")
    monkeypatch.setenv("ACCESS_TOKEN_EXPIRE_MINUTES", "30")
    settings = Settings()
    assert settings.jwt_secret == "from-env"
    assert settings.access_token_expire_minutes == 30
    settings.validate()


def test_non_positive_token_lifetime_is_rejected():
    with pytest.raises(ConfigError):
        Settings(jwt_secret="x", access_token_expire_minutes=0).validate()


def test_health_check(client):
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "OK"
    assert data["database"] == "healthy"


def test_unknown_route_uses_error_body(client):
    response = client.get("/nowhere")
    assert response.status_code == 404
    assert "error" in response.json()


def test_malformed_body_is_a_bad_request(client, auth_headers):
    response = client.post("/books", json={"title": "X", "author": "Y", "genreId": "abc"}, headers=auth_headers)
    assert response.status_code == 400
    assert "genreId" in response.json()["error"] or "genre_id" in response.json()["error"]


def test_api_prefix_mounts_resources(tmp_path):
    settings = Settings(jwt_secret="s", database_url=str(tmp_path / "p.db"), api_prefix="/api")
    with TestClient(create_app(settings)) as client:
        assert client.get("/api/genres").status_code == 200
        assert client.get("/genres").status_code == 404
        assert client.get("/health").status_code == 200


@pytest.mark.parametrize(
    "environment, expected",
    [("production", "Internal Server Error"), ("development", "disk on fire")],
)
def test_unexpected_errors_become_500(tmp_path, monkeypatch, environment, expected):
    async def broken(self):
        raise RuntimeError("disk on fire")

    monkeypatch.setattr(BookService, "list_books", broken)
    settings = Settings(jwt_secret="s", database_url=str(tmp_path / "e.db"), environment=environment)
    with TestClient(create_app(settings), raise_server_exceptions=False) as client:
        response = client.get("/books")
    assert response.status_code == 500
    assert response.json() == {"error": expected}


def test_setup_logging_applies_level_on_every_call():
    root = logging.getLogger()
    previous = root.level
    try:
        setup_logging("debug")
        assert root.level == logging.DEBUG
        setup_logging("no-such-level")
        assert root.level == logging.INFO
    finally:
        root.setLevel(previous)
