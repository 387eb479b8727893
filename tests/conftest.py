"""Shared fixtures: a throwaway SQLite database and a test client per test."""

import os

# Must be set before the application settings are imported.
os.environ.setdefault("SECRET_KEY", "test-secret")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from fastapi.testclient import TestClient

from blog_catalog_api.app.core import store
from blog_catalog_api.app.core.config import settings
from blog_catalog_api.app.core.db import get_cursor, init_db
from blog_catalog_api.app.core.security import CredentialManager
from blog_catalog_api.app.main import create_app


INITIAL_BLOGS = [
    {"title": "TestTitle", "author": "Test Author", "url": "example.com", "likes": 15},
    {"title": "SecondTestTitle", "author": "Second Test Author", "url": "secondexample.com", "likes": 22},
]


@pytest.fixture
def database(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "database_url", str(tmp_path / "test.db"))
    init_db()
    return tmp_path / "test.db"


@pytest.fixture
def credentials():
    return CredentialManager(secret_key="test-secret")


@pytest.fixture
def client(database):
    with TestClient(create_app()) as test_client:
        yield test_client


def register(client, username="root", password="sekret", name="Superuser"):
    response = client.post("/api/v1/users/", json={"username": username, "name": name, "password": password})
    assert response.status_code == 201, response.text
    return response.json()


def login(client, username="root", password="sekret"):
    response = client.post("/api/v1/login", json={"username": username, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['token']}"}


@pytest.fixture
def auth_headers(client):
    register(client)
    return login(client)


@pytest.fixture
def initial_blogs(client, auth_headers):
    created = []
    for blog in INITIAL_BLOGS:
        response = client.post("/api/v1/blogs/", json=blog, headers=auth_headers)
        assert response.status_code == 201, response.text
        created.append(response.json())
    return created


def blogs_in_db():
    with get_cursor() as cursor:
        return store.blogs.find_all(cursor)


def users_in_db():
    with get_cursor() as cursor:
        return store.users.find_all(cursor)
