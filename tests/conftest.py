# tests/conftest.py

from __future__ import annotations

import mongomock
import pytest

from dailytask.app import create_app

from .fakes import FakeMailer

TEST_CONFIG = {
    "TESTING": True,
    "ENV": "development",
    "JWT_SECRET_KEY": "test-jwt-secret-key-that-is-long-enough-for-hs256",
    "MONGO_URI": "mongodb://localhost:27017",
    "MONGO_DB_NAME": "dailytask_test",
}


@pytest.fixture()
def mongo_client() -> mongomock.MongoClient:
    return mongomock.MongoClient()


@pytest.fixture()
def db(mongo_client):
    """
    Database with the same indexes the app creates on first use.
    """
    from dailytask.utils.db import MongoManager

    manager = MongoManager("mongodb://localhost:27017", "dailytask_test", client_factory=lambda uri, **kw: mongo_client)
    return manager.ensure_ready()


@pytest.fixture()
def mailer() -> FakeMailer:
    return FakeMailer()


@pytest.fixture()
def app(mongo_client, mailer):
    return create_app(
        TEST_CONFIG,
        mongo_client_factory=lambda uri, **kw: mongo_client,
        mailer=mailer,
    )


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def register(client):
    """
    Register a user and return (token, user) from the response.
    """

    def _register(email: str = "a@x.com", password: str = "secret123", name: str = "Alice"):
        resp = client.post("/api/register", json={"name": name, "email": email, "password": password})
        assert resp.status_code == 201, resp.get_json()
        body = resp.get_json()
        return body["token"], body["user"]

    return _register
