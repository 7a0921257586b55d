"""Shared fixtures: an app on a temporary database and users of every role."""

from typing import Callable, Dict

import pytest
from fastapi.testclient import TestClient

from party_planner_api.app.core.config import Settings
from party_planner_api.app.core.db import Database
from party_planner_api.app.main import create_app

from .helpers import API, event_payload, register_user


@pytest.fixture
def app_settings(tmp_path) -> Settings:
    return Settings(
        database_url=str(tmp_path / "test.db"),
        cloud_name="demo",
        cloud_api_key="key-123",
        cloud_api_secret="secret-456",
        email_api_key="",
        email_sender="",
        google_client_id="",
        capacity_exceeded_status=409,
        project_name="Party Planner API",
    )


@pytest.fixture
def app(app_settings):
    return create_app(app_settings)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def db(tmp_path):
    database = Database(str(tmp_path / "service.db"))
    database.open()
    yield database
    database.close()


@pytest.fixture
def make_user(client) -> Callable[..., Dict]:
    def _make(role: str = "base_user", **overrides) -> Dict:
        return register_user(client, role=role, **overrides)

    return _make


@pytest.fixture
def admin(make_user):
    return make_user("administrator")


@pytest.fixture
def organizer(make_user):
    return make_user("organizer")


@pytest.fixture
def base_user(make_user):
    return make_user("base_user")


@pytest.fixture
def category(client, admin):
    response = client.post(f"{API}/categories/", json={"name": "Music"}, headers=admin["headers"])
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
def make_event(client, category, organizer):
    def _make(**overrides) -> Dict:
        response = client.post(
            f"{API}/events/", json=event_payload(category["id"], **overrides), headers=organizer["headers"]
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _make


@pytest.fixture
def make_party(client, category, make_user):
    host = make_user("base_user")

    def _make(**overrides) -> Dict:
        response = client.post(
            f"{API}/parties/", json=event_payload(category["id"], **overrides), headers=host["headers"]
        )
        assert response.status_code == 201, response.text
        party = response.json()
        party["host"] = host
        return party

    return _make
