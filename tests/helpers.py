"""Request payload builders and user helpers shared by the test modules."""

import itertools
from datetime import datetime, timedelta, timezone
from typing import Dict

from fastapi.testclient import TestClient

API = "/api/v1"

_counter = itertools.count(1)


def register_user(client: TestClient, role: str = "base_user", verify: bool = True, **overrides) -> Dict:
    """Register (and by default verify and log in) a user; return it with auth headers."""
    n = next(_counter)
    payload = {
        "username": f"user{n}",
        "name": f"User {n}",
        "email": f"user{n}@example.com",
        "gender": "F",
        "notification_preference": "email",
        "role": role,
        "password": "secret",
    }
    payload.update(overrides)
    response = client.post(f"{API}/users/", json=payload)
    assert response.status_code == 201, response.text
    user = response.json()
    if verify:
        verified = client.get(f"{API}/email/verify", params={"token": user["verification_token"]})
        assert verified.status_code == 200, verified.text
        login = client.post(f"{API}/auth/login", json={"username": payload["username"], "password": payload["password"]})
        assert login.status_code == 200, login.text
        user["headers"] = {"Authorization": f"Bearer {login.json()['token']}"}
    return user


def event_payload(category_id: str, **overrides) -> Dict:
    start = datetime.now(timezone.utc) + timedelta(days=7)
    payload = {
        "title": "Jazz Night",
        "description": "Live music",
        "start_time": start.isoformat(),
        "location": "Trento",
        "position": {"latitude": 46.0667, "longitude": 11.1167},
        "max_participants": 2,
        "photo": "https://example.com/photo.jpg",
        "category_id": category_id,
    }
    payload.update(overrides)
    return payload


def post_payload(latitude: float = 46.0667, longitude: float = 11.1167, **overrides) -> Dict:
    payload = {
        "description": "Lake view",
        "content": "https://example.com/post.jpg",
        "location": "Trento",
        "position": {"latitude": latitude, "longitude": longitude},
    }
    payload.update(overrides)
    return payload


class FakeVerifier:
    """Stand-in for the Google verifier; records the tokens it was given."""

    def __init__(self, claims=None, error=None):
        self.claims = claims
        self.error = error
        self.seen = []

    def verify(self, id_token):
        self.seen.append(id_token)
        if self.error:
            raise self.error
        return self.claims
