# tests/test_client.py
import json

import httpx
import pytest

from app.client.api import HealthAPIError, HealthClient
from app.client.cache import DataCache


def test_cache_get_set_invalidate():
    cache = DataCache()
    assert cache.get("habits", ("self", 7)) is None

    cache.set("habits", ("self", 7), [1])
    cache.set("habits", ("p1", 7), [2])
    cache.set("vitals", ("self", 7), [3])
    assert ("habits", ("self", 7)) in cache

    cache.invalidate("habits", ("self", 7))
    assert cache.get("habits", ("self", 7)) is None
    assert cache.get("habits", ("p1", 7)) == [2]

    cache.invalidate("habits")
    assert cache.get("habits", ("p1", 7)) is None
    assert cache.get("vitals", ("self", 7)) == [3]

    cache.invalidate()
    assert cache.get("vitals", ("self", 7)) is None


class FakeServer:
    """Records requests and answers like the health API."""

    def __init__(self):
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        action = request.url.params["action"]
        if request.headers.get("Authorization") != "Bearer tok":
            return httpx.Response(401, json={"error": "Unauthorized"})
        if action == "habits.fetch":
            return httpx.Response(200, json={"items": [{"date": "2024-01-01", "steps": len(self.requests)}]})
        if action == "habits.upsert":
            return httpx.Response(200, json={"ok": True})
        if action == "profile.get":
            return httpx.Response(403, json={"error": "No permission"})
        if action == "me":
            return httpx.Response(200, json={"profile": None})
        return httpx.Response(400, json={"error": "Unknown action"})

    def actions(self):
        return [r.url.params["action"] for r in self.requests]


@pytest.fixture
def server():
    return FakeServer()


@pytest.fixture
def client(server):
    with HealthClient("http://api.test", "tok", transport=httpx.MockTransport(server)) as client:
        yield client


def test_fetch_reads_through_cache(client, server):
    first = client.fetch_habits(range_days=7)
    second = client.fetch_habits(range_days=7)
    assert first == second
    assert server.actions() == ["habits.fetch"]

    # a different key is a different query
    client.fetch_habits(user_id="p1", range_days=7)
    assert server.requests[-1].url.params["user_id"] == "p1"
    assert server.requests[-1].url.params["rangeDays"] == "7"
    assert len(server.requests) == 2


def test_saving_invalidates_kind(client, server):
    client.fetch_habits()
    client.save_habits(date="2024-01-01", steps=10)
    assert json.loads(server.requests[-1].content) == {"date": "2024-01-01", "steps": 10}

    client.fetch_habits()
    assert server.actions() == ["habits.fetch", "habits.upsert", "habits.fetch"]


def test_error_response_raises(client):
    with pytest.raises(HealthAPIError) as exc:
        client.get_profile("p1")
    assert exc.value.status_code == 403
    assert exc.value.message == "No permission"


def test_me_returns_profile(client):
    assert client.me() is None


def test_bad_token_is_reported(server):
    with HealthClient("http://api.test", "wrong", transport=httpx.MockTransport(server)) as client:
        with pytest.raises(HealthAPIError) as exc:
            client.list_doctors()
    assert exc.value.status_code == 401
