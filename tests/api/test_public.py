"""Tests for the public drop endpoints."""

import asyncio
from datetime import timedelta
from unittest.mock import patch

import pytest
from fastapi import status
from fastapi.testclient import TestClient
from sqlalchemy import select
from sqlalchemy.exc import OperationalError

from slot_api.core.security import device_hash
from slot_api.db.time import utcnow
from slot_api.models import Drop
from slot_api.repositories.drop_repo import DropRepository
from slot_api.services.drop_service import DropService
from slot_api.services.rate_limit import get_rate_limiter

# TestClient connects from host "testclient" with user agent "testclient".
TEST_CLIENT_DEVICE = device_hash("testclient", "testclient")


def test_status_for_new_device(client: TestClient) -> None:
    r = client.get("/api/status")
    assert r.status_code == status.HTTP_200_OK
    data = r.json()
    assert data["todayCount"] == 0
    assert data["hasDroppedToday"] is False
    assert data["streak"] == 0
    assert data["longestStreak"] == 0
    assert data["config"]["type_enabled"] == "true"
    assert data["config"]["max_chars"] == "200"


def test_drop_then_second_drop_is_rejected(client: TestClient) -> None:
    """First drop succeeds; the immediate second one hits the daily cap."""
    r = client.post("/api/drop", json={"mode": "type", "charCount": 50})
    assert r.status_code == status.HTTP_200_OK
    assert r.json() == {"success": True, "todayCount": 1}

    r = client.post("/api/drop", json={"mode": "type", "charCount": 50})
    assert r.status_code == status.HTTP_429_TOO_MANY_REQUESTS
    assert r.json() == {"error": "Already dropped today"}


def test_drop_updates_status(client: TestClient) -> None:
    client.post("/api/drop", json={"mode": "draw", "charCount": 0})

    data = client.get("/api/status").json()
    assert data["todayCount"] == 1
    assert data["hasDroppedToday"] is True
    assert data["streak"] == 1
    assert data["longestStreak"] == 1


def test_drop_defaults_to_type_mode(client: TestClient, db_session) -> None:
    r = client.post("/api/drop", json={})
    assert r.status_code == status.HTTP_200_OK

    drop = db_session.scalars(select(Drop)).one()
    assert drop.mode == "type"
    assert drop.char_count == 0
    assert drop.device_hash == TEST_CLIENT_DEVICE


def test_drop_clamps_char_count(client: TestClient, db_session) -> None:
    client.post("/api/drop", json={"mode": "type", "charCount": 500})
    assert db_session.scalars(select(Drop.char_count)).one() == 200


def test_invalid_mode(client: TestClient, db_session) -> None:
    r = client.post("/api/drop", json={"mode": "juggle", "charCount": 1})
    assert r.status_code == status.HTTP_400_BAD_REQUEST
    assert r.json() == {"error": "Invalid mode"}
    assert db_session.scalars(select(Drop)).all() == []


def test_disabled_mode(client: TestClient, set_config) -> None:
    set_config(draw_enabled="false")
    r = client.post("/api/drop", json={"mode": "draw", "charCount": 1})
    assert r.status_code == status.HTTP_403_FORBIDDEN
    assert r.json() == {"error": "This mode is currently disabled"}


def test_non_integer_char_count_is_a_validation_error(client: TestClient) -> None:
    r = client.post("/api/drop", json={"mode": "type", "charCount": "lots"})
    assert r.status_code == 422


def test_drop_without_body_records_type_drop(client: TestClient, db_session) -> None:
    r = client.post("/api/drop")
    assert r.status_code == status.HTTP_200_OK
    assert r.json() == {"success": True, "todayCount": 1}

    drop = db_session.scalars(select(Drop)).one()
    assert (drop.mode, drop.char_count) == ("type", 0)


@pytest.mark.parametrize("mode", [5, None, True, 2.5, "TYPE"])
def test_non_string_or_unknown_mode_is_invalid(client: TestClient, db_session, mode) -> None:
    r = client.post("/api/drop", json={"mode": mode, "charCount": 1})
    assert r.status_code == status.HTTP_400_BAD_REQUEST
    assert r.json() == {"error": "Invalid mode"}
    assert db_session.scalars(select(Drop)).all() == []


def test_devices_are_told_apart_by_user_agent(client: TestClient) -> None:
    assert client.post("/api/drop", json={}).status_code == status.HTTP_200_OK
    r = client.post("/api/drop", json={}, headers={"User-Agent": "another-browser"})
    assert r.status_code == status.HTTP_200_OK
    assert r.json()["todayCount"] == 2


def test_count(client: TestClient, db_session) -> None:
    service = DropService(db_session)
    service.submit_drop("someone-else", "type", 1)
    service.submit_drop("yesterday", "type", 1, now=utcnow() - timedelta(days=1))

    r = client.get("/api/count")
    assert r.status_code == status.HTTP_200_OK
    assert r.json() == {"count": 1}


def test_store_failure_is_reported_without_details(client: TestClient) -> None:
    error = OperationalError("SELECT count(drops.id)", {}, Exception("database is locked"))
    with patch.object(DropRepository, "count_for_day", side_effect=error):
        r = client.get("/api/count")

    assert r.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert r.json() == {"error": "Internal server error"}


def test_rate_limit(client: TestClient) -> None:
    """The 101st /api request inside one window is refused."""
    # One window for the whole test, however long it takes.
    with patch.object(get_rate_limiter(), "window_seconds", 10**9):
        for _ in range(100):
            assert client.get("/api/count").status_code == status.HTTP_200_OK

        r = client.get("/api/count")
    assert r.status_code == status.HTTP_429_TOO_MANY_REQUESTS
    assert r.json() == {"error": "Too many requests"}

    # Non-API routes are not limited.
    assert client.get("/health").status_code == status.HTTP_200_OK


def test_cors_is_permissive(client: TestClient) -> None:
    r = client.get("/api/count", headers={"Origin": "https://example.org"})
    assert r.headers["access-control-allow-origin"] == "*"


def test_rate_limiter_runs_off_the_event_loop(client: TestClient) -> None:
    """A slow limiter backend must not block other requests on the loop."""
    on_loop: list[bool] = []

    def record_hit(caller: str, now: float | None = None) -> bool:
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            on_loop.append(False)
        else:
            on_loop.append(True)
        return True

    with patch.object(get_rate_limiter(), "hit", side_effect=record_hit):
        assert client.get("/api/count").status_code == status.HTTP_200_OK

    assert on_loop == [False]


def test_unexpected_error_is_reported_as_json(app) -> None:
    """Errors outside the store still answer with an error body."""
    with TestClient(app, base_url="http://test", raise_server_exceptions=False) as raw_client:
        with patch.object(DropService, "today_total", side_effect=OverflowError("int too large")):
            r = raw_client.get("/api/count")

    assert r.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert r.json() == {"error": "Internal server error"}
