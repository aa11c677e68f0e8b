"""Tests for the admin dashboard aggregates."""

from datetime import UTC, datetime, timedelta

from slot_api.services.drop_service import DropService
from slot_api.services.stats_service import RECENT_LIMIT, collect_stats

NOW = datetime(2026, 6, 15, 18, 30, tzinfo=UTC)


def _seed(db_session) -> None:
    service = DropService(db_session)
    # Outside the week.
    service.submit_drop("dev-a", "type", 5, now=NOW - timedelta(days=30))
    # Earlier this week and yesterday.
    service.submit_drop("dev-a", "speak", 5, now=NOW - timedelta(days=3))
    service.submit_drop("dev-a", "speak", 5, now=NOW - timedelta(days=1))
    # Today: three devices across two hours and two modes.
    service.submit_drop("dev-a", "type", 10, now=NOW.replace(hour=9, minute=5))
    service.submit_drop("dev-b", "draw", 20, now=NOW.replace(hour=9, minute=45))
    service.submit_drop("dev-c", "type", 30, now=NOW.replace(hour=17))
    # Admin drops count like any other.
    service.admin_drop("draw", 1, now=NOW.replace(hour=17, minute=30))


def test_counts(db_session) -> None:
    _seed(db_session)
    stats = collect_stats(db_session, now=NOW)

    assert stats["today"] == 4
    assert stats["yesterday"] == 1
    assert stats["this_week"] == 6
    assert stats["all_time"] == 7
    assert stats["unique_today"] == 4


def test_hourly_and_modes(db_session) -> None:
    _seed(db_session)
    stats = collect_stats(db_session, now=NOW)

    assert stats["hourly"] == [{"hour": 9, "count": 2}, {"hour": 17, "count": 2}]
    assert stats["modes"] == [{"mode": "draw", "count": 2}, {"mode": "type", "count": 2}]


def test_recent_is_newest_first(db_session) -> None:
    _seed(db_session)
    recent = collect_stats(db_session, now=NOW)["recent"]

    assert len(recent) == 7
    assert recent[0]["mode"] == "draw"
    assert recent[0]["created_at"] == NOW.replace(hour=17, minute=30)
    timestamps = [item["created_at"] for item in recent]
    assert timestamps == sorted(timestamps, reverse=True)
    assert set(recent[0]) == {"mode", "char_count", "created_at"}


def test_recent_is_limited(db_session) -> None:
    service = DropService(db_session)
    for minute in range(RECENT_LIMIT + 5):
        service.admin_drop("type", minute, now=NOW.replace(hour=1, minute=minute))

    recent = collect_stats(db_session, now=NOW)["recent"]
    assert len(recent) == RECENT_LIMIT
    assert recent[0]["char_count"] == RECENT_LIMIT + 4


def test_empty_ledger(db_session) -> None:
    stats = collect_stats(db_session, now=NOW)
    assert stats["today"] == 0
    assert stats["hourly"] == []
    assert stats["modes"] == []
    assert stats["recent"] == []
