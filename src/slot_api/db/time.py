# src/slot_api/db/time.py
"""Time utilities shared by models and services.

Every calendar-day comparison in the service goes through `local_day` so
that "today" means the same thing for admission, streaks, stats and resets.
"""

from datetime import UTC, date, datetime
from functools import lru_cache
from zoneinfo import ZoneInfo

from slot_api.core.settings import settings


def utcnow() -> datetime:
    """Return the current UTC time as a timezone-aware datetime."""
    return datetime.now(UTC)


def as_utc(value: datetime) -> datetime:
    """Return `value` as an aware UTC datetime.

    SQLite hands timestamps back without tzinfo; they are stored as UTC.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


@lru_cache(maxsize=8)
def service_zone(name: str | None = None) -> ZoneInfo:
    """Return the zone used for day boundaries."""
    return ZoneInfo(name or settings.timezone)


def to_local(value: datetime) -> datetime:
    """Convert a timestamp into the service time zone."""
    return as_utc(value).astimezone(service_zone())


def local_day(value: datetime) -> date:
    """Return the calendar date of `value` in the service time zone."""
    return to_local(value).date()
