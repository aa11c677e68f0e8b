"""Read-only rollups over the drop ledger for the admin dashboard."""

from __future__ import annotations

from collections import Counter
from datetime import datetime, timedelta
from typing import Final

from sqlalchemy.orm import Session

from slot_api.db.time import as_utc, to_local
from slot_api.repositories.drop_repo import DropRepository
from slot_api.services.drop_service import RequestClock

RECENT_LIMIT: Final[int] = 20
WEEK_DAYS: Final[int] = 7


def collect_stats(db: Session, now: datetime | None = None) -> dict[str, object]:
    """Return dashboard aggregates as of `now`.

    Hourly buckets use the service time zone and only include hours with at
    least one drop.

    Args:
        db: Database session
        now: Override for the reporting instant

    Returns:
        Dictionary with daily/weekly/all-time counts, distinct devices today,
        hourly and per-mode breakdowns for today, and the newest drops
    """
    clock = RequestClock.capture(now)
    drops = DropRepository(db)

    hours = Counter(to_local(created_at).hour for created_at in drops.timestamps_for_day(clock.today))
    hourly = [{"hour": hour, "count": hours[hour]} for hour in sorted(hours)]

    modes = [
        {"mode": mode, "count": count}
        for (mode, count) in drops.mode_counts_for_day(clock.today)
    ]

    recent = [
        {
            "mode": drop.mode,
            "char_count": drop.char_count,
            "created_at": as_utc(drop.created_at),
        }
        for drop in drops.list_recent(RECENT_LIMIT)
    ]

    return {
        "today": drops.count_for_day(clock.today),
        "yesterday": drops.count_for_day(clock.yesterday),
        "this_week": drops.count_since(clock.today - timedelta(days=WEEK_DAYS)),
        "all_time": drops.count_all(),
        "unique_today": drops.count_devices_for_day(clock.today),
        "hourly": hourly,
        "modes": modes,
        "recent": recent,
    }
