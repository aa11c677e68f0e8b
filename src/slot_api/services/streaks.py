"""Streak transition rule."""

from __future__ import annotations

from datetime import date, timedelta
from typing import NamedTuple


class StreakValues(NamedTuple):
    current: int
    longest: int


def advance_streak(
    current: int,
    longest: int,
    last_drop_date: date | None,
    today: date,
) -> StreakValues:
    """Return the streak counters after a successful drop on `today`.

    Dropping the day after `last_drop_date` extends the streak, a second
    drop on the same day leaves it unchanged, and anything else (a gap of
    two or more days, or no previous drop) restarts it at 1.
    """
    yesterday = today - timedelta(days=1)
    if last_drop_date == yesterday:
        new_current = current + 1
    elif last_drop_date == today:
        new_current = current
    else:
        new_current = 1
    return StreakValues(current=new_current, longest=max(longest, new_current))
